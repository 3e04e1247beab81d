# tanktrouble

The game model and client-side network protocol for a two-dimensional tank
battle fought inside a randomly generated maze. It has no dependencies
outside the standard library.

## Modules

- `tanktrouble.messages`: the binary message format. Every frame starts
  with a three-byte `FixHeader` (a type byte and a big-endian body length;
  `read_header` decodes it). Fields are described by `ScalarField` (types
  from `FieldType`: unsigned 8/16/32/64-bit integers, 64-bit floats and
  NUL-terminated UTF-8 strings) and `ArrayField` (a one-byte count followed
  by records of named values, at most 255 of them). A `MessageTemplate`
  makes empty `Message` objects; a `Message` is read and written by field
  name (`message["name"] = value`), `append` adds a record to an array
  field, `pack` encodes it and `fill` decodes it. Bad values and malformed
  data raise `MessageError`.
- `tanktrouble.codec`: the message catalogue (`MessageType`,
  `JoinRoomStatus`), `pack_message` which prefixes a message with its
  header, and `Codec`. `Codec.empty_message` builds a message of a given
  type; `Codec.handle_data` consumes every complete frame from a
  `bytearray`, leaves incomplete trailing data in it, and passes each
  message to the handler set with `Codec.register_handler`.
- `tanktrouble.objects`: `Tank` and `Shell` with their movement rules.
  `PosInfo` holds a position and heading in degrees; `MovingStatus` holds
  the movement flags. `Tank.advance` and `Shell.advance` compute one tick of
  movement; `Tank.make_shell` fires a shell from the muzzle and uses up
  one of the tank's five shells, and `Tank.return_shell` gives it back.
- `tanktrouble.block`: `Block`, an axis-aligned wall segment with its
  centre, extents and the four collision borders grown by a shell radius
  (`Block.border`). `Block.from_center` builds a one-cell wall.
- `tanktrouble.maze`: `Maze(columns, rows, grid_size, rng=None)` carves a
  random spanning tree of passages with `generate`, and `block_positions`
  lists the inner walls that follow from it.
- `tanktrouble.control`: `Operation`, the player's key presses and releases;
  `pressed` and `base` relate a stop operation to the action it ends.
- `tanktrouble.data`: `OnlineUser`, `RoomInfo`, `RoomStatus` and
  `PlayerInfo` records.
- `tanktrouble.session`: `OnlineSession`, the client state of an online
  game. Its `*_message` methods return the frames to send (login, new room,
  join room, quit room, control, UDP handshake); `feed_tcp` and `feed_udp`
  consume what the server sends. `objects`, `blocks`, `players_info`,
  `rooms` and `user_info` return thread-safe copies of the state, and a
  `SessionListener` receives callbacks on login, room updates, game start
  and game end.

## Installation

```
pip install .
```

## Examples

Building and decoding a frame:

```python
from tanktrouble.codec import Codec, MessageType, pack_message

codec = Codec()
login = codec.empty_message(MessageType.LOGIN)
login["nickname"] = "alice"
frame = pack_message(MessageType.LOGIN, login)

received = []
codec.register_handler(MessageType.LOGIN, lambda conn, msg, t: received.append(msg["nickname"]))
codec.handle_data(None, bytearray(frame))   # received == ["alice"]
```

A maze and its walls:

```python
from tanktrouble.block import Block
from tanktrouble.maze import Maze

maze = Maze(columns=10, rows=8, grid_size=50)
maze.generate()
walls = [Block(i, start, end) for i, (start, end) in enumerate(maze.block_positions(), 1)]
```

A client session:

```python
from tanktrouble.control import Operation
from tanktrouble.session import OnlineSession, SessionListener

session = OnlineSession(SessionListener(on_login_success=lambda: print("logged in")))
outgoing = session.login_message("alice")
# send `outgoing` over TCP, then pass whatever arrives to session.feed_tcp(...)
# and UDP datagrams to session.feed_udp(...)
fire = session.control_message(Operation.FIRE)
```

## What this package does not do

It opens no sockets and runs no event loop: the caller moves the bytes
between `OnlineSession` and the server. It draws nothing and has no window
or keyboard handling. It has no game server, no local single-player game
loop, no collision detection between objects and walls, and no computer
opponent.

## Running the tests

```
pip install .[test]
pytest
```