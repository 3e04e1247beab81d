"""Client side of an online game, independent of any transport.

``OnlineSession`` builds the frames a client sends and consumes the bytes it
receives over TCP and UDP. The state it keeps (rooms, players, walls and
the latest object snapshot) can be read from other threads.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Optional

from tanktrouble.block import Block
from tanktrouble.codec import Codec, JoinRoomStatus, MessageType, pack_message
from tanktrouble.control import Operation
from tanktrouble.data import OnlineUser, PlayerInfo, RoomInfo, RoomStatus
from tanktrouble.messages import HEADER_LEN, Message, read_header
from tanktrouble.objects import BLACK, Color, GameObject, Shell, Tank

RED: Color = (1.0, 0.0, 0.0)
BLUE: Color = (0.0, 0.0, 1.0)
GREEN: Color = (0.0, 1.0, 0.0)
YELLOW: Color = (1.0, 1.0, 0.0)

PLAYER_COLORS: dict[int, Color] = {1: RED, 2: BLUE, 3: GREEN, 4: YELLOW}

DEFAULT_GRID_SIZE = 50
DEFAULT_MAX_TANK_ID = 4

Callback = Optional[Callable[[], None]]


@dataclass
class SessionListener:
    """Callbacks fired when the session's state changes; any may be None."""

    on_login_success: Callback = None
    on_rooms_update: Callback = None
    on_game_on: Callback = None
    on_game_off: Callback = None


def _fire(callback: Callback) -> None:
    if callback is not None:
        callback()


class OnlineSession:
    """Protocol state of one logged-in client."""

    def __init__(
        self,
        listener: Optional[SessionListener] = None,
        *,
        grid_size: int = DEFAULT_GRID_SIZE,
        max_tank_id: int = DEFAULT_MAX_TANK_ID,
    ) -> None:
        self.listener = listener if listener is not None else SessionListener()
        self.grid_size = grid_size
        self.max_tank_id = max_tank_id
        self.nickname = ""
        self.user_id = 0
        self.handshake_success = False

        self._codec = Codec()
        self._tcp_buffer = bytearray()
        self._lock = threading.Lock()
        self._objects: dict[int, GameObject] = {}
        self._blocks: dict[int, Block] = {}
        self._players: dict[int, PlayerInfo] = {}
        self._rooms: list[RoomInfo] = []
        self._joined_room_id = 0
        self._user = OnlineUser()

        handlers = {
            MessageType.LOGIN_RESP: self._on_login,
            MessageType.ROOM_INFO: self._on_rooms_update,
            MessageType.JOIN_ROOM_RESP: self._on_join_room,
            MessageType.GAME_ON: self._on_game_on,
            MessageType.UPDATE_BLOCKS: self._on_blocks_update,
            MessageType.UPDATE_SCORES: self._on_scores_update,
            MessageType.GAME_OFF: self._on_game_off,
        }
        for message_type, handler in handlers.items():
            self._codec.register_handler(message_type, handler)

    # ---------------------------------------------------------------- outgoing

    def _frame(self, message_type: MessageType, **values: Any) -> bytes:
        message = self._codec.empty_message(message_type)
        for name, value in values.items():
            message[name] = value
        return pack_message(message_type, message)

    def login_message(self, nickname: str) -> bytes:
        """Remember ``nickname`` and return the login frame for it."""
        self.nickname = nickname
        return self._frame(MessageType.LOGIN, nickname=nickname)

    def new_room_message(self, name: str, capacity: int) -> bytes:
        return self._frame(MessageType.NEW_ROOM, room_name=name, player_num=capacity)

    def join_room_message(self, room_id: int) -> bytes:
        return self._frame(MessageType.JOIN_ROOM, join_room_id=room_id)

    def quit_room_message(self) -> bytes:
        """Return the frame leaving the current room and forget that room."""
        frame = self._frame(MessageType.QUIT_ROOM, msg="quit")
        with self._lock:
            self._joined_room_id = 0
        return frame

    def control_message(self, operation: Operation) -> bytes:
        """Frame telling the server an action started or stopped."""
        operation = Operation(operation)
        return self._frame(
            MessageType.CONTROL,
            action=int(operation.base()),
            enable=1 if operation.pressed() else 0,
        )

    def handshake_message(self) -> bytes:
        """UDP handshake datagram; only available after a successful login."""
        if not self.user_id:
            raise RuntimeError("no user id yet: log in first")
        return self._frame(MessageType.UDP_HANDSHAKE, user_id=self.user_id, msg="handshake")

    # ---------------------------------------------------------------- incoming

    def feed_tcp(self, data: bytes) -> int:
        """Buffer stream data and handle every complete frame; return how many."""
        self._tcp_buffer.extend(data)
        return self._codec.handle_data(None, self._tcp_buffer)

    def feed_udp(self, datagram: bytes) -> bool:
        """Handle one datagram; return whether it carried a known complete frame."""
        if len(datagram) < HEADER_LEN:
            return False
        header = read_header(datagram)
        end = HEADER_LEN + header.message_len
        if len(datagram) < end:
            return False
        body = bytes(datagram[HEADER_LEN:end])
        if header.message_type == MessageType.UPDATE_OBJECTS:
            message = self._codec.empty_message(MessageType.UPDATE_OBJECTS)
            message.fill(body)
            self._on_objects_update(message)
            return True
        if header.message_type == MessageType.UDP_HANDSHAKE:
            message = self._codec.empty_message(MessageType.UDP_HANDSHAKE)
            message.fill(body)
            if message["msg"] == "handshake":
                self.handshake_success = True
            return True
        return False

    # ----------------------------------------------------------------- readers

    def objects(self) -> dict[int, GameObject]:
        """Latest snapshot of tanks and shells, keyed by id."""
        with self._lock:
            return dict(self._objects)

    def blocks(self) -> dict[int, Block]:
        with self._lock:
            return dict(self._blocks)

    def players_info(self) -> list[PlayerInfo]:
        """Players ordered by their id."""
        with self._lock:
            return [replace(self._players[k]) for k in sorted(self._players)]

    def rooms(self) -> tuple[list[RoomInfo], int]:
        """Listed rooms and the id of the joined room (0 for none)."""
        with self._lock:
            return list(self._rooms), self._joined_room_id

    def user_info(self) -> OnlineUser:
        with self._lock:
            return replace(self._user)

    # ---------------------------------------------------------------- handlers

    def _on_login(self, conn: Any, message: Message, receive_time: Any) -> None:
        name = message["nickname"]
        self.user_id = message["user_id"]
        if name != self.nickname:
            return
        with self._lock:
            self._user = OnlineUser(name, message["score"])
        _fire(self.listener.on_login_success)

    def _on_rooms_update(self, conn: Any, message: Message, receive_time: Any) -> None:
        rooms = [
            RoomInfo(
                r["room_id"],
                r["room_name"],
                r["room_cap"],
                r["room_players"],
                RoomStatus.WAITING if r["room_players"] < r["room_cap"] else RoomStatus.PLAYING,
            )
            for r in message["room_infos"]
        ]
        with self._lock:
            self._rooms = rooms
        _fire(self.listener.on_rooms_update)

    def _on_join_room(self, conn: Any, message: Message, receive_time: Any) -> None:
        if message["operation_status"] == JoinRoomStatus.SUCCESS:
            with self._lock:
                self._joined_room_id = message["join_room_id"]

    def _on_game_on(self, conn: Any, message: Message, receive_time: Any) -> None:
        with self._lock:
            for p in message["players_info"]:
                player_id = p["player_id"]
                self._players[player_id] = PlayerInfo(
                    p["player_nickname"], PLAYER_COLORS.get(player_id, BLACK)
                )
        _fire(self.listener.on_game_on)

    def _on_blocks_update(self, conn: Any, message: Message, receive_time: Any) -> None:
        blocks = {
            index: Block.from_center(
                b["is_horizon"] == 1, (b["center_x"], b["center_y"]), self.grid_size
            )
            for index, b in enumerate(message["blocks"], start=1)
        }
        with self._lock:
            self._blocks = blocks

    def _on_objects_update(self, message: Message) -> None:
        snapshot: dict[int, GameObject] = {}
        for t in message["tanks"]:
            tank_id = t["id"]
            snapshot[tank_id] = Tank(
                tank_id,
                (t["center_x"], t["center_y"]),
                t["angle"],
                PLAYER_COLORS.get(tank_id, BLACK),
            )
        for shell_id, s in enumerate(message["shells"], start=self.max_tank_id + 1):
            snapshot[shell_id] = Shell(shell_id, (s["x"], s["y"]), 0.0, 0)
        with self._lock:
            self._objects = snapshot

    def _on_scores_update(self, conn: Any, message: Message, receive_time: Any) -> None:
        with self._lock:
            for s in message["scores"]:
                player = self._players.setdefault(s["player_id"], PlayerInfo())
                player.score = s["score"]

    def _on_game_off(self, conn: Any, message: Message, receive_time: Any) -> None:
        if message["msg"] == "off":
            _fire(self.listener.on_game_off)