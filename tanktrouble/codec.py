"""Message types of the game protocol and a framing codec for them."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum
from typing import Any, Optional

from tanktrouble.messages import (
    HEADER_LEN,
    ArrayField,
    FieldType,
    FixHeader,
    Message,
    MessageTemplate,
    ScalarField,
    read_header,
)


class MessageType(IntEnum):
    LOGIN = 0x10
    LOGIN_RESP = 0x11
    UDP_HANDSHAKE = 0x12
    NEW_ROOM = 0x20
    ROOM_INFO = 0x21
    JOIN_ROOM = 0x22
    JOIN_ROOM_RESP = 0x23
    QUIT_ROOM = 0x24
    GAME_ON = 0x30
    UPDATE_BLOCKS = 0x31
    UPDATE_OBJECTS = 0x32
    UPDATE_SCORES = 0x33
    GAME_OFF = 0x34
    CONTROL = 0x40


class JoinRoomStatus(IntEnum):
    SUCCESS = 1
    ERR_IS_IN_ROOM = 2
    ERR_ROOM_NOT_EXIST = 3


MessageHandler = Callable[[Any, Message, Any], None]

_U8 = FieldType.UINT8
_U32 = FieldType.UINT32
_F64 = FieldType.FLOAT64
_STR = FieldType.STRING

_TEMPLATES: dict[int, MessageTemplate] = {
    MessageType.LOGIN: MessageTemplate((ScalarField("nickname", _STR),)),
    MessageType.LOGIN_RESP: MessageTemplate((
        ScalarField("nickname", _STR),
        ScalarField("score", _U32),
        ScalarField("user_id", _U32),
    )),
    MessageType.UDP_HANDSHAKE: MessageTemplate((
        ScalarField("user_id", _U32),
        ScalarField("msg", _STR),
    )),
    MessageType.NEW_ROOM: MessageTemplate((
        ScalarField("room_name", _STR),
        ScalarField("player_num", _U8),
    )),
    MessageType.ROOM_INFO: MessageTemplate((
        ArrayField("room_infos", (
            ("room_id", _U8), ("room_name", _STR),
            ("room_cap", _U8), ("room_players", _U8),
        )),
    )),
    MessageType.JOIN_ROOM: MessageTemplate((ScalarField("join_room_id", _U8),)),
    MessageType.JOIN_ROOM_RESP: MessageTemplate((
        ScalarField("join_room_id", _U8),
        ScalarField("operation_status", _U8),
    )),
    MessageType.QUIT_ROOM: MessageTemplate((ScalarField("msg", _STR),)),
    MessageType.GAME_ON: MessageTemplate((
        ArrayField("players_info", (("player_id", _U8), ("player_nickname", _STR))),
    )),
    # Coordinates travel as the 64-bit pattern of an IEEE double.
    MessageType.UPDATE_BLOCKS: MessageTemplate((
        ArrayField("blocks", (("is_horizon", _U8), ("center_x", _F64), ("center_y", _F64))),
    )),
    MessageType.UPDATE_OBJECTS: MessageTemplate((
        ArrayField("tanks", (
            ("id", _U8), ("center_x", _F64), ("center_y", _F64), ("angle", _F64),
        )),
        ArrayField("shells", (("x", _F64), ("y", _F64))),
    )),
    MessageType.UPDATE_SCORES: MessageTemplate((
        ArrayField("scores", (("player_id", _U8), ("score", _U32))),
    )),
    MessageType.GAME_OFF: MessageTemplate((ScalarField("msg", _STR),)),
    MessageType.CONTROL: MessageTemplate((
        ScalarField("action", _U8),
        ScalarField("enable", _U8),
    )),
}


def pack_message(message_type: int, message: Message) -> bytes:
    """Frame ``message`` with its header, ready to send."""
    body = message.pack()
    return FixHeader(int(message_type), len(body)).pack() + body


class Codec:
    """Builds protocol messages and dispatches complete frames to handlers."""

    def __init__(self) -> None:
        self._templates = dict(_TEMPLATES)
        self._handlers: dict[int, Optional[MessageHandler]] = {}

    def empty_message(self, message_type: int) -> Message:
        """A message of the given type with default values; empty if the type is unknown."""
        template = self._templates.get(message_type)
        return template.new_message() if template is not None else Message()

    def register_handler(self, message_type: int, handler: Optional[MessageHandler]) -> None:
        self._handlers[int(message_type)] = handler

    def handle_data(self, conn: Any, buffer: bytearray, receive_time: Any = None) -> int:
        """Consume every complete frame in ``buffer`` and dispatch it.

        Incomplete trailing data stays in the buffer. Returns the number of
        frames consumed.
        """
        consumed = 0
        while len(buffer) >= HEADER_LEN:
            header = read_header(buffer)
            end = HEADER_LEN + header.message_len
            if len(buffer) < end:
                break
            body = bytes(buffer[HEADER_LEN:end])
            del buffer[:end]
            consumed += 1
            template = self._templates.get(header.message_type)
            if template is None:
                continue
            message = template.new_message()
            message.fill(body)
            handler = self._handlers.get(header.message_type)
            if handler:
                handler(conn, message, receive_time)
        return consumed