"""Plain records shared between the game sessions and the interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from tanktrouble.objects import BLACK, Color


@dataclass
class OnlineUser:
    nickname: str = ""
    score: int = 0


class RoomStatus(IntEnum):
    NEW = 0
    WAITING = 1
    PLAYING = 2


@dataclass(frozen=True)
class RoomInfo:
    """A game room as listed by the server."""

    room_id: int
    name: str
    capacity: int
    player_num: int
    status: RoomStatus

    def __post_init__(self) -> None:
        for name in ("room_id", "capacity", "player_num"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must fit in one byte, got {value}")
        object.__setattr__(self, "status", RoomStatus(self.status))


@dataclass
class PlayerInfo:
    nickname: str = ""
    color: Color = BLACK
    score: int = 0