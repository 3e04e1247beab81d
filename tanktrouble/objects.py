"""Movable game objects: tanks and the shells they fire.

Angles are in degrees, counter-clockwise, with 0 pointing right and 90
pointing up; screen y grows downwards.
"""

from __future__ import annotations

import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntFlag

Vec = tuple[float, float]
Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)


class MovingStatus(IntFlag):
    STATIONARY = 1
    FORWARD = 2
    BACKWARD = 4
    ROTATING_CW = 8
    ROTATING_CCW = 16


class ObjectType(Enum):
    TANK = "tank"
    SHELL = "shell"


def _polar_to_cart(angle: float, radius: float, origin: Vec) -> Vec:
    rad = math.radians(angle)
    return (origin[0] + radius * math.cos(rad), origin[1] - radius * math.sin(rad))


@dataclass(frozen=True)
class PosInfo:
    """Position and heading of an object."""

    pos: Vec = (0.0, 0.0)
    angle: float = 0.0

    def __post_init__(self) -> None:
        x, y = self.pos
        object.__setattr__(self, "pos", (float(x), float(y)))
        object.__setattr__(self, "angle", float(self.angle))

    @classmethod
    def invalid(cls) -> PosInfo:
        big = sys.float_info.max
        return cls((big, big), big)

    def is_valid(self) -> bool:
        big = sys.float_info.max
        return self.pos[0] != big and self.pos[1] != big and self.angle != big


class GameObject(ABC):
    """An object with a current and a pending next position."""

    def __init__(self, object_id: int, pos: Vec, angle: float, color: Color) -> None:
        self.id = object_id
        self.position = PosInfo(pos, angle)
        self.next_pos = PosInfo()
        self.moving_status = MovingStatus.STATIONARY
        self.color: Color = tuple(color)  # type: ignore[assignment]

    @property
    @abstractmethod
    def type(self) -> ObjectType:
        """Kind of object."""

    @abstractmethod
    def next_position(self, moving_step: int = 0, rotation_step: int = 0) -> PosInfo:
        """Compute, remember and return where the object goes next."""

    def reset_next_position(self, next_pos: PosInfo) -> None:
        self.next_pos = next_pos

    def move_to_next_position(self) -> None:
        self.position = self.next_pos


class Shell(GameObject):
    """A shell flying in a straight line until its bounces run out."""

    RADIUS = 2.5
    INITIAL_TTL = 10
    MOVING_STEP = 1

    def __init__(self, shell_id: int, pos: Vec, angle: float, tank_id: int) -> None:
        super().__init__(shell_id, pos, angle, BLACK)
        self.tank_id = tank_id
        self.ttl = self.INITIAL_TTL
        self.moving_status = MovingStatus.FORWARD

    @property
    def type(self) -> ObjectType:
        return ObjectType.SHELL

    def next_position(self, moving_step: int = 0, rotation_step: int = 0) -> PosInfo:
        self.next_pos = self.advance(self.position, moving_step)
        return self.next_pos

    @staticmethod
    def advance(cur: PosInfo, moving_step: int = 0) -> PosInfo:
        """Position one step ahead of ``cur``; a step of 0 means the default step."""
        step = moving_step or Shell.MOVING_STEP
        return PosInfo(_polar_to_cart(cur.angle, step, cur.pos), cur.angle)

    def count_down(self) -> int:
        """Return the remaining bounces, then use one up."""
        ttl = self.ttl
        self.ttl -= 1
        return ttl


class Tank(GameObject):
    """A player's tank."""

    WIDTH = 20
    HEIGHT = 28
    ROTATING_STEP = 3
    MOVING_STEP = 1
    INITIAL_SHELLS = 5
    MUZZLE_DISTANCE = 15

    def __init__(self, tank_id: int, pos: Vec, angle: float, color: Color) -> None:
        super().__init__(tank_id, pos, angle, color)
        self.remaining_shells = self.INITIAL_SHELLS
        self._corners = self._compute_corners()

    @property
    def type(self) -> ObjectType:
        return ObjectType.TANK

    def _compute_corners(self) -> tuple[Vec, Vec, Vec, Vec]:
        x, y = self.position.pos
        rad = math.radians(self.position.angle)
        hx, hy = math.cos(rad), -math.sin(rad)
        lx, ly = hy, -hx
        half_len, half_wid = self.HEIGHT / 2, self.WIDTH / 2
        fx, fy = x + hx * half_len, y + hy * half_len
        bx, by = x - hx * half_len, y - hy * half_len
        return (
            (fx + lx * half_wid, fy + ly * half_wid),
            (fx - lx * half_wid, fy - ly * half_wid),
            (bx + lx * half_wid, by + ly * half_wid),
            (bx - lx * half_wid, by - ly * half_wid),
        )

    def corners(self) -> tuple[Vec, Vec, Vec, Vec]:
        """Front-left, front-right, back-left and back-right corners."""
        return self._corners

    def next_position(self, moving_step: int = 0, rotation_step: int = 0) -> PosInfo:
        self.next_pos = self.advance(self.position, self.moving_status, moving_step, rotation_step)
        return self.next_pos

    @staticmethod
    def advance(cur: PosInfo, status: int, moving_step: int = 0, rotation_step: int = 0) -> PosInfo:
        """Position after one tick with the given moving status."""
        step = moving_step or Tank.MOVING_STEP
        rotation = rotation_step or Tank.ROTATING_STEP
        angle = cur.angle
        pos = cur.pos
        if status & MovingStatus.ROTATING_CW:
            angle = float(math.fmod(int(360 + cur.angle - rotation), 360))
        if status & MovingStatus.ROTATING_CCW:
            angle = float(math.fmod(int(cur.angle + rotation), 360))
        if status & MovingStatus.FORWARD:
            pos = _polar_to_cart(angle, step, cur.pos)
        if status & MovingStatus.BACKWARD:
            pos = _polar_to_cart(angle + 180, step, cur.pos)
        return PosInfo(pos, angle)

    def move_to_next_position(self) -> None:
        super().move_to_next_position()
        self._corners = self._compute_corners()

    def stop(self) -> None:
        self.moving_status = MovingStatus.STATIONARY

    def _toggle(self, flag: MovingStatus, opposite: MovingStatus, enable: bool) -> None:
        if enable:
            self.moving_status = (self.moving_status & ~opposite) | flag
        else:
            self.moving_status &= ~flag

    def forward(self, enable: bool) -> None:
        self._toggle(MovingStatus.FORWARD, MovingStatus.BACKWARD, enable)

    def backward(self, enable: bool) -> None:
        self._toggle(MovingStatus.BACKWARD, MovingStatus.FORWARD, enable)

    def rotate_cw(self, enable: bool) -> None:
        self._toggle(MovingStatus.ROTATING_CW, MovingStatus.ROTATING_CCW, enable)

    def rotate_ccw(self, enable: bool) -> None:
        self._toggle(MovingStatus.ROTATING_CCW, MovingStatus.ROTATING_CW, enable)

    @property
    def is_forwarding(self) -> bool:
        return bool(self.moving_status & MovingStatus.FORWARD)

    @property
    def is_backwarding(self) -> bool:
        return bool(self.moving_status & MovingStatus.BACKWARD)

    @property
    def is_rotating_cw(self) -> bool:
        return bool(self.moving_status & MovingStatus.ROTATING_CW)

    @property
    def is_rotating_ccw(self) -> bool:
        return bool(self.moving_status & MovingStatus.ROTATING_CCW)

    def make_shell(self, shell_id: int) -> Shell:
        """Fire a shell from the muzzle, using up one of the tank's shells."""
        self.remaining_shells -= 1
        pos = _polar_to_cart(self.position.angle, self.MUZZLE_DISTANCE, self.position.pos)
        return Shell(shell_id, pos, self.position.angle, self.id)

    def return_shell(self) -> None:
        self.remaining_shells += 1