"""Player control operations."""

from __future__ import annotations

from enum import IntEnum


class Operation(IntEnum):
    """A key press or release; the value is the action code sent to the server."""

    FORWARD = 0
    BACKWARD = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    FIRE = 4
    STOP_FORWARD = 5
    STOP_BACKWARD = 6
    STOP_ROTATE_CW = 7
    STOP_ROTATE_CCW = 8

    def pressed(self) -> bool:
        """True for operations that start an action, False for those that stop one."""
        return not self.name.startswith("STOP_")

    def base(self) -> Operation:
        """The action this operation starts or stops."""
        if self.pressed():
            return self
        return Operation[self.name[len("STOP_"):]]