from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .queues import FloorQueue


class Direction(str, Enum):
    """Direction of a hall-call button."""

    UP = "up"
    DOWN = "down"


class Mode(str, Enum):
    """Travel mode of a single elevator.

    "Above"/"below" give the position of the waiting passenger relative to
    the elevator, "up"/"down" the direction that passenger wants to travel.
    """

    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"
    RETRIEVE_ABOVE_UP = "retrieve_above_up"
    RETRIEVE_ABOVE_DOWN = "retrieve_above_down"
    RETRIEVE_BELOW_UP = "retrieve_below_up"
    RETRIEVE_BELOW_DOWN = "retrieve_below_down"

    @property
    def is_retrieval(self) -> bool:
        return self in _RETRIEVAL_MODES

    @property
    def direction(self) -> Optional[Direction]:
        """Hall-call family served by this mode, ``None`` for neutral."""
        if self in _UP_FAMILY:
            return Direction.UP
        if self in _DOWN_FAMILY:
            return Direction.DOWN
        return None


_RETRIEVAL_MODES = frozenset(
    {
        Mode.RETRIEVE_ABOVE_UP,
        Mode.RETRIEVE_ABOVE_DOWN,
        Mode.RETRIEVE_BELOW_UP,
        Mode.RETRIEVE_BELOW_DOWN,
    }
)
_UP_FAMILY = frozenset({Mode.UP, Mode.RETRIEVE_ABOVE_UP, Mode.RETRIEVE_BELOW_UP})
_DOWN_FAMILY = frozenset({Mode.DOWN, Mode.RETRIEVE_ABOVE_DOWN, Mode.RETRIEVE_BELOW_DOWN})


class Action(str, Enum):
    """Outcome of one scheduler tick."""

    MOVED_UP = "moved_up"
    MOVED_DOWN = "moved_down"
    MODE_CHANGED = "mode_changed"
    STOP = "stop"
    IDLE = "idle"


@dataclass(frozen=True)
class Decision:
    """What a tick decided, plus the elevator state right after it."""

    action: Action
    elevator_id: int
    floor: int
    mode: Mode
    destination: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.action in (Action.STOP, Action.IDLE)

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "elevator_id": self.elevator_id,
            "floor": self.floor,
            "mode": self.mode.value,
            "destination": self.destination,
        }


class CarState(Protocol):
    """Mutable per-elevator state the mode table works on."""

    elevator_id: int
    floor: int
    mode: Mode
    destination: Optional[int]
    ascending: FloorQueue
    descending: FloorQueue

    def set_mode(self, mode: Mode, destination: Optional[int] = None) -> None:
        ...

    def move_up(self) -> None:
        ...

    def move_down(self) -> None:
        ...


class HallCalls(Protocol):
    """Read-only view of the shared hall-call flags."""

    num_floors: int

    def is_requested(self, direction: Direction, floor: int) -> bool:
        ...

    def has_any(self, floor: int) -> bool:
        ...
