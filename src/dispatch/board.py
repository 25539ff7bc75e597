from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from scheduler import Direction, Mode

from .errors import ValidationError
from .notifications import HallCallCleared, NotificationSink, Notifier


def coerce_direction(direction: Union[Direction, Mode, str]) -> Direction:
    """Map a requested hall-call direction onto a physical button.

    Only ``up`` and ``down`` have buttons; neutral and retrieval modes do not.
    """

    if isinstance(direction, Direction):
        return direction
    if isinstance(direction, Mode):
        mode = direction
    else:
        try:
            mode = Mode(str(direction).lower())
        except ValueError:
            raise ValidationError(f"unknown direction {direction!r}") from None
    if mode is Mode.UP:
        return Direction.UP
    if mode is Mode.DOWN:
        return Direction.DOWN
    raise ValidationError("there is no button for the neutral and retrieval cases")


@dataclass
class RequestBoard:
    """Hall-call flags for every floor, shared by all elevators."""

    num_floors: int
    sink: NotificationSink = field(default_factory=Notifier)
    up_requested: List[bool] = field(init=False)
    down_requested: List[bool] = field(init=False)

    def __post_init__(self) -> None:
        self.up_requested = [False] * self.num_floors
        self.down_requested = [False] * self.num_floors

    def register_hall_call(self, floor: int, direction: Union[Direction, Mode, str]) -> bool:
        """Light the hall button; returns ``False`` if it was already lit."""
        button = coerce_direction(direction)
        self.validate_floor(floor)
        if button is Direction.UP and floor == self.num_floors - 1:
            raise ValidationError("there is no up button on the topmost floor")
        if button is Direction.DOWN and floor == 0:
            raise ValidationError("there is no down button on the bottom floor")
        flags = self._flags(button)
        if flags[floor]:
            return False
        flags[floor] = True
        return True

    def clear_hall_call(self, direction: Union[Direction, Mode, str], floor: int) -> bool:
        button = coerce_direction(direction)
        self.validate_floor(floor)
        flags = self._flags(button)
        if not flags[floor]:
            return False
        flags[floor] = False
        self.sink.notify(HallCallCleared(direction=button, floor=floor))
        return True

    def is_requested(self, direction: Union[Direction, Mode, str], floor: int) -> bool:
        button = coerce_direction(direction)
        self.validate_floor(floor)
        return self._flags(button)[floor]

    def has_any(self, floor: int) -> bool:
        self.validate_floor(floor)
        return self.up_requested[floor] or self.down_requested[floor]

    def clear(self) -> None:
        for floor in range(self.num_floors):
            self.up_requested[floor] = False
            self.down_requested[floor] = False

    def validate_floor(self, floor: int) -> None:
        if not 0 <= floor < self.num_floors:
            raise ValidationError(f"there is no floor {floor}")

    def snapshot(self) -> dict:
        return {
            "up": [f for f in range(self.num_floors) if self.up_requested[f]],
            "down": [f for f in range(self.num_floors) if self.down_requested[f]],
        }

    def _flags(self, direction: Direction) -> List[bool]:
        return self.up_requested if direction is Direction.UP else self.down_requested
