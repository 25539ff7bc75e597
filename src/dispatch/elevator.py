from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from scheduler import FloorQueue, Mode

from .errors import InvariantViolation
from .notifications import FloorArrived, NotificationSink, Notifier

# Retrieval modes whose travel direction is opposite to the rider's; a cabin
# press in these modes restarts the mode search.
_RESET_ON_CABIN_REQUEST = (Mode.RETRIEVE_ABOVE_DOWN, Mode.RETRIEVE_BELOW_UP)


@dataclass
class Elevator:
    """State of a single car: position, travel mode and cabin requests."""

    elevator_id: int
    num_floors: int
    sink: NotificationSink = field(default_factory=Notifier, repr=False)
    floor: int = 0
    mode: Mode = Mode.NEUTRAL
    destination: Optional[int] = None
    ascending: FloorQueue = field(default_factory=FloorQueue)
    descending: FloorQueue = field(default_factory=lambda: FloorQueue(descending=True))

    def set_mode(self, mode: Mode, destination: Optional[int] = None) -> None:
        if mode.is_retrieval:
            if destination is None or not 0 <= destination < self.num_floors:
                raise InvariantViolation(
                    f"{mode.value} needs a destination inside the shaft, got {destination}"
                )
        elif destination is not None:
            raise InvariantViolation(f"{mode.value} does not take a destination")
        self.mode = mode
        self.destination = destination

    def press(self, floor: int) -> None:
        """Route a cabin request into the ascending or descending queue."""
        if self.mode in _RESET_ON_CABIN_REQUEST:
            self.set_mode(Mode.NEUTRAL)

        if floor > self.floor:
            self.ascending.push(floor)
        elif floor < self.floor:
            self.descending.push(floor)
        elif self.mode in (Mode.UP, Mode.RETRIEVE_ABOVE_UP):
            self.ascending.push(floor)
        elif self.mode in (Mode.DOWN, Mode.RETRIEVE_BELOW_DOWN):
            self.descending.push(floor)
        else:
            # Either direction would do for an idle car.
            self.set_mode(Mode.UP)
            self.ascending.push(floor)

    def settle_stop(self) -> None:
        """Drop cabin requests satisfied by a stop at the current floor."""
        if self.ascending.head_is(self.floor):
            self.ascending.pop()
        if self.descending.head_is(self.floor):
            self.descending.pop()

    def move_up(self) -> None:
        if self.floor >= self.num_floors - 1:
            raise InvariantViolation(f"elevator {self.elevator_id} cannot move above the top floor")
        self.floor += 1
        self.sink.notify(FloorArrived(elevator_id=self.elevator_id, floor=self.floor))

    def move_down(self) -> None:
        if self.floor <= 0:
            raise InvariantViolation(f"elevator {self.elevator_id} cannot move below the bottom floor")
        self.floor -= 1
        self.sink.notify(FloorArrived(elevator_id=self.elevator_id, floor=self.floor))

    def move_to_bottom_floor(self) -> None:
        self.floor = 0
        self.sink.notify(FloorArrived(elevator_id=self.elevator_id, floor=self.floor))

    def reset(self) -> None:
        self.move_to_bottom_floor()
        self.set_mode(Mode.NEUTRAL)
        self.ascending.clear()
        self.descending.clear()

    def snapshot(self) -> dict:
        return {
            "id": self.elevator_id,
            "floor": self.floor,
            "mode": self.mode.value,
            "destination": self.destination,
            "ascending": self.ascending.to_list(),
            "descending": self.descending.to_list(),
        }
