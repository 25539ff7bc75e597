from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Union

from scheduler import Action, Decision, Direction, Mode, ModeScheduler

from .board import RequestBoard
from .config import BuildingConfig
from .elevator import Elevator
from .errors import InvariantViolation, ValidationError
from .notifications import (
    DoorActuator,
    DoorClosed,
    DoorOpened,
    LoggingDoorActuator,
    NotificationSink,
    Notifier,
)

logger = logging.getLogger(__name__)


@dataclass
class Building:
    """Owns every elevator and the shared hall-call board.

    All public operations run under one re-entrant lock, so the board and each
    car are only ever mutated by one caller at a time.
    """

    config: BuildingConfig = field(default_factory=BuildingConfig)
    sink: NotificationSink = field(default_factory=Notifier)
    door: DoorActuator = field(default_factory=LoggingDoorActuator)
    scheduler: ModeScheduler = field(default_factory=ModeScheduler)
    board: RequestBoard = field(init=False)
    elevators: List[Elevator] = field(init=False)
    _lock: threading.RLock = field(init=False, repr=False, default_factory=threading.RLock)

    def __post_init__(self) -> None:
        self.board = RequestBoard(self.config.num_floors, sink=self.sink)
        self.elevators = [
            Elevator(elevator_id=i, num_floors=self.config.num_floors, sink=self.sink)
            for i in range(self.config.elevator_count)
        ]

    @property
    def num_floors(self) -> int:
        return self.config.num_floors

    def reset(self) -> None:
        """Clear every button and send all cars back to the bottom floor."""
        with self._lock:
            self.board.clear()
            for elevator in self.elevators:
                elevator.reset()
            logger.info("building reset: %d elevators on floor 0", len(self.elevators))

    def register_hall_call(self, floor: int, direction: Union[Direction, Mode, str]) -> bool:
        with self._lock:
            lit = self.board.register_hall_call(floor, direction)
            logger.debug("hall call on floor %s (%s), newly lit=%s", floor, direction, lit)
            return lit

    def request_from_cabin(self, elevator_id: int, floor: int) -> None:
        with self._lock:
            elevator = self.get_elevator(elevator_id)
            self.board.validate_floor(floor)
            elevator.press(floor)
            logger.debug(
                "elevator %s: cabin request for floor %s (mode=%s)",
                elevator_id,
                floor,
                elevator.mode.value,
            )

    def tick(self, elevator_id: int) -> Decision:
        with self._lock:
            return self.scheduler.tick(self.get_elevator(elevator_id), self.board)

    def run_until_stop(self, elevator_id: int) -> Decision:
        """Tick until the car decides to stop or finds nothing to do.

        The mode search is a single bounded pass and every non-terminal tick
        either moves the car toward a queued floor or commits to a new mode,
        so the loop always ends.
        """

        with self._lock:
            while True:
                decision = self.tick(elevator_id)
                if decision.is_terminal:
                    return decision

    def open(self, elevator_id: int) -> None:
        """Run the door cycle at the car's current floor."""
        with self._lock:
            elevator = self.get_elevator(elevator_id)
            direction = elevator.mode.direction
            if direction is None:
                raise InvariantViolation(
                    f"elevator {elevator_id} must not open its door while in neutral"
                )
            floor = elevator.floor
            self.door.open_door(elevator_id, floor)
            self.sink.notify(DoorOpened(elevator_id=elevator_id, floor=floor))
            elevator.settle_stop()
            self.board.clear_hall_call(direction, floor)
            self.door.close_door(elevator_id, floor)
            self.sink.notify(DoorClosed(elevator_id=elevator_id, floor=floor))

    def step(self, elevator_id: int) -> Decision:
        """Drive one car to its next stop and serve it, if there is one."""
        with self._lock:
            decision = self.run_until_stop(elevator_id)
            if decision.action is Action.STOP:
                self.open(elevator_id)
            return decision

    def get_elevator(self, elevator_id: int) -> Elevator:
        if not 0 <= elevator_id < len(self.elevators):
            raise ValidationError(f"there is no elevator {elevator_id}")
        return self.elevators[elevator_id]

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "num_floors": self.num_floors,
                "hall_calls": self.board.snapshot(),
                "elevators": [elevator.snapshot() for elevator in self.elevators],
            }
