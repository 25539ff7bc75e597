from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict

from .interface import Action, CarState, Decision, Direction, HallCalls, Mode
from .queues import FloorQueue
from .utils import scan_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetrievalRow:
    wanted: Direction
    arrival_mode: Mode
    step: int
    # Whether the car already travels the way the passenger wants to go,
    # in which case it may pick up riders and serve cabin stops en route.
    serves_en_route: bool


_RETRIEVAL_ROWS: Dict[Mode, _RetrievalRow] = {
    Mode.RETRIEVE_ABOVE_UP: _RetrievalRow(Direction.UP, Mode.UP, +1, True),
    Mode.RETRIEVE_BELOW_UP: _RetrievalRow(Direction.UP, Mode.UP, -1, False),
    Mode.RETRIEVE_ABOVE_DOWN: _RetrievalRow(Direction.DOWN, Mode.DOWN, +1, False),
    Mode.RETRIEVE_BELOW_DOWN: _RetrievalRow(Direction.DOWN, Mode.DOWN, -1, True),
}


class ModeScheduler:
    """Travel-mode state machine for a single elevator.

    Every call to :meth:`tick` evaluates one row of the mode table and returns
    the resulting :class:`Decision`. A ``STOP`` decision means the caller must
    run the door cycle at the current floor; ``IDLE`` means there is nothing
    to do. The scheduler only mutates the car's floor, mode and destination;
    the hall-call board and cabin queues are left to the door cycle.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Mode, Callable[[CarState, HallCalls], Action]] = {
            Mode.UP: self._tick_up,
            Mode.DOWN: self._tick_down,
            Mode.NEUTRAL: self._tick_neutral,
        }
        for mode in _RETRIEVAL_ROWS:
            self._handlers[mode] = self._tick_retrieval

    def tick(self, car: CarState, calls: HallCalls) -> Decision:
        previous = car.mode
        action = self._handlers[car.mode](car, calls)
        decision = Decision(
            action=action,
            elevator_id=car.elevator_id,
            floor=car.floor,
            mode=car.mode,
            destination=car.destination,
        )
        if action is Action.MODE_CHANGED:
            logger.debug(
                "elevator %s: %s -> %s (destination=%s)",
                car.elevator_id,
                previous.value,
                car.mode.value,
                car.destination,
            )
        return decision

    def _tick_up(self, car: CarState, calls: HallCalls) -> Action:
        return self._tick_directional(car, calls, Direction.UP, car.ascending)

    def _tick_down(self, car: CarState, calls: HallCalls) -> Action:
        return self._tick_directional(car, calls, Direction.DOWN, car.descending)

    def _tick_directional(
        self, car: CarState, calls: HallCalls, direction: Direction, queue: FloorQueue
    ) -> Action:
        if calls.is_requested(direction, car.floor) or queue.head_is(car.floor):
            return Action.STOP
        if not queue:
            car.set_mode(Mode.NEUTRAL)
            return Action.MODE_CHANGED
        return self._advance(car, +1 if direction is Direction.UP else -1)

    def _tick_retrieval(self, car: CarState, calls: HallCalls) -> Action:
        row = _RETRIEVAL_ROWS[car.mode]
        destination = car.destination
        arrived = car.floor == destination

        stop = arrived
        if row.serves_en_route and not stop:
            queue = car.ascending if row.wanted is Direction.UP else car.descending
            stop = calls.is_requested(row.wanted, car.floor) or queue.head_is(car.floor)
        if stop:
            if arrived:
                car.set_mode(row.arrival_mode)
            return Action.STOP

        if not calls.is_requested(row.wanted, destination):
            # The waiting passenger was picked up by another car or the call
            # was otherwise cleared.
            car.set_mode(Mode.NEUTRAL)
            return Action.MODE_CHANGED
        return self._advance(car, row.step)

    def _tick_neutral(self, car: CarState, calls: HallCalls) -> Action:
        higher, lower = len(car.ascending), len(car.descending)
        if higher or lower:
            car.set_mode(Mode.UP if higher > lower else Mode.DOWN)
            return Action.MODE_CHANGED

        for offset, candidate in scan_order(car.floor, calls.num_floors):
            if not calls.has_any(candidate):
                continue
            wants_up = calls.is_requested(Direction.UP, candidate)
            if offset > 0:
                mode = Mode.RETRIEVE_ABOVE_UP if wants_up else Mode.RETRIEVE_ABOVE_DOWN
            else:
                mode = Mode.RETRIEVE_BELOW_UP if wants_up else Mode.RETRIEVE_BELOW_DOWN
            car.set_mode(mode, destination=candidate)
            return Action.MODE_CHANGED
        return Action.IDLE

    def _advance(self, car: CarState, step: int) -> Action:
        if step > 0:
            car.move_up()
            return Action.MOVED_UP
        car.move_down()
        return Action.MOVED_DOWN
