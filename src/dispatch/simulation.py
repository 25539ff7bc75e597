from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from scheduler import Action, Decision, Direction

from .board import coerce_direction
from .building import Building
from .errors import ValidationError
from .notifications import FloorArrived, HallCallCleared, Notification, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledCall:
    """A hall call or cabin request to inject at a given tick."""

    time: int
    floor: int
    direction: Optional[str] = None
    elevator_id: Optional[int] = None

    @property
    def is_hall_call(self) -> bool:
        return self.elevator_id is None


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    stops: int
    floors_travelled: int
    pending_hall_calls: int


class MetricsTracker:
    """Collects hall-call waiting times and car movement counters."""

    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.stops: int = 0
        self.floors_travelled: int = 0
        self._registered_at: Dict[Tuple[Direction, int], int] = {}

    def record_registration(self, direction: Direction, floor: int, time_step: int) -> None:
        self._registered_at.setdefault((direction, floor), time_step)

    def record_cleared(self, direction: Direction, floor: int, time_step: int) -> None:
        registered = self._registered_at.pop((direction, floor), None)
        if registered is not None:
            self.wait_times.append(time_step - registered)

    def record_stop(self) -> None:
        self.stops += 1

    def record_move(self) -> None:
        self.floors_travelled += 1

    def reset(self) -> None:
        self.wait_times.clear()
        self.stops = 0
        self.floors_travelled = 0
        self._registered_at.clear()

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        return float(sorted_vals[f] * (c - k) + sorted_vals[c] * (k - f))

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            stops=self.stops,
            floors_travelled=self.floors_travelled,
            pending_hall_calls=len(self._registered_at),
        )


class Simulation:
    """Time-stepped driver: every tick advances each car by one scheduler step."""

    def __init__(
        self,
        building: Building,
        calls: Optional[List[ScheduledCall]] = None,
        metrics_hook_interval: int = 1,
    ) -> None:
        self.building = building
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        self.metrics_hook_interval = max(1, metrics_hook_interval)
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._pending: Dict[int, List[ScheduledCall]] = defaultdict(list)
        for call in calls or []:
            self.schedule(call)
        self._attach_metrics()

    def _attach_metrics(self) -> None:
        sink = self.building.sink
        if not isinstance(sink, Notifier):
            logger.warning("building sink %r has no hooks; waiting times are not tracked", sink)
            return
        sink.on_event(HallCallCleared.kind, self._on_cleared)
        sink.on_event(FloorArrived.kind, self._on_arrived)

    def _on_cleared(self, event: Notification) -> None:
        self.metrics.record_cleared(event.direction, event.floor, self.current_time)

    def _on_arrived(self, event: Notification) -> None:
        self.metrics.record_move()

    def schedule(self, call: ScheduledCall) -> None:
        if call.time < self.current_time:
            raise ValidationError(f"cannot schedule a call in the past (t={call.time})")
        self._pending[call.time].append(call)

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def step(self) -> List[Decision]:
        self._apply_scheduled_calls()
        decisions: List[Decision] = []
        for elevator in self.building.elevators:
            decision = self.building.tick(elevator.elevator_id)
            if decision.action is Action.STOP:
                self.building.open(elevator.elevator_id)
                self.metrics.record_stop()
                self._emit("stop", decision)
            decisions.append(decision)

        if self.current_time % self.metrics_hook_interval == 0:
            self._emit("metrics", {"metrics": self.metrics.snapshot(self.current_time)})

        self.current_time += 1
        return decisions

    def reset(self) -> None:
        self.building.reset()
        self.metrics.reset()
        self._pending.clear()
        self.current_time = 0

    def register_hall_call(self, floor: int, direction: str) -> bool:
        lit = self.building.register_hall_call(floor, direction)
        if lit:
            self.metrics.record_registration(coerce_direction(direction), floor, self.current_time)
        return lit

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _apply_scheduled_calls(self) -> None:
        for call in self._pending.pop(self.current_time, []):
            if call.is_hall_call:
                self.register_hall_call(call.floor, call.direction or "")
            else:
                self.building.request_from_cabin(call.elevator_id, call.floor)
            self._emit("call", call)

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
