from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, ClassVar, Dict, Iterable, List, Optional, Protocol, Union

from scheduler import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FloorArrived:
    kind: ClassVar[str] = "floor_arrived"

    elevator_id: int
    floor: int

    def to_dict(self) -> dict:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class DoorOpened:
    kind: ClassVar[str] = "door_opened"

    elevator_id: int
    floor: int

    def to_dict(self) -> dict:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class DoorClosed:
    kind: ClassVar[str] = "door_closed"

    elevator_id: int
    floor: int

    def to_dict(self) -> dict:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class HallCallCleared:
    kind: ClassVar[str] = "hall_call_cleared"

    direction: Direction
    floor: int

    def to_dict(self) -> dict:
        return {"kind": self.kind, "direction": self.direction.value, "floor": self.floor}


Notification = Union[FloorArrived, DoorOpened, DoorClosed, HallCallCleared]


class NotificationSink(Protocol):
    """Receives side-effect notifications from the dispatch core."""

    def notify(self, event: Notification) -> None:
        ...


class DoorActuator(Protocol):
    """Performs the physical door cycle for one car."""

    def open_door(self, elevator_id: int, floor: int) -> None:
        ...

    def close_door(self, elevator_id: int, floor: int) -> None:
        ...


class Notifier:
    """Fans notifications out to attached sinks and per-kind hooks."""

    def __init__(self, sinks: Optional[Iterable[NotificationSink]] = None) -> None:
        self.sinks: List[NotificationSink] = list(sinks or [])
        self.event_hooks: Dict[str, List[Callable[[Notification], None]]] = {}

    def add_sink(self, sink: NotificationSink) -> None:
        self.sinks.append(sink)

    def on_event(self, kind: str, callback: Callable[[Notification], None]) -> None:
        self.event_hooks.setdefault(kind, []).append(callback)

    def notify(self, event: Notification) -> None:
        logger.debug("notify %s", event)
        for sink in self.sinks:
            sink.notify(event)
        for callback in self.event_hooks.get(event.kind, []):
            callback(event)


class EventLog:
    """Sink that keeps every notification in arrival order."""

    def __init__(self) -> None:
        self.events: List[Notification] = []

    def notify(self, event: Notification) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> List[Notification]:
        return [event for event in self.events if event.kind == kind]

    def drain(self) -> List[Notification]:
        events, self.events = self.events, []
        return events

    def __len__(self) -> int:
        return len(self.events)


class LoggingSink:
    """Renders notifications as human-readable log lines."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.log = log or logger
        self.level = level

    def notify(self, event: Notification) -> None:
        self.log.log(self.level, render(event))


class LoggingDoorActuator:
    """Door actuator that only reports the cycle; used when no hardware is wired."""

    def open_door(self, elevator_id: int, floor: int) -> None:
        logger.debug("elevator %s: opening door on floor %s", elevator_id, floor)

    def close_door(self, elevator_id: int, floor: int) -> None:
        logger.debug("elevator %s: closing door on floor %s", elevator_id, floor)


def render(event: Notification) -> str:
    if isinstance(event, FloorArrived):
        return f"elevator {event.elevator_id} is now on floor {event.floor}"
    if isinstance(event, DoorOpened):
        return f"elevator {event.elevator_id} opened door on floor {event.floor}"
    if isinstance(event, DoorClosed):
        return f"elevator {event.elevator_id} closed door on floor {event.floor}"
    return f"{event.direction.value} button on floor {event.floor} is unpressed"
