"""Elevator dispatch primitives for LiftMode."""

from .board import RequestBoard
from .building import Building
from .config import BuildingConfig
from .elevator import Elevator
from .errors import DispatchError, InvariantViolation, ValidationError
from .notifications import (
    DoorActuator,
    DoorClosed,
    DoorOpened,
    EventLog,
    FloorArrived,
    HallCallCleared,
    LoggingDoorActuator,
    LoggingSink,
    NotificationSink,
    Notifier,
)
from .simulation import MetricsSnapshot, MetricsTracker, ScheduledCall, Simulation

__all__ = [
    "Building",
    "BuildingConfig",
    "DispatchError",
    "DoorActuator",
    "DoorClosed",
    "DoorOpened",
    "Elevator",
    "EventLog",
    "FloorArrived",
    "HallCallCleared",
    "InvariantViolation",
    "LoggingDoorActuator",
    "LoggingSink",
    "MetricsSnapshot",
    "MetricsTracker",
    "NotificationSink",
    "Notifier",
    "RequestBoard",
    "ScheduledCall",
    "Simulation",
    "ValidationError",
]
