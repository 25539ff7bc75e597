"""Per-elevator travel-mode scheduling for LiftMode."""

from .interface import Action, CarState, Decision, Direction, HallCalls, Mode
from .mode_table import ModeScheduler
from .queues import FloorQueue
from .utils import scan_order

__all__ = [
    "Action",
    "CarState",
    "Decision",
    "Direction",
    "FloorQueue",
    "HallCalls",
    "Mode",
    "ModeScheduler",
    "scan_order",
]
