"""
Shared pytest fixtures for LiftMode tests.
"""

import pytest

from dispatch import Building, BuildingConfig, EventLog, Notifier


class RecordingDoor:
    """Door actuator that remembers every open/close it was asked to do."""

    def __init__(self):
        self.actions = []

    def open_door(self, elevator_id, floor):
        self.actions.append(("open", elevator_id, floor))

    def close_door(self, elevator_id, floor):
        self.actions.append(("close", elevator_id, floor))


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def door() -> RecordingDoor:
    return RecordingDoor()


@pytest.fixture
def building(events, door) -> Building:
    """Five floors and two cars, as in the reference installation."""
    return Building(
        config=BuildingConfig(num_floors=5, elevator_count=2),
        sink=Notifier([events]),
        door=door,
    )
