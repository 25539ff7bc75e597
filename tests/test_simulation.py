import pytest

from dispatch import Building, BuildingConfig, ScheduledCall, Simulation, ValidationError
from scheduler import Action


def test_both_cars_answer_the_same_call_and_wait_is_measured():
    simulation = Simulation(Building(), calls=[ScheduledCall(time=0, floor=3, direction="up")])
    stops = []
    simulation.on_event("stop", stops.append)

    simulation.run(10)

    metrics = simulation.metrics.snapshot(simulation.current_time)
    assert metrics.average_wait == 4.0
    assert metrics.wait_p95 == 4.0
    assert metrics.stops == 2
    assert metrics.floors_travelled == 6
    assert metrics.pending_hall_calls == 0
    assert [(d.elevator_id, d.floor) for d in stops] == [(0, 3), (1, 3)]


def test_scheduled_cabin_request_moves_only_that_car():
    simulation = Simulation(Building(), calls=[ScheduledCall(time=0, floor=2, elevator_id=1)])
    decisions = [simulation.step() for _ in range(4)]

    assert [d.action for d in decisions[-1]] == [Action.IDLE, Action.STOP]
    assert simulation.building.get_elevator(1).floor == 2
    assert simulation.building.get_elevator(0).floor == 0
    assert simulation.metrics.stops == 1


def test_metrics_hook_interval():
    simulation = Simulation(Building(), metrics_hook_interval=5)
    emitted = []
    simulation.on_event("metrics", emitted.append)
    simulation.run(10)
    assert [payload["metrics"].time_step for payload in emitted] == [0, 5]


def test_invalid_scheduled_call_surfaces_when_applied():
    simulation = Simulation(Building(), calls=[ScheduledCall(time=1, floor=0, direction="down")])
    simulation.step()
    with pytest.raises(ValidationError):
        simulation.step()


def test_cannot_schedule_in_the_past():
    simulation = Simulation(Building())
    simulation.run(3)
    with pytest.raises(ValidationError):
        simulation.schedule(ScheduledCall(time=1, floor=2, direction="up"))


def test_reset_restarts_the_clock_and_metrics():
    building = Building(BuildingConfig(num_floors=6, elevator_count=1))
    simulation = Simulation(building, calls=[ScheduledCall(time=0, floor=5, elevator_id=0)])
    simulation.run(4)
    simulation.schedule(ScheduledCall(time=8, floor=1, direction="up"))

    simulation.reset()

    assert simulation.current_time == 0
    assert simulation.metrics.snapshot(0).floors_travelled == 0
    assert building.get_elevator(0).floor == 0
    simulation.run(10)
    assert building.board.snapshot() == {"up": [], "down": []}
    assert simulation.metrics.stops == 0
