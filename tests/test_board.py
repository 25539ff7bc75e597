import pytest

from dispatch import EventLog, HallCallCleared, Notifier, RequestBoard, ValidationError
from scheduler import Direction, Mode

NUM_FLOORS = 5
SENTINELS = [mode for mode in Mode if mode not in (Mode.UP, Mode.DOWN)]


@pytest.fixture
def board(events) -> RequestBoard:
    return RequestBoard(NUM_FLOORS, sink=Notifier([events]))


def test_no_up_button_on_the_top_floor(board):
    with pytest.raises(ValidationError):
        board.register_hall_call(NUM_FLOORS - 1, Direction.UP)
    assert not any(board.up_requested)


def test_no_down_button_on_the_bottom_floor(board):
    with pytest.raises(ValidationError):
        board.register_hall_call(0, Mode.DOWN)
    assert not any(board.down_requested)


@pytest.mark.parametrize("floor", range(NUM_FLOORS))
@pytest.mark.parametrize("sentinel", SENTINELS)
def test_neutral_and_retrieval_modes_have_no_button(board, floor, sentinel):
    with pytest.raises(ValidationError, match="no button"):
        board.register_hall_call(floor, sentinel)


@pytest.mark.parametrize("floor", [-1, NUM_FLOORS])
def test_floor_outside_the_building_is_rejected(board, floor):
    with pytest.raises(ValidationError):
        board.register_hall_call(floor, Direction.DOWN)


def test_registration_is_idempotent(board):
    assert board.register_hall_call(2, Direction.UP) is True
    assert board.register_hall_call(2, Direction.UP) is False
    assert board.is_requested(Direction.UP, 2)
    assert not board.is_requested(Direction.DOWN, 2)
    assert board.snapshot() == {"up": [2], "down": []}


def test_string_directions_are_accepted(board):
    board.register_hall_call(3, "DOWN")
    board.register_hall_call(1, "up")
    assert board.snapshot() == {"up": [1], "down": [3]}
    with pytest.raises(ValidationError):
        board.register_hall_call(1, "sideways")
    with pytest.raises(ValidationError):
        board.register_hall_call(1, "retrieve_above_up")


def test_clearing_notifies_only_when_the_button_was_lit(board, events):
    board.register_hall_call(1, Direction.DOWN)
    assert board.clear_hall_call(Direction.DOWN, 1) is True
    assert board.clear_hall_call(Direction.DOWN, 1) is False
    assert board.clear_hall_call(Direction.UP, 3) is False
    assert events.events == [HallCallCleared(direction=Direction.DOWN, floor=1)]
    assert not board.has_any(1)


def test_clear_resets_every_flag(board):
    board.register_hall_call(1, Direction.UP)
    board.register_hall_call(4, Direction.DOWN)
    board.clear()
    assert board.snapshot() == {"up": [], "down": []}


def test_board_without_sink_defaults_to_notifier():
    board = RequestBoard(3)
    board.register_hall_call(1, Direction.UP)
    log = EventLog()
    board.sink.add_sink(log)
    board.clear_hall_call(Direction.UP, 1)
    assert len(log) == 1


@pytest.mark.parametrize("floor", [-1, NUM_FLOORS])
def test_clear_and_query_reject_floors_outside_the_building(board, events, floor):
    board.register_hall_call(NUM_FLOORS - 1, Direction.DOWN)
    with pytest.raises(ValidationError):
        board.clear_hall_call(Direction.DOWN, floor)
    with pytest.raises(ValidationError):
        board.is_requested(Direction.DOWN, floor)
    with pytest.raises(ValidationError):
        board.has_any(floor)
    assert board.snapshot() == {"up": [], "down": [NUM_FLOORS - 1]}
    assert len(events) == 0


def test_clear_and_query_accept_string_directions(board, events):
    board.register_hall_call(2, Direction.DOWN)
    assert board.is_requested("up", 2) is False
    assert board.is_requested("DOWN", 2) is True

    assert board.clear_hall_call("up", 2) is False
    assert board.snapshot() == {"up": [], "down": [2]}

    assert board.clear_hall_call("down", 2) is True
    assert events.events == [HallCallCleared(direction=Direction.DOWN, floor=2)]
    with pytest.raises(ValidationError):
        board.clear_hall_call("neutral", 2)
