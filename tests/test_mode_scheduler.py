from sumstack.components.countdown import Countdown
from sumstack.components.game_state import GameMode, GameStatus
from sumstack.constants import TIME_MODE_LIMIT
from sumstack.events.bus import (
    EVENT_COUNTDOWN_CHANGED,
    EVENT_ROW_ADD_REQUEST,
    EVENT_ROW_ADDED,
    EVENT_TICK,
)
from tests.helpers import build_session, capture, place_block, start_round


def _tick(session, seconds, dt=1.0):
    for _ in range(int(seconds / dt)):
        session.bus.emit(EVENT_TICK, dt=dt)


def _match(session):
    a = place_block(session.world, 1, 0, 8)
    b = place_block(session.world, 1, 1, 4)
    session.resolver.set_target(12)
    session.selection.toggle(a)
    session.selection.toggle(b)


def test_classic_mode_adds_one_row_per_match_and_has_no_timer():
    session = start_round(build_session(), GameMode.CLASSIC)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)

    assert not session.scheduler.running
    _tick(session, 30)
    assert requests == []

    for _ in range(3):
        _match(session)

    assert len(requests) == 3
    assert all(r["reason"] == "match" for r in requests)


def test_time_mode_forces_exactly_one_row_per_limit():
    session = start_round(build_session(), GameMode.TIME)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)
    added = capture(session.bus, EVENT_ROW_ADDED)

    _tick(session, TIME_MODE_LIMIT - 1)
    assert requests == []
    assert session.scheduler.time_left == 1

    _tick(session, 1)
    assert requests == [{"reason": "countdown"}]
    assert len(added) == 1
    assert session.scheduler.time_left == TIME_MODE_LIMIT


def test_time_mode_accumulates_fractional_ticks():
    session = start_round(build_session(), GameMode.TIME)
    session.bus.emit(EVENT_TICK, dt=0.4)
    session.bus.emit(EVENT_TICK, dt=0.4)
    assert session.scheduler.time_left == TIME_MODE_LIMIT
    session.bus.emit(EVENT_TICK, dt=0.4)
    assert session.scheduler.time_left == TIME_MODE_LIMIT - 1


def test_single_large_tick_fires_one_row_for_one_limit():
    session = start_round(build_session(), GameMode.TIME)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)

    session.bus.emit(EVENT_TICK, dt=float(TIME_MODE_LIMIT))

    assert len(requests) == 1
    assert session.scheduler.time_left == TIME_MODE_LIMIT


def test_match_in_time_mode_refills_countdown_without_row():
    session = start_round(build_session(), GameMode.TIME)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)
    countdown_events = capture(session.bus, EVENT_COUNTDOWN_CHANGED)
    _tick(session, 3)
    assert session.scheduler.time_left == TIME_MODE_LIMIT - 3

    _match(session)

    assert session.scheduler.time_left == TIME_MODE_LIMIT
    assert requests == []
    assert countdown_events[-1]["reason"] == "match"


def test_countdown_torn_down_when_leaving_play_and_fresh_on_restart():
    session = start_round(build_session(), GameMode.TIME)
    _tick(session, 4)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)

    session.flow.go_home()
    assert not session.scheduler.running
    assert list(session.world.get_component(Countdown)) == []
    _tick(session, 3 * TIME_MODE_LIMIT)
    assert requests == []

    session.flow.start_game(GameMode.TIME)
    assert session.scheduler.time_left == TIME_MODE_LIMIT


def test_restart_never_leaves_duplicate_countdowns():
    session = start_round(build_session(), GameMode.TIME)
    _tick(session, 2)
    session.flow.restart_game()
    session.flow.restart_game()

    countdowns = list(session.world.get_component(Countdown))
    assert len(countdowns) == 1
    assert countdowns[0][1].remaining == TIME_MODE_LIMIT


def test_countdown_overflow_ends_round_and_stops_timer():
    session = start_round(build_session(), GameMode.TIME)
    place_block(session.world, 0, 0, 1)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)

    session.bus.emit(EVENT_TICK, dt=float(3 * TIME_MODE_LIMIT))

    assert session.flow.status == GameStatus.GAMEOVER
    assert len(requests) == 1
    assert not session.scheduler.running


def test_custom_time_limit():
    session = start_round(build_session(time_limit=3), GameMode.TIME)
    requests = capture(session.bus, EVENT_ROW_ADD_REQUEST)
    _tick(session, 6)
    assert len(requests) == 2


def test_invalid_ticks_are_ignored():
    session = start_round(build_session(), GameMode.TIME)
    session.bus.emit(EVENT_TICK)
    session.bus.emit(EVENT_TICK, dt=-1.0)
    session.bus.emit(EVENT_TICK, dt="soon")
    assert session.scheduler.time_left == TIME_MODE_LIMIT
