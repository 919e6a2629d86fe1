from engine.player import SPEED_PRESETS, Player, PlayerState
from steppers import SortEvent
from steppers.maze import MazeDFSStepper
from steppers.nqueens import NQueensStepper
from steppers.sorting import BubbleSortStepper


def _player(history_limit=500, **kwargs):
    p = Player(history_limit=history_limit, **kwargs)
    p.start(BubbleSortStepper([4, 2, 3, 1]))
    return p


def test_starts_paused_and_idle_before():
    assert Player().state is PlayerState.IDLE
    p = _player()
    assert p.state is PlayerState.PAUSED
    assert p.current_event is None
    assert not p.can_undo


def test_next_then_prev_round_trip():
    p = _player()
    first = [p.next_step() for _ in range(6)]
    assert p.steps_taken == 6
    assert p.prev_step() and p.prev_step()
    assert p.steps_taken == 4
    assert p.current_event == first[3]
    assert [p.next_step() for _ in range(2)] == first[4:]


def test_undo_replays_random_stepper_exactly():
    p = Player()
    p.start(MazeDFSStepper(5, 5, seed=77))
    ahead = [p.next_step() for _ in range(15)]
    for _ in range(10):
        p.prev_step()
    assert [p.next_step() for _ in range(10)] == ahead[5:]


def test_history_is_bounded():
    p = _player(history_limit=3)
    for _ in range(5):
        p.next_step()
    undone = 0
    while p.prev_step():
        undone += 1
    assert undone == 3
    assert p.steps_taken == 2


def test_history_disabled():
    p = _player(history_limit=0)
    p.next_step()
    assert not p.can_undo
    assert not p.prev_step()


def test_jump_to_end_and_back():
    p = _player()
    taken = p.jump_to_end()
    assert taken > 0
    assert p.state is PlayerState.FINISHED
    assert p.current_event.kind is SortEvent.DONE
    assert p.next_step() is None
    assert p.prev_step()
    assert p.state is PlayerState.PAUSED
    assert not p.stepper.is_done()


def test_jump_to_end_respects_cap():
    p = Player()
    p.start(NQueensStepper(8))
    assert p.jump_to_end(max_steps=25) == 25
    assert p.state is PlayerState.PAUSED
    assert not p.is_finished


def test_reset_rewinds_stepper():
    p = _player()
    for _ in range(4):
        p.next_step()
    p.reset()
    assert p.state is PlayerState.PAUSED
    assert p.steps_taken == 0
    assert p.events == []
    assert not p.can_undo


def test_unload_goes_idle():
    p = _player()
    p.unload()
    assert p.state is PlayerState.IDLE
    assert p.next_step() is None
    p.play()
    assert p.state is PlayerState.IDLE


def test_play_pause_toggle():
    p = _player()
    p.play()
    assert p.is_playing
    p.toggle_play()
    assert p.state is PlayerState.PAUSED
    p.toggle_play()
    assert p.is_playing
    p.pause()
    assert not p.is_playing


def test_tick_advances_only_after_interval():
    p = _player()
    p.set_speed("slow")
    assert not p.tick()            # paused
    p.play()
    start = p._last_tick
    assert not p.tick(now=start + 0.5)
    assert p.tick(now=start + 1.5)
    assert p.steps_taken == 1
    assert not p.tick(now=start + 2.0)
    assert p.tick(now=start + 3.0)


def test_tick_stops_when_finished():
    p = Player()
    p.start(BubbleSortStepper([1]))
    p.play()
    t = p._last_tick
    assert p.tick(now=t + 10)
    assert p.state is PlayerState.FINISHED
    assert not p.tick(now=t + 20)


def test_speed_settings():
    p = Player()
    p.set_speed("fast")
    assert p.speed == SPEED_PRESETS["fast"]
    p.set_speed("warp")
    assert p.speed == SPEED_PRESETS["medium"]
    p.set_speed_value(0.0)
    assert p.speed == 0.02
    p.set_speed_value(2.5)
    assert p.speed == 2.5


def test_on_step_callback():
    seen = []
    p = _player(on_step=seen.append)
    p.next_step()
    p.next_step()
    assert seen == p.events
