import random
import threading
import time

import pytest

from ballsim.data_models import SimulationSettings
from ballsim.model import Model, UnknownEntityError

from conftest import wait_ticks


def test_start_advances_ticks_and_stop_halts_them(model):
    model.start()
    assert model.is_running()
    wait_ticks(model, 5)

    model.stop()
    assert not model.is_running()
    ticks = model.tick_count()
    time.sleep(0.05)

    assert model.tick_count() == ticks
    assert not any(t.name == "ball-sim" and t.is_alive() for t in threading.enumerate())


def test_balls_attract_while_running(model):
    left, right = sorted(model.ids(), key=model.position)
    model.set_time_step(0.01)

    model.start()
    wait_ticks(model, 50)
    model.stop()

    assert model.position(left)[0] > 15.0
    assert model.position(right)[0] < 25.0


def test_stop_leaves_every_ball_at_rest(model):
    model.set_time_step(0.01)
    model.start()
    wait_ticks(model, 20)
    model.stop()

    assert all(s.velocity == (0.0, 0.0) for s in model.snapshot())


def test_start_twice_and_stop_twice(model):
    model.start()
    model.start()
    wait_ticks(model, 1)
    model.stop()
    model.stop()

    assert not model.is_running()


def test_start_stop_toggle(model):
    assert model.start_stop() is True
    assert model.is_running()
    assert model.start_stop() is False
    assert not model.is_running()


def test_add_while_running_becomes_visible_within_a_tick(model):
    with model.simulation():
        ball_id = model.add_ball((5.0, 5.0))
        wait_ticks(model, 2)

        assert ball_id in model.ids()


def test_remove_while_running_takes_effect_within_a_tick(model):
    victim = model.ids()[0]
    with model.simulation():
        model.remove_ball(victim)
        wait_ticks(model, 2)

        assert victim not in model.ids()


def test_ball_removed_before_it_was_merged_never_appears(model):
    with model.simulation():
        ball_id = model.add_ball((5.0, 5.0))
        model.remove_ball(ball_id)
        wait_ticks(model, 2)

        assert ball_id not in model.ids()
    assert ball_id not in model.ids()


def test_requests_queued_at_stop_are_applied(model):
    with model.simulation():
        ball_id = model.add_ball((5.0, 5.0))
    # stop() drains anything the loop did not get to

    assert ball_id in model.ids()
    assert model.velocity(ball_id) == (0.0, 0.0)


def test_pinned_ball_stays_put_while_running(model):
    pinned = model.ids()[0]
    model.set_time_step(0.01)
    with model.simulation():
        wait_ticks(model, 10)
        model.set_pinned(pinned, True)
        where = model.position(pinned)
        wait_ticks(model, 50)

        assert model.position(pinned) == where
        assert model.velocity(pinned) == (0.0, 0.0)


def test_time_step_change_applies_to_later_ticks(model):
    with model.simulation():
        model.set_time_step(0.005)
        wait_ticks(model, 2)
        assert model.get_time_step() == 0.005


def test_simulation_context_stops_on_error(model):
    with pytest.raises(RuntimeError):
        with model.simulation():
            wait_ticks(model, 1)
            raise RuntimeError("boom")

    assert not model.is_running()


def test_model_context_manager_stops_loop():
    with Model() as m:
        m.start()
        wait_ticks(m, 1)

    assert not m.is_running()


def test_concurrent_callers_keep_registry_consistent():
    m = Model(SimulationSettings(initial_positions=[(10.0, 10.0), (20.0, 10.0)]))
    errors = []
    live = set()
    live_lock = threading.Lock()

    def worker(seed):
        rng = random.Random(seed)
        mine = []
        try:
            for _ in range(200):
                op = rng.random()
                if op < 0.4 or not mine:
                    ball_id = m.add_ball((rng.uniform(0, 40), rng.uniform(0, 30)))
                    mine.append(ball_id)
                    with live_lock:
                        live.add(ball_id)
                elif op < 0.6:
                    ball_id = mine.pop(rng.randrange(len(mine)))
                    m.remove_ball(ball_id)
                    with live_lock:
                        live.discard(ball_id)
                else:
                    ball_id = rng.choice(mine)
                    try:
                        if op < 0.8:
                            m.move_ball(ball_id, (rng.uniform(0, 40), rng.uniform(0, 30)))
                        else:
                            m.set_pinned(ball_id, rng.random() < 0.5)
                    except UnknownEntityError:
                        # Still queued for creation
                        pass
                m.positions()
                m.snapshot()
        except Exception as e:
            errors.append(e)

    initial = set(m.ids())
    with m.simulation():
        threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert errors == []
    ids = m.ids()
    assert len(ids) == len(set(ids))
    assert set(ids) == live | initial
    assert not m.is_running()


def test_stop_from_simulation_thread_raises(model):
    errors = []
    step = model._step

    def step_then_stop(dt):
        step(dt)
        try:
            model.stop()
        except RuntimeError as e:
            errors.append(e)

    model._step = step_then_stop
    model.start()
    wait_ticks(model, 1)
    model.stop()

    assert errors
    assert all(isinstance(e, RuntimeError) for e in errors)
    assert not model.is_running()


def test_tick_interval_paces_loop():
    m = Model(SimulationSettings(tick_interval=0.02))
    with m.simulation():
        wait_ticks(m, 1)
        start = m.tick_count()
        time.sleep(0.2)
        ticks = m.tick_count() - start

    assert 0 < ticks < 20
