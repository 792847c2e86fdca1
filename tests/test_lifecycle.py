from __future__ import annotations

from cvjob.lifecycle import MountGuard


def test_setter_runs_only_while_live():
    guard = MountGuard()
    values = []

    assert guard.safe_set_state(values.append, 1) is False
    guard.start()
    assert guard.safe_set_state(values.append, 2) is True
    guard.stop()
    assert guard.safe_set_state(values.append, 3) is False

    assert values == [2]


def test_stop_is_irreversible():
    guard = MountGuard()
    guard.start()
    guard.stop()
    guard.start()

    assert guard.is_live() is False
    assert guard.stopped is True


def test_stop_callbacks_run_once():
    guard = MountGuard()
    calls = []
    guard.on_stop(lambda: calls.append("a"))
    guard.on_stop(lambda: 1 / 0)
    guard.on_stop(lambda: calls.append("b"))
    guard.start()

    guard.stop()
    guard.stop()

    assert calls == ["a", "b"]


def test_on_stop_after_stop_runs_immediately():
    guard = MountGuard()
    guard.stop()
    calls = []

    guard.on_stop(lambda: calls.append("late"))

    assert calls == ["late"]
