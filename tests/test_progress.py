from __future__ import annotations

import pytest

from cvjob.progress import BASELINE, Phase, PhaseTracker


def test_update_and_reset():
    tracker = PhaseTracker()
    seen = []
    tracker.subscribe(seen.append)

    tracker.update_phase(Phase.GENERATION, 40, "Genererer ansøgning...")
    assert tracker.current.phase is Phase.GENERATION
    assert tracker.current.progress == 40

    tracker.reset()
    assert tracker.current == BASELINE
    assert [p.progress for p in seen] == [40, 0]


@pytest.mark.parametrize("value, expected", [(-5, 0), (150, 100), (0, 0), (100, 100)])
def test_out_of_range_is_clamped(value, expected):
    tracker = PhaseTracker()

    assert tracker.update_phase(Phase.JOB_SAVE, value, "").progress == expected


def test_strict_mode_rejects_out_of_range():
    tracker = PhaseTracker(strict=True)

    with pytest.raises(ValueError):
        tracker.update_phase(Phase.JOB_SAVE, 101, "")
    assert tracker.current == BASELINE


def test_phase_accepts_string_value():
    tracker = PhaseTracker()

    assert tracker.update_phase("letter-save", 80, "").phase is Phase.LETTER_SAVE


def test_unsubscribe():
    tracker = PhaseTracker()
    seen = []
    unsubscribe = tracker.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    tracker.update_phase(Phase.COMPLETE, 100, "Færdig!")

    assert seen == []
