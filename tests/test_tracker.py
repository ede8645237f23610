"""Tests for press deduplication and missed-beat detection."""

import math

import pytest

from onbeat.models import PressAccept
from onbeat.timing import BeatConfig
from onbeat.tracker import BeatTracker


def test_first_on_beat_press_wins(config_120):
    tracker = BeatTracker(config_120)
    assert tracker.register_press(0.5).accept == PressAccept.ACCEPTED
    assert tracker.register_press(0.51).accept == PressAccept.DUPLICATE
    assert tracker.register_press(0.6).accept == PressAccept.ACCEPTED


def test_duplicates_leave_state_unchanged(config_120):
    tracker = BeatTracker(config_120)
    tracker.register_press(0.5)
    before = (tracker.resolved_beats, tracker.next_miss_check)
    for t in (0.5, 0.52, 0.54):
        result = tracker.register_press(t)
        assert result.accept == PressAccept.DUPLICATE
        assert result.judgment.beat_index == 1
    assert (tracker.resolved_beats, tracker.next_miss_check) == before


def test_off_beat_presses_never_resolve(config_120):
    tracker = BeatTracker(config_120)
    for _ in range(3):
        result = tracker.register_press(0.6)
        assert result.accept == PressAccept.ACCEPTED
        assert not result.judgment.on_beat
    assert tracker.resolved_beats == frozenset()


def test_early_stray_press_does_not_block_on_beat_press(config_120):
    tracker = BeatTracker(config_120)
    tracker.register_press(0.4)
    result = tracker.register_press(0.49)
    assert result.accept == PressAccept.ACCEPTED
    assert tracker.is_resolved(1)


def test_counts_flag_follows_warmup():
    tracker = BeatTracker(BeatConfig(bpm=120.0, tolerance_seconds=0.05, warmup_beats=2))
    assert not tracker.register_press(0.5).counts
    assert tracker.register_press(1.0).counts
    # Warm-up beats are still deduplicated.
    assert tracker.register_press(0.51).accept == PressAccept.DUPLICATE


def test_poll_reports_every_closed_beat(config_120):
    tracker = BeatTracker(config_120)
    missed = tracker.poll_missed(1.2)
    assert [m.beat_index for m in missed] == [0, 1, 2]
    assert [m.late_by_seconds for m in missed] == pytest.approx([1.2, 0.7, 0.2])
    assert tracker.next_miss_check == 3


def test_poll_before_window_closes_reports_nothing(config_120):
    tracker = BeatTracker(config_120)
    assert tracker.poll_missed(0.05) == []
    assert tracker.next_miss_check == 0
    assert [m.beat_index for m in tracker.poll_missed(0.051)] == [0]


def test_misses_are_reported_once(config_120):
    tracker = BeatTracker(config_120)
    tracker.poll_missed(1.2)
    assert tracker.poll_missed(1.2) == []
    assert [m.beat_index for m in tracker.poll_missed(1.6)] == [3]


def test_pressed_beat_is_never_missed(config_120):
    tracker = BeatTracker(config_120)
    tracker.register_press(0.54)
    missed = tracker.poll_missed(1.2)
    assert [m.beat_index for m in missed] == [0, 2]


def test_press_after_window_closed_is_off_beat(config_120):
    tracker = BeatTracker(config_120)
    assert [m.beat_index for m in tracker.poll_missed(0.56)] == [0, 1]
    result = tracker.register_press(0.56)
    assert not result.judgment.on_beat
    assert result.accept == PressAccept.ACCEPTED


def test_polling_far_ahead_resolves_contiguous_range():
    config = BeatConfig(bpm=120.0, tolerance_seconds=0.05, warmup_beats=4)
    tracker = BeatTracker(config)
    missed = tracker.poll_missed(100.0)
    assert [m.beat_index for m in missed] == list(range(4, 200))
    assert tracker.resolved_beats == frozenset(range(4, 200))
    assert tracker.next_miss_check == 200


def test_every_beat_resolved_exactly_once():
    config = BeatConfig(bpm=132.0, offset_seconds=0.13, tolerance_seconds=0.08, warmup_beats=2)
    tracker = BeatTracker(config)
    press_times = sorted(
        [config.beat_time_seconds(k) + 0.03 for k in (1, 3, 4, 9, 15)]
        + [config.beat_time_seconds(4) + 0.05, config.beat_time_seconds(6) + 0.2]
    )

    pressed: list[int] = []
    missed: list[int] = []
    end = 10.0
    for step in range(1, 1001):
        now = step * end / 1000
        while press_times and press_times[0] <= now:
            result = tracker.register_press(press_times.pop(0))
            if result.judgment.on_beat and result.accept == PressAccept.ACCEPTED:
                pressed.append(result.judgment.beat_index)
        missed.extend(m.beat_index for m in tracker.poll_missed(now))

    last_closed = max(
        k for k in range(100)
        if config.beat_time_seconds(k) + config.tolerance_seconds < end
    )
    scored = [k for k in pressed if k >= config.warmup_beats]
    assert len(missed) == len(set(missed))
    assert set(scored).isdisjoint(missed)
    assert set(scored) | set(missed) == set(range(config.warmup_beats, last_closed + 1))
    assert scored == [3, 4, 9, 15]


def test_cursor_only_moves_forward(config_120):
    tracker = BeatTracker(config_120)
    seen = []
    for t in (0.0, 0.3, 0.3, 0.9, 1.0, 2.7):
        tracker.poll_missed(t)
        seen.append(tracker.next_miss_check)
    assert seen == sorted(seen)


def test_reset_clears_state_and_swaps_config(config_120):
    tracker = BeatTracker(config_120)
    tracker.register_press(0.5)
    tracker.poll_missed(2.0)

    tracker.reset()
    assert tracker.config is config_120
    assert tracker.resolved_beats == frozenset()
    assert tracker.next_miss_check == 0

    new_config = BeatConfig(bpm=90.0, tolerance_seconds=0.1, warmup_beats=3)
    tracker.reset(new_config)
    assert tracker.config is new_config
    assert tracker.next_miss_check == 3
    assert tracker.register_press(0.0).accept == PressAccept.ACCEPTED


@pytest.mark.parametrize("config", [
    BeatConfig(bpm=0.0),
    BeatConfig(bpm=-60.0),
    BeatConfig(bpm=math.inf),
    BeatConfig(bpm=120.0, tolerance_seconds=math.nan),
])
def test_pathological_configs_do_not_loop(config):
    tracker = BeatTracker(config)
    assert tracker.poll_missed(1000.0) == []
    assert tracker.next_miss_check == config.warmup_beats


def test_non_finite_elapsed_is_ignored(config_120):
    tracker = BeatTracker(config_120)
    assert tracker.poll_missed(math.inf) == []
    assert tracker.poll_missed(math.nan) == []
