"""Beat session — drives a BeatTracker from a time source and keeps score."""

from __future__ import annotations

import logging

from onbeat.clock import TimeSource
from onbeat.models import MissedBeat, PressAccept, PressResult, SessionStats
from onbeat.timing import BeatConfig, validate_config
from onbeat.tracker import BeatTracker

logger = logging.getLogger(__name__)


class BeatSession:
    """One play-through: a validated config, a clock, a tracker and running stats.

    The session is the only owner of its tracker. Call :meth:`press` once per
    input event and :meth:`tick` once per frame.
    """

    def __init__(self, config: BeatConfig, clock: TimeSource, song_title: str = "") -> None:
        self._clock = clock
        self._song_title = song_title
        self._tracker = BeatTracker(validate_config(config))
        self._stats = SessionStats(song_title=song_title)
        self._error_total = 0.0
        self.last_result: PressResult | None = None

    @property
    def config(self) -> BeatConfig:
        return self._tracker.config

    @property
    def tracker(self) -> BeatTracker:
        return self._tracker

    def elapsed_seconds(self) -> float:
        return self._clock.elapsed_seconds()

    def press(self, timestamp: float | None = None, label: str = "") -> PressResult:
        """Judge a press at ``timestamp``, or now if no timestamp is given."""
        if timestamp is None:
            timestamp = self._clock.elapsed_seconds()
        result = self._tracker.register_press(timestamp)
        judgment = result.judgment

        if result.accept == PressAccept.DUPLICATE:
            logger.info("DUP! (%s) beat %d: %+.3f", label, judgment.beat_index, judgment.error_seconds)
        elif judgment.on_beat:
            logger.info("ON! (%s) beat %d: %+.3f", label, judgment.beat_index, judgment.error_seconds)
        else:
            logger.info("OFF! (%s) beat %d: %+.3f", label, judgment.beat_index, judgment.error_seconds)

        self._record_press(result)
        self.last_result = result
        return result

    def tick(self) -> list[MissedBeat]:
        """Report beats whose window closed since the last tick."""
        missed = self._tracker.poll_missed(self._clock.elapsed_seconds())
        for beat in missed:
            logger.info("MISS beat %d (%.3fs late)", beat.beat_index, beat.late_by_seconds)
            self._stats.missed += 1
            self._stats.streak = 0
        if missed:
            self._update_accuracy()
        return missed

    def reset(self, config: BeatConfig | None = None) -> None:
        """Restart the session, optionally with a new config."""
        if config is not None:
            validate_config(config)
        self._tracker.reset(config)
        self._stats = SessionStats(song_title=self._song_title)
        self._error_total = 0.0
        self.last_result = None

    def _record_press(self, result: PressResult) -> None:
        if result.accept == PressAccept.DUPLICATE:
            self._stats.duplicates += 1
            return
        if not result.counts:
            return

        if result.judgment.on_beat:
            self._stats.hits += 1
            self._stats.streak += 1
            self._stats.max_streak = max(self._stats.max_streak, self._stats.streak)
            self._error_total += abs(result.judgment.error_seconds)
        else:
            self._stats.off_beat += 1
            self._stats.streak = 0
        self._update_accuracy()

    def _update_accuracy(self) -> None:
        stats = self._stats
        judged = stats.hits + stats.off_beat + stats.missed
        stats.accuracy_pct = (stats.hits / judged * 100.0) if judged > 0 else 0.0
        stats.mean_abs_error_ms = (self._error_total / stats.hits * 1000.0) if stats.hits else 0.0

    @property
    def stats(self) -> SessionStats:
        return self._stats

    def get_stats(self) -> SessionStats:
        """Snapshot of the current stats with accuracy rounded for display."""
        s = self._stats
        return SessionStats(
            song_title=s.song_title,
            hits=s.hits,
            off_beat=s.off_beat,
            duplicates=s.duplicates,
            missed=s.missed,
            streak=s.streak,
            max_streak=s.max_streak,
            mean_abs_error_ms=round(s.mean_abs_error_ms, 1),
            accuracy_pct=round(s.accuracy_pct, 1),
        )
