"""Beat resolution — deduplicate presses per beat and report beats nobody hit."""

from __future__ import annotations

import logging
import math

from onbeat.models import MissedBeat, PressAccept, PressResult
from onbeat.timing import BeatConfig

logger = logging.getLogger(__name__)


class BeatTracker:
    """Stateful judge that resolves every beat exactly once, by a press or by a miss.

    A beat index is resolved when the first on-beat press for it is accepted,
    or when :meth:`poll_missed` reports it. Off-beat presses never resolve a
    beat, so a stray early press cannot block a later on-beat one.

    Elapsed times must be fed in nondecreasing order; :meth:`reset` starts a
    new session.
    """

    def __init__(self, config: BeatConfig) -> None:
        self._config = config
        self._resolved: set[int] = set()
        self._next_miss_check = config.warmup_beats

    @property
    def config(self) -> BeatConfig:
        return self._config

    @property
    def next_miss_check(self) -> int:
        """Next beat index still eligible for missed-beat detection."""
        return self._next_miss_check

    @property
    def resolved_beats(self) -> frozenset[int]:
        return frozenset(self._resolved)

    def is_resolved(self, beat_index: int) -> bool:
        return beat_index in self._resolved

    def reset(self, config: BeatConfig | None = None) -> None:
        """Clear all beat state, optionally swapping in a new config."""
        if config is not None:
            self._config = config
        self._resolved.clear()
        self._next_miss_check = self._config.warmup_beats

    def register_press(self, elapsed_seconds: float) -> PressResult:
        """Judge a press and claim its beat if the press is on-beat.

        Only the first on-beat press for a beat index is accepted; later
        on-beat presses for the same index come back as DUPLICATE.
        """
        judgment = self._config.judge(elapsed_seconds)
        counts = judgment.beat_index >= self._config.warmup_beats

        if not judgment.on_beat:
            accept = PressAccept.ACCEPTED
        elif judgment.beat_index in self._resolved:
            accept = PressAccept.DUPLICATE
        else:
            self._resolved.add(judgment.beat_index)
            accept = PressAccept.ACCEPTED
            logger.debug("Beat %d resolved by press (%+.3fs)",
                         judgment.beat_index, judgment.error_seconds)

        return PressResult(judgment=judgment, accept=accept, counts=counts)

    def poll_missed(self, elapsed_seconds: float) -> list[MissedBeat]:
        """Resolve and return every unresolved beat whose window has closed."""
        missed: list[MissedBeat] = []
        beat_period = self._config.beat_period_seconds()
        tolerance = self._config.tolerance_seconds

        # Any non-finite term here would never let the window comparison stop the loop.
        if not math.isfinite(beat_period) or beat_period <= 0:
            return missed
        if not all(map(math.isfinite, (tolerance, self._config.offset_seconds, elapsed_seconds))):
            return missed

        while True:
            beat_index = self._next_miss_check
            beat_time = self._config.beat_time_seconds(beat_index)

            if elapsed_seconds <= beat_time + tolerance:
                break

            if beat_index not in self._resolved:
                self._resolved.add(beat_index)
                missed.append(MissedBeat(
                    beat_index=beat_index,
                    late_by_seconds=elapsed_seconds - beat_time,
                ))
                logger.debug("Beat %d missed", beat_index)

            self._next_miss_check = max(beat_index + 1, self._config.warmup_beats)

        return missed
