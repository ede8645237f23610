"""Beat timing math — map an elapsed time to its nearest beat and signed error."""

from __future__ import annotations

import math
from dataclasses import dataclass

from onbeat.config import TOLERANCE_SECONDS, WARMUP_BEATS

_MAX_INDEX = 2**63 - 1


class BeatConfigError(ValueError):
    """Raised when a beat configuration cannot produce meaningful timing values."""


@dataclass(frozen=True)
class Judgment:
    """Where a single instant falls relative to the beat grid."""

    beat_index: int  # nearest beat, >= 0
    on_beat: bool
    error_seconds: float  # negative = early, positive = late


@dataclass(frozen=True)
class BeatConfig:
    """Per-session timing parameters.

    Nothing here is validated on construction; use :meth:`checked` or
    :func:`validate_config` before handing a config to a session.
    """

    bpm: float
    offset_seconds: float = 0.0
    tolerance_seconds: float = TOLERANCE_SECONDS
    warmup_beats: int = WARMUP_BEATS

    @classmethod
    def checked(
        cls,
        bpm: float,
        offset_seconds: float = 0.0,
        tolerance_seconds: float = TOLERANCE_SECONDS,
        warmup_beats: int = WARMUP_BEATS,
    ) -> BeatConfig:
        """Build a config and raise BeatConfigError if it is ill-formed."""
        return validate_config(cls(
            bpm=bpm,
            offset_seconds=offset_seconds,
            tolerance_seconds=tolerance_seconds,
            warmup_beats=warmup_beats,
        ))

    def beat_period_seconds(self) -> float:
        # A zero tempo gives an infinite period instead of raising.
        if self.bpm == 0:
            return math.inf
        return 60.0 / self.bpm

    def beat_time_seconds(self, beat_index: int) -> float:
        """Nominal time (seconds) of beat ``beat_index``."""
        return beat_index * self.beat_period_seconds() - self.offset_seconds

    def judge(self, elapsed_seconds: float) -> Judgment:
        """Judge ``elapsed_seconds`` against the closest beat.

        The sign of the error and the beat index are computed separately.
        Exactly half a period between two beats the error is reported as
        late (``+period/2``) for the earlier beat while the index rounds up
        to the later one.
        """
        beat_period = self.beat_period_seconds()
        if beat_period == 0:
            return Judgment(beat_index=0, on_beat=False, error_seconds=math.nan)
        position = elapsed_seconds + self.offset_seconds

        phase = position % beat_period
        error = min(phase, beat_period - phase)
        on_beat = error <= self.tolerance_seconds

        if phase > beat_period / 2.0:
            error = -error

        return Judgment(
            beat_index=_nearest_index(position / beat_period),
            on_beat=on_beat,
            error_seconds=error,
        )


def _nearest_index(beats: float) -> int:
    # Round half up, saturating at 0 (NaN included).
    if not math.isfinite(beats):
        return 0 if math.isnan(beats) or beats < 0 else _MAX_INDEX
    return max(0, math.floor(beats + 0.5))


def validate_config(config: BeatConfig) -> BeatConfig:
    """Return ``config`` unchanged, or raise BeatConfigError describing the problem."""
    if not math.isfinite(config.bpm) or config.bpm <= 0:
        raise BeatConfigError(f"bpm must be finite and positive, got {config.bpm!r}")
    if not math.isfinite(config.offset_seconds):
        raise BeatConfigError(f"offset must be finite, got {config.offset_seconds!r}")
    if not math.isfinite(config.tolerance_seconds) or config.tolerance_seconds < 0:
        raise BeatConfigError(
            f"tolerance must be finite and non-negative, got {config.tolerance_seconds!r}"
        )
    if isinstance(config.warmup_beats, bool) or not isinstance(config.warmup_beats, int):
        raise BeatConfigError(f"warmup_beats must be an integer, got {config.warmup_beats!r}")
    if config.warmup_beats < 0:
        raise BeatConfigError(f"warmup_beats must be non-negative, got {config.warmup_beats}")
    return config
