"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from onbeat.timing import Judgment


class PressAccept(Enum):
    ACCEPTED = auto()
    DUPLICATE = auto()


@dataclass(frozen=True)
class PressResult:
    judgment: Judgment
    accept: PressAccept
    counts: bool  # False while the beat is still inside the warm-up


@dataclass(frozen=True)
class MissedBeat:
    beat_index: int
    late_by_seconds: float  # how far past the beat time the poll happened


@dataclass
class Song:
    """A playable track and the beat grid it is judged against."""

    title: str = "Untitled"
    asset_path: str = ""
    bpm: float = 120.0
    offset_seconds: float = 0.0  # seconds


@dataclass
class SessionStats:
    song_title: str = ""
    hits: int = 0
    off_beat: int = 0
    duplicates: int = 0
    missed: int = 0
    streak: int = 0
    max_streak: int = 0
    mean_abs_error_ms: float = 0.0
    accuracy_pct: float = 0.0
