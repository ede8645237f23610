"""Load songs and derive the beat grid they are judged against."""

from __future__ import annotations

from pathlib import Path

import mido

from onbeat.config import DEFAULT_OFFSET_SECONDS, DEFAULT_TEMPO_USPQN, TOLERANCE_SECONDS, WARMUP_BEATS
from onbeat.models import Song
from onbeat.timing import BeatConfig

MIDI_SUFFIXES = (".mid", ".midi")
AUDIO_SUFFIXES = (".mp3", ".ogg", ".wav")


class SongLoadError(Exception):
    """Raised when a song file cannot be parsed."""


def load_song(
    file_path: str | Path,
    bpm: float | None = None,
    offset_seconds: float | None = None,
) -> Song:
    """Load a MIDI or audio file and return a Song.

    Args:
        file_path: Path to a .mid/.midi file, or an .mp3/.ogg/.wav file.
        bpm: Tempo override. Required for audio files, which carry no tempo.
        offset_seconds: Offset override. MIDI files otherwise put beat 0 on
            their first note; audio files fall back to the default offset.

    Raises:
        SongLoadError: If the file cannot be used.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        if suffix in MIDI_SUFFIXES:
            return _load_midi(path, bpm, offset_seconds)
        elif suffix in AUDIO_SUFFIXES:
            return _load_audio(path, bpm, offset_seconds)
        else:
            raise SongLoadError(f"Unsupported file format: {path.suffix}")
    except SongLoadError:
        raise
    except Exception as exc:
        raise SongLoadError(f"Failed to load {path.name}: {exc}") from exc


def _load_midi(path: Path, bpm: float | None, offset_seconds: float | None) -> Song:
    mid = mido.MidiFile(str(path))

    tempo: int | None = None
    first_note: float | None = None
    abs_time = 0.0
    # Iterating the file merges tracks and converts delta times to seconds.
    for msg in mid:
        abs_time += msg.time
        if msg.type == "set_tempo" and tempo is None:
            tempo = msg.tempo
        elif msg.type == "note_on" and msg.velocity > 0 and first_note is None:
            first_note = abs_time
        if tempo is not None and first_note is not None:
            break

    if bpm is None:
        bpm = mido.tempo2bpm(tempo if tempo is not None else DEFAULT_TEMPO_USPQN)
    if offset_seconds is None:
        offset_seconds = -first_note if first_note else 0.0

    return Song(title=path.stem, asset_path=str(path), bpm=bpm, offset_seconds=offset_seconds)


def _load_audio(path: Path, bpm: float | None, offset_seconds: float | None) -> Song:
    if bpm is None:
        raise SongLoadError(f"{path.name} has no tempo information; pass a bpm")
    if not path.is_file():
        raise SongLoadError(f"No such file: {path}")
    return Song(
        title=path.stem,
        asset_path=str(path),
        bpm=bpm,
        offset_seconds=DEFAULT_OFFSET_SECONDS if offset_seconds is None else offset_seconds,
    )


def beat_config_for(
    song: Song,
    tolerance_seconds: float = TOLERANCE_SECONDS,
    warmup_beats: int = WARMUP_BEATS,
) -> BeatConfig:
    """Build a validated BeatConfig for ``song``."""
    return BeatConfig.checked(
        bpm=song.bpm,
        offset_seconds=song.offset_seconds,
        tolerance_seconds=tolerance_seconds,
        warmup_beats=warmup_beats,
    )
