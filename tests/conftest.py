import pytest
from mido import Message, MetaMessage, MidiFile, MidiTrack, bpm2tempo

from onbeat.timing import BeatConfig


@pytest.fixture
def config_120():
    """120 bpm (0.5s per beat), no offset, 50ms tolerance, no warm-up."""
    return BeatConfig(bpm=120.0, offset_seconds=0.0, tolerance_seconds=0.05, warmup_beats=0)


@pytest.fixture
def midi_song(tmp_path):
    """
    Creates a tiny MIDI at 100 BPM whose first note lands one beat in (0.6s).
    Returns the path to the file.
    """
    path = tmp_path / "groove.mid"
    mid = MidiFile(ticks_per_beat=480)

    track = MidiTrack()
    mid.tracks.append(track)
    track.append(MetaMessage("set_tempo", tempo=bpm2tempo(100), time=0))

    for delta in (480, 470, 470):
        track.append(Message("note_on", channel=9, note=38, velocity=100, time=delta))
        track.append(Message("note_off", channel=9, note=38, velocity=0, time=10))

    mid.save(str(path))
    return path
