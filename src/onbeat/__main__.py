"""Entry point for `python -m onbeat` or the `onbeat` console script."""

import argparse
import logging

from onbeat.app import App
from onbeat.config import TOLERANCE_SECONDS, WARMUP_BEATS
from onbeat.midi_input import MidiDeviceError, midi_port_names
from onbeat.song_loader import SongLoadError, beat_config_for, load_song
from onbeat.timing import BeatConfigError


def main() -> None:
    parser = argparse.ArgumentParser(description="OnBeat — press along to the beat of a song")
    parser.add_argument("song", nargs="?", help="MIDI file, or an .mp3/.ogg/.wav file together with --bpm")
    parser.add_argument("--bpm", type=float, default=None, help="Tempo override (beats per minute)")
    parser.add_argument("--offset", type=float, default=None, help="Beat grid offset in seconds")
    parser.add_argument("--tolerance", type=float, default=TOLERANCE_SECONDS,
                        help="Half-width of the on-beat window in seconds")
    parser.add_argument("--warmup", type=int, default=WARMUP_BEATS,
                        help="Leading beats that are judged but not scored")
    parser.add_argument("--midi-port", type=int, default=None, help="MIDI input port index")
    parser.add_argument("--list-midi-ports", action="store_true",
                        help="Print the available MIDI input ports and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every key and beat")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_midi_ports:
        print_midi_ports()
        return
    if args.song is None:
        parser.error("a song is required")

    try:
        song = load_song(args.song, bpm=args.bpm, offset_seconds=args.offset)
        config = beat_config_for(song, tolerance_seconds=args.tolerance, warmup_beats=args.warmup)
    except (SongLoadError, BeatConfigError) as exc:
        parser.error(str(exc))

    app = App(song, config, midi_port=args.midi_port)
    app.run()


def print_midi_ports() -> None:
    try:
        ports = midi_port_names()
    except MidiDeviceError as exc:
        print(f"MIDI input unavailable: {exc}")
        return
    if not ports:
        print("No MIDI input ports found")
    for idx, name in enumerate(ports):
        print(f"{idx}: {name}")


if __name__ == "__main__":
    main()
