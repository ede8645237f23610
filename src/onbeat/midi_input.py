"""Press sources — computer keyboard and MIDI pads, timestamped in session time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import pygame

from onbeat.clock import TimeSource

try:
    import rtmidi
    _HAS_RTMIDI = True
except ImportError:
    _HAS_RTMIDI = False


@dataclass
class PressEvent:
    timestamp: float  # session seconds
    label: str


class MidiDeviceError(Exception):
    """Raised when no MIDI device is found or connection fails."""


@runtime_checkable
class InputSource(Protocol):
    """Common interface for MIDI and keyboard input sources."""
    def poll(self) -> PressEvent | None: ...
    def close(self) -> None: ...


# Keys that drive the app rather than count as presses
_CONTROL_KEYS = frozenset({pygame.K_ESCAPE, pygame.K_r})


class KeyboardInput:
    """Any non-control key press is a beat press."""

    def __init__(self, clock: TimeSource) -> None:
        self._clock = clock
        self._events: list[PressEvent] = []
        self._held: set[int] = set()

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from the game loop for each pygame event."""
        if event.type == pygame.KEYDOWN and event.key not in _CONTROL_KEYS:
            # Auto-repeat re-sends KEYDOWN for a held key
            if event.key not in self._held:
                self._held.add(event.key)
                self._events.append(PressEvent(
                    timestamp=self._clock.elapsed_seconds(),
                    label=getattr(event, "unicode", "") or f"key {event.key}",
                ))
        elif event.type == pygame.KEYUP:
            self._held.discard(event.key)

    def poll(self) -> PressEvent | None:
        if self._events:
            return self._events.pop(0)
        return None

    def close(self) -> None:
        self._events.clear()
        self._held.clear()


def midi_port_names() -> list[str]:
    """Names of the MIDI input ports, indexed as `--midi-port` expects."""
    if not _HAS_RTMIDI:
        raise MidiDeviceError("python-rtmidi is not installed")
    midi_in = rtmidi.MidiIn()
    try:
        return list(midi_in.get_ports())
    finally:
        midi_in.delete()


class MidiInput:
    def __init__(self, clock: TimeSource, port_index: int | None = None) -> None:
        if not _HAS_RTMIDI:
            raise MidiDeviceError("python-rtmidi is not installed")
        self._clock = clock
        self.midi_in = rtmidi.MidiIn()
        self._port_index = port_index
        self._open = False

    def open(self) -> None:
        ports = self.midi_in.get_ports()
        if not ports:
            raise MidiDeviceError("No MIDI input devices found")
        idx = self._port_index if self._port_index is not None else 0
        if not 0 <= idx < len(ports):
            raise MidiDeviceError(f"MIDI port {idx} out of range ({len(ports)} available)")
        self.midi_in.open_port(idx)
        self._open = True

    def poll(self) -> PressEvent | None:
        """Non-blocking poll for the next note-on. Returns None if there is none."""
        if not self._open:
            return None
        while (msg := self.midi_in.get_message()) is not None:
            data, _delta = msg
            if len(data) == 3 and data[0] & 0xF0 == 0x90 and data[2] > 0:
                return PressEvent(timestamp=self._clock.elapsed_seconds(), label=f"note {data[1]}")
        return None

    def close(self) -> None:
        if self._open:
            self.midi_in.close_port()
            self._open = False
