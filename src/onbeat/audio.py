"""Song playback via pygame.mixer, doubling as the session clock."""

from __future__ import annotations

import logging

import pygame

from onbeat.models import Song

logger = logging.getLogger(__name__)


class MusicClock:
    """Elapsed playback position of ``pygame.mixer.music`` in seconds.

    ``get_pos`` returns -1 when nothing is playing and can jitter backwards
    between frames, so the reading is clamped to be nondecreasing until
    :meth:`restart`.
    """

    def __init__(self) -> None:
        self._last = 0.0

    def elapsed_seconds(self) -> float:
        pos_ms = pygame.mixer.music.get_pos()
        if pos_ms >= 0:
            self._last = max(self._last, pos_ms / 1000.0)
        return self._last

    def restart(self) -> None:
        self._last = 0.0


class SongPlayer:
    """Plays one Song and exposes its position as a TimeSource."""

    def __init__(self, song: Song) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
        self.song = song
        self.clock = MusicClock()
        pygame.mixer.music.load(song.asset_path)
        logger.info("Loaded %s (%.1f bpm, offset %+.3fs)", song.title, song.bpm, song.offset_seconds)

    def play(self) -> None:
        self.clock.restart()
        pygame.mixer.music.play()

    def stop(self) -> None:
        pygame.mixer.music.stop()

    def elapsed_seconds(self) -> float:
        return self.clock.elapsed_seconds()

    @property
    def finished(self) -> bool:
        return not pygame.mixer.music.get_busy()

    def shutdown(self) -> None:
        self.stop()
        pygame.mixer.quit()
