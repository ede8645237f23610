"""Top-level application: plays a song, reads presses, and judges them against the beat."""

from __future__ import annotations

import logging

import pygame

from onbeat.audio import SongPlayer
from onbeat.config import FPS, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from onbeat.midi_input import InputSource, KeyboardInput
from onbeat.models import Song
from onbeat.renderer import colors as colors_mod
from onbeat.renderer.hud import (
    describe_miss,
    describe_result,
    render_feedback,
    render_hud,
    render_pulse,
)
from onbeat.session import BeatSession
from onbeat.timing import BeatConfig

logger = logging.getLogger(__name__)


class App:
    def __init__(self, song: Song, config: BeatConfig, midi_port: int | None = None) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(f"{WINDOW_TITLE} — {song.title}")
        self.clock = pygame.time.Clock()
        self._font = pygame.font.SysFont("monospace", 16)

        self.player = SongPlayer(song)
        self.session = BeatSession(config, self.player, song_title=song.title)
        self._keyboard_input = KeyboardInput(self.player)
        self._sources: list[InputSource] = [self._keyboard_input]
        if (midi := self._try_midi(midi_port)) is not None:
            self._sources.append(midi)
        self._feedback: tuple[str, tuple[int, int, int]] | None = None

    def run(self) -> None:
        self.player.play()
        running = True
        while running:
            self.clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_r:
                    self.restart()
                else:
                    if event.type == pygame.KEYDOWN:
                        logger.debug("Key down: %s", event.key)
                    self._keyboard_input.feed_event(event)
            if running:
                self.update()
                running = not self.player.finished
            self.draw()
            pygame.display.flip()

        stats = self.session.get_stats()
        logger.info(
            "%s: %d hits, %d off-beat, %d missed, best streak %d, accuracy %.1f%%",
            stats.song_title, stats.hits, stats.off_beat, stats.missed,
            stats.max_streak, stats.accuracy_pct,
        )
        self._cleanup()
        pygame.quit()

    def restart(self) -> None:
        self.player.stop()
        self.session.reset()
        self._feedback = None
        self.player.play()

    def update(self) -> None:
        # Presses first: a press landing in the same frame a window closes still counts.
        for source in self._sources:
            while (press := source.poll()) is not None:
                result = self.session.press(press.timestamp, label=press.label)
                self._feedback = describe_result(result)
        for beat in self.session.tick():
            self._feedback = describe_miss(beat)

    def draw(self) -> None:
        self.screen.fill(colors_mod.BG)
        render_pulse(self.screen, self.session.config, self.session.elapsed_seconds())
        render_hud(self.screen, self.session.stats)
        render_feedback(self.screen, self._feedback)
        h = self.screen.get_height()
        hint = self._font.render("Any key: press  R: restart  Esc: quit", True, colors_mod.HINT_TEXT)
        self.screen.blit(hint, (10, h - 25))

    def _cleanup(self) -> None:
        for source in self._sources:
            source.close()
        self.player.shutdown()

    def _try_midi(self, port_index: int | None) -> InputSource | None:
        try:
            from onbeat.midi_input import MidiInput
            mi = MidiInput(self.player, port_index)
            mi.open()
            return mi
        except Exception as exc:
            log = logger.info if port_index is None else logger.warning
            log("MIDI input unavailable: %s", exc)
            return None
