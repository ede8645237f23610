"""Heads-up display — stats, last judgment, and a pulse on every beat."""

from __future__ import annotations

import pygame

from onbeat.config import BEAT_FLASH_SECONDS
from onbeat.models import MissedBeat, PressAccept, PressResult, SessionStats
from onbeat.renderer.colors import (
    BEAT_PULSE,
    DUPLICATE,
    HUD_TEXT,
    MISS,
    OFF_BEAT,
    ON_BEAT,
    WARMUP_PULSE,
)
from onbeat.timing import BeatConfig


def describe_result(result: PressResult) -> tuple[str, tuple[int, int, int]]:
    """Feedback text and color for a press."""
    judgment = result.judgment
    error_ms = judgment.error_seconds * 1000.0
    if result.accept == PressAccept.DUPLICATE:
        return f"Already hit beat {judgment.beat_index}", DUPLICATE
    if judgment.on_beat:
        return f"ON  {error_ms:+.0f} ms", ON_BEAT
    return f"OFF {error_ms:+.0f} ms", OFF_BEAT


def describe_miss(beat: MissedBeat) -> tuple[str, tuple[int, int, int]]:
    return f"MISS beat {beat.beat_index}", MISS


def pulse_strength(config: BeatConfig, elapsed: float) -> float:
    """1.0 right on a beat, fading to 0.0 after BEAT_FLASH_SECONDS."""
    since = config.judge(elapsed).error_seconds
    # Float rounding can put an exact beat time a hair before the beat.
    if -1e-9 < since < 0:
        since = 0.0
    if since < 0 or since >= BEAT_FLASH_SECONDS:
        return 0.0
    return 1.0 - since / BEAT_FLASH_SECONDS


def render_hud(surface: pygame.Surface, stats: SessionStats) -> None:
    font = pygame.font.SysFont("monospace", 20)

    lines = [
        f"Hits: {stats.hits}  Off: {stats.off_beat}  Missed: {stats.missed}",
        f"Streak: {stats.streak} (best {stats.max_streak})",
        f"Accuracy: {stats.accuracy_pct:.0f}%  Avg error: {stats.mean_abs_error_ms:.0f} ms",
    ]

    y = 10
    for line in lines:
        text = font.render(line, True, HUD_TEXT)
        surface.blit(text, (10, y))
        y += 28


def render_feedback(surface: pygame.Surface, feedback: tuple[str, tuple[int, int, int]] | None) -> None:
    if feedback is None:
        return
    font = pygame.font.SysFont("monospace", 36)
    label, color = feedback
    text = font.render(label, True, color)
    w, h = surface.get_size()
    surface.blit(text, ((w - text.get_width()) // 2, h // 2 + 80))


def render_pulse(surface: pygame.Surface, config: BeatConfig, elapsed: float) -> None:
    w, h = surface.get_size()
    strength = pulse_strength(config, elapsed)
    in_warmup = config.judge(elapsed).beat_index < config.warmup_beats
    color = WARMUP_PULSE if in_warmup else BEAT_PULSE
    radius = int(40 + 30 * strength)
    pygame.draw.circle(surface, color, (w // 2, h // 2), radius, 0 if strength > 0 else 3)
