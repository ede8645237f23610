"""Global constants and default settings."""

WINDOW_WIDTH = 960
WINDOW_HEIGHT = 540
FPS = 120
WINDOW_TITLE = "OnBeat"

# Song defaults (seconds)
DEFAULT_OFFSET_SECONDS = 0.13

# Half-width of the on-beat window (seconds)
TOLERANCE_SECONDS = 0.1

# Leading beats that are judged but never scored (one bar of 4/4)
WARMUP_BEATS = 4

# Default tempo if none in MIDI
DEFAULT_TEMPO_USPQN = 500_000  # 120 BPM

# HUD
BEAT_FLASH_SECONDS = 0.12
