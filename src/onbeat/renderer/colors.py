"""Color palette (colorblind-safe defaults)."""

# RGB tuples
BG = (18, 18, 24)
BEAT_PULSE = (66, 135, 245)
WARMUP_PULSE = (90, 90, 110)
ON_BEAT = (80, 220, 100)
OFF_BEAT = (245, 166, 66)
DUPLICATE = (150, 150, 170)
MISS = (220, 60, 60)
HUD_TEXT = (220, 220, 220)
HINT_TEXT = (80, 80, 100)
