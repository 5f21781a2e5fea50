"""Theme gradients and intensity-to-color lookup

Every theme is an ordered list of color stops spread evenly over [0, 1].
Each drawing category reads the gradient through its own window so that
bands, the memory wave and the two particle kinds stay distinguishable
under a single theme.
"""

import logging
import math
from enum import Enum

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_THEME = "fire"


class Category(Enum):
    CORE_BAND = "core-band"
    MEMORY_WAVE = "memory-wave"
    PARTICLE_NETWORK = "particle-network"
    PARTICLE_DISK = "particle-disk"


def _hex(code):
    code = code.lstrip("#")
    return tuple(int(code[i:i + 2], 16) for i in (0, 2, 4))


THEMES = {
    # turbo
    "fire": [_hex(c) for c in ("#30123b", "#4686fb", "#1be5b5", "#a4fc3c", "#fb8022", "#7a0403")],
    # viridis
    "ocean": [_hex(c) for c in ("#440154", "#3b528b", "#21918c", "#5ec962", "#fde725")],
    "matrix": [_hex(c) for c in ("#000000", "#00ff00")],
    # rainbow (cubehelix)
    "rainbow": [_hex(c) for c in ("#6e40aa", "#ff5e63", "#aff05b", "#1ac7c2", "#6e40aa")],
}

# (lo, hi) slice of the theme gradient used by each category
CATEGORY_WINDOWS = {
    Category.CORE_BAND: (0.0, 1.0),
    Category.MEMORY_WAVE: (0.1, 0.6),
    Category.PARTICLE_NETWORK: (0.5, 1.0),
    Category.PARTICLE_DISK: (0.3, 0.9),
}

# Precomputed stop positions and per-channel arrays for np.interp
_GRADIENTS = {
    name: (np.linspace(0.0, 1.0, len(stops)), np.array(stops, dtype=float))
    for name, stops in THEMES.items()
}


def theme_names():
    return sorted(THEMES)


def resolve_theme(name):
    """Return a known theme name, falling back to the default"""
    if name in THEMES:
        return name
    logger.info("Unknown theme %r, using %r", name, DEFAULT_THEME)
    return DEFAULT_THEME


def clamp_unit(value):
    if value is None or math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def color_for(theme, category, intensity):
    """Map (theme, category, intensity) to an (r, g, b) color"""
    positions, stops = _GRADIENTS.get(theme, _GRADIENTS[DEFAULT_THEME])
    lo, hi = CATEGORY_WINDOWS[category]
    t = lo + clamp_unit(intensity) * (hi - lo)
    return tuple(
        int(round(np.interp(t, positions, stops[:, channel])))
        for channel in range(3)
    )


def gradient_bounds(theme):
    """Per-channel (min, max) over a theme's color stops"""
    _, stops = _GRADIENTS.get(theme, _GRADIENTS[DEFAULT_THEME])
    return tuple((int(stops[:, ch].min()), int(stops[:, ch].max())) for ch in range(3))


def colors_for(theme, category, intensities):
    """Vectorised color_for over a sequence of intensities"""
    positions, stops = _GRADIENTS.get(theme, _GRADIENTS[DEFAULT_THEME])
    lo, hi = CATEGORY_WINDOWS[category]
    values = np.nan_to_num(np.asarray(intensities, dtype=float), nan=0.0)
    t = lo + np.clip(values, 0.0, 1.0) * (hi - lo)
    channels = [np.rint(np.interp(t, positions, stops[:, ch])).astype(int) for ch in range(3)]
    return [tuple(int(v) for v in rgb) for rgb in zip(*channels)]
