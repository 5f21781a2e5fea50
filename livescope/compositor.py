"""Render VisualState into a character/color Frame"""

from livescope import __version__
from livescope.engine import MAX_AGE, band_intensities, wave_heights
from livescope.models import Cell, Frame, ParticleKind
from livescope.palette import Category, color_for, colors_for

BACKGROUND_GLYPH = " "
DENSITY_RAMP = " ░▒▓█"
WAVE_CREST = "≈"
WAVE_EDGE = "·"
HUD_COLOR = (255, 255, 255)

PARTICLE_CATEGORIES = {
    ParticleKind.NETWORK: Category.PARTICLE_NETWORK,
    ParticleKind.DISK: Category.PARTICLE_DISK,
}


def density_glyph(intensity):
    index = int(min(max(intensity, 0.0), 1.0) * len(DENSITY_RAMP))
    return DENSITY_RAMP[min(index, len(DENSITY_RAMP) - 1)]


def composite(state, config, dims, mean_load=0.0):
    """Build a full frame: memory wave, then core bands, then particles, then HUD"""
    background = Cell(BACKGROUND_GLYPH, color_for(config.theme, Category.MEMORY_WAVE, 0.0))
    frame = Frame.filled(dims, background)
    if dims.cols <= 0 or dims.rows <= 0:
        return frame

    _draw_memory_wave(frame, state.wave, config.theme)
    _draw_bands(frame, state.bands, config.theme)
    if config.particles:
        _draw_particles(frame, state.particles, config.theme)
    if config.show_hud and dims.rows >= 2:
        _draw_hud(frame, state, config, mean_load)
    return frame


def _draw_memory_wave(frame, wave, theme):
    rows = frame.dims.rows
    mid = (rows - 1) / 2.0
    intensity = wave.fraction
    crest_color = color_for(theme, Category.MEMORY_WAVE, intensity)
    edge_color = color_for(theme, Category.MEMORY_WAVE, intensity / 2.0)
    for col, height in enumerate(wave_heights(wave, frame.dims.cols)):
        row = int(round(float(mid - height * mid)))
        for edge in (row - 1, row + 1):
            if 0 <= edge < rows:
                frame.put(col, edge, WAVE_EDGE, edge_color)
        frame.put(col, row, WAVE_CREST, crest_color)


def _draw_bands(frame, bands, theme):
    rows, cols = frame.dims.rows, frame.dims.cols
    count = len(bands)
    for i, band in enumerate(bands):
        top = i * rows // count
        bottom = (i + 1) * rows // count
        if bottom <= top:
            # More cores than rows
            continue
        intensities = band_intensities(band, cols)
        colors = colors_for(theme, Category.CORE_BAND, intensities)
        for col, (intensity, color) in enumerate(zip(intensities, colors)):
            glyph = density_glyph(intensity)
            if glyph == BACKGROUND_GLYPH:
                continue
            for row in range(top, bottom):
                frame.put(col, row, glyph, color)


def _draw_particles(frame, particles, theme):
    for p in particles:
        life = 1.0 - p.age / MAX_AGE
        frame.put(p.col, p.row, p.glyph, color_for(theme, PARTICLE_CATEGORIES[p.kind], life))


def _draw_hud(frame, state, config, mean_load):
    status = "ON" if config.particles else "OFF"
    text = (
        f" LiveScope v{__version__} | CPU: {mean_load * 100:.1f}% | "
        f"RAM: {state.wave.fraction * 100:.0f}% | "
        f"Particles: {len(state.particles)} [{status}] | q quit, p particles "
    )
    row = frame.dims.rows - 1
    for col, char in enumerate(text[:frame.dims.cols]):
        frame.put(col, row, char, HUD_COLOR)
