"""Tests for the frame compositor."""

import dataclasses

import pytest

from livescope.compositor import (
    BACKGROUND_GLYPH,
    DENSITY_RAMP,
    HUD_COLOR,
    WAVE_CREST,
    composite,
    density_glyph,
)
from livescope.engine import VisualStateEngine
from livescope.models import Config, Dimensions, MetricsSnapshot, Particle, ParticleKind
from livescope.palette import Category, color_for

NO_HUD = Config(show_hud=False)


def advanced_engine(snapshot, dims, cores=4, particles=False):
    engine = VisualStateEngine(cores, seed=1)
    engine.advance(snapshot, 0.016, dims, particles)
    return engine


def glyphs(frame):
    return {cell.glyph for row in frame.cells for cell in row}


class TestDensityGlyph:
    """Tests for the density ramp lookup."""

    def test_ramp_endpoints(self):
        assert density_glyph(0.0) == DENSITY_RAMP[0]
        assert density_glyph(1.0) == DENSITY_RAMP[-1]

    def test_ramp_is_clamped(self):
        assert density_glyph(-1.0) == DENSITY_RAMP[0]
        assert density_glyph(7.0) == DENSITY_RAMP[-1]

    def test_ramp_is_monotonic(self):
        indices = [DENSITY_RAMP.index(density_glyph(i / 50)) for i in range(51)]
        assert indices == sorted(indices)


class TestComposite:
    """Tests for composite()."""

    def test_frame_matches_dimensions(self, snapshot, dims):
        engine = advanced_engine(snapshot, dims)
        frame = composite(engine.state, NO_HUD, dims)
        assert frame.dims == dims
        assert len(frame.cells) == dims.rows
        assert all(len(row) == dims.cols for row in frame.cells)

    def test_single_cell_terminal(self, busy_snapshot):
        """Test a 1x1 terminal renders without errors."""
        dims = Dimensions(1, 1)
        engine = advanced_engine(busy_snapshot, dims, particles=True)
        for config in (Config(particles=True), Config(particles=True, show_hud=False)):
            frame = composite(engine.state, config, dims)
            assert len(frame.cells) == 1
            assert len(frame.cells[0]) == 1

    def test_zero_sized_terminal(self, snapshot):
        frame = composite(advanced_engine(snapshot, Dimensions(0, 0)).state, NO_HUD, Dimensions(0, 0))
        assert frame.cells == []

    def test_more_cores_than_rows(self, dims):
        small = Dimensions(10, 3)
        snap = MetricsSnapshot((1.0,) * 16, 0.5, 0.0, 0.0)
        engine = advanced_engine(snap, small, cores=16)
        frame = composite(engine.state, NO_HUD, small)
        assert len(frame.cells) == 3

    def test_idle_cores_leave_memory_wave_visible(self, dims):
        snap = MetricsSnapshot((0.0,) * 4, 0.5, 0.0, 0.0)
        frame = composite(advanced_engine(snap, dims).state, NO_HUD, dims)
        assert WAVE_CREST in glyphs(frame)
        assert not glyphs(frame) & set(DENSITY_RAMP[1:])

    def test_loaded_cores_draw_bands(self, dims):
        snap = MetricsSnapshot((1.0,) * 4, 0.0, 0.0, 0.0)
        frame = composite(advanced_engine(snap, dims).state, NO_HUD, dims)
        assert DENSITY_RAMP[-1] in glyphs(frame)

    def test_band_rows_follow_core_order(self, dims):
        """Test each core owns an even slice of rows, top to bottom."""
        snap = MetricsSnapshot((1.0, 0.0, 0.0, 0.0), 0.0, 0.0, 0.0)
        frame = composite(advanced_engine(snap, dims).state, NO_HUD, dims)
        band_glyphs = set(DENSITY_RAMP[1:])
        top_rows = {r for r in range(6) if set(frame.row_text(r)) & band_glyphs}
        assert top_rows == set(range(6))
        for r in range(6, dims.rows):
            assert not set(frame.row_text(r)) & band_glyphs

    def test_band_colors_come_from_palette(self, dims):
        snap = MetricsSnapshot((1.0,) * 4, 0.0, 0.0, 0.0)
        config = Config(theme="matrix", show_hud=False)
        frame = composite(advanced_engine(snap, dims).state, config, dims)
        greens = {
            cell.color for row in frame.cells for cell in row
            if cell.glyph in DENSITY_RAMP[1:]
        }
        assert greens
        assert all(r == 0 and b == 0 for r, g, b in greens)

    def test_background_color(self, dims):
        snap = MetricsSnapshot((0.0,) * 4, 0.0, 0.0, 0.0)
        frame = composite(advanced_engine(snap, dims).state, NO_HUD, dims)
        corner = frame.at(0, 0)
        assert corner.glyph == BACKGROUND_GLYPH
        assert corner.color == color_for("fire", Category.MEMORY_WAVE, 0.0)

    def test_particles_drawn_on_top(self, dims):
        snap = MetricsSnapshot((1.0,) * 4, 0.0, 0.0, 0.0)
        engine = advanced_engine(snap, dims)
        engine.state.particles = [
            Particle(col=3.2, row=2.9, vcol=0.0, vrow=1.0, kind=ParticleKind.DISK, glyph="★"),
        ]
        frame = composite(engine.state, Config(particles=True, show_hud=False), dims)
        cell = frame.at(3, 2)
        assert cell.glyph == "★"
        assert cell.color == color_for("fire", Category.PARTICLE_DISK, 1.0)

    def test_particles_hidden_when_disabled(self, dims):
        engine = advanced_engine(MetricsSnapshot.idle(4), dims)
        engine.state.particles = [
            Particle(col=1, row=1, vcol=0.0, vrow=1.0, kind=ParticleKind.NETWORK, glyph="●"),
        ]
        frame = composite(engine.state, NO_HUD, dims)
        assert "●" not in glyphs(frame)

    def test_particle_positions_are_clamped(self, dims):
        engine = advanced_engine(MetricsSnapshot.idle(4), dims)
        engine.state.particles = [
            Particle(col=500, row=-9, vcol=0.0, vrow=1.0, kind=ParticleKind.NETWORK, glyph="◆"),
        ]
        frame = composite(engine.state, Config(particles=True, show_hud=False), dims)
        assert frame.at(dims.cols - 1, 0).glyph == "◆"

    def test_hud_on_bottom_row(self, snapshot, dims):
        engine = advanced_engine(snapshot, dims)
        frame = composite(engine.state, Config(), dims, mean_load=0.5)
        text = frame.row_text(dims.rows - 1)
        assert "LiveScope" in text
        assert "CPU: 50.0%" in text
        assert "RAM: 60%" in text
        assert "[OFF]" in text
        assert frame.at(1, dims.rows - 1).color == HUD_COLOR

    def test_hud_clipped_to_width(self, snapshot):
        narrow = Dimensions(12, 4)
        frame = composite(advanced_engine(snapshot, narrow).state, Config(), narrow)
        assert len(frame.row_text(3)) == 12

    def test_composite_is_deterministic(self, snapshot, dims):
        engine = advanced_engine(snapshot, dims)
        config = dataclasses.replace(NO_HUD, theme="ocean")
        assert composite(engine.state, config, dims) == composite(engine.state, config, dims)

    def test_nan_snapshot_renders(self, dims):
        nan = float("nan")
        engine = advanced_engine(MetricsSnapshot((nan,) * 4, nan, 0.0, 0.0), dims)
        frame = composite(engine.state, Config(), dims)
        assert len(frame.cells) == dims.rows

    @pytest.mark.parametrize("cols,rows", [(1, 1), (1, 40), (200, 1), (3, 2)])
    def test_odd_sizes(self, busy_snapshot, cols, rows):
        dims = Dimensions(cols, rows)
        engine = advanced_engine(busy_snapshot, dims, particles=True)
        frame = composite(engine.state, Config(particles=True), dims)
        assert len(frame.cells) == rows
        assert all(len(row) == cols for row in frame.cells)
