"""Animation state and its per-tick advance"""

import logging
import math
import random
from collections import deque
from dataclasses import dataclass, field

import numpy as np

from livescope.models import Particle, ParticleKind
from livescope.palette import clamp_unit

logger = logging.getLogger(__name__)

TAU = 2 * math.pi

# Oscillation rates in cycles per second
BAND_RATE = 0.5
WAVE_RATE = 0.25
# Phase step between adjacent columns; gives the travelling-wave look
COLUMN_OFFSET = 0.35

HISTORY_LEN = 60

PARTICLE_CAP = 200
MAX_SPAWN = 8
MAX_AGE = 4.0  # seconds
BASE_SPEED = 6.0  # rows per second
MAX_SPEED = 30.0
MAX_DRIFT = 3.0  # columns per second, either direction
GRAVITY = 4.0  # rows per second squared

# Activity (bytes per tick) above which a category starts spawning
SPAWN_THRESHOLDS = {
    ParticleKind.NETWORK: 4 * 1024,
    ParticleKind.DISK: 16 * 1024,
}

PARTICLE_GLYPHS = {
    ParticleKind.NETWORK: ("●", "○", "◆"),
    ParticleKind.DISK: ("◇", "★", "☆"),
}


@dataclass(slots=True)
class BandState:
    phase: float = 0.0
    amplitude: float = 0.0
    history: deque = field(default_factory=lambda: deque(maxlen=HISTORY_LEN))


@dataclass(slots=True)
class MemoryWave:
    phase: float = 0.0
    fraction: float = 0.0


@dataclass(slots=True)
class VisualState:
    bands: tuple
    wave: MemoryWave
    particles: list

    @classmethod
    def initial(cls, core_count):
        return cls(
            bands=tuple(BandState() for _ in range(core_count)),
            wave=MemoryWave(),
            particles=[],
        )


def band_intensities(band, cols):
    """Per-column intensity in [0, amplitude] for one core band"""
    columns = np.arange(cols, dtype=float)
    wave = np.sin(band.phase + columns * COLUMN_OFFSET)
    return band.amplitude * (wave + 1.0) / 2.0


def wave_heights(wave, cols):
    """Per-column memory wave height in [-fraction, fraction]"""
    columns = np.arange(cols, dtype=float)
    return wave.fraction * np.sin(wave.phase + columns * COLUMN_OFFSET)


class VisualStateEngine:
    """
    Owns the VisualState and advances it one tick at a time.

    The random source is injected (or seeded) at construction so particle
    spawning is reproducible under test while still advancing within a run.
    """

    def __init__(self, core_count, rng=None, seed=None):
        if core_count < 1:
            raise ValueError("core_count must be at least 1")
        self.core_count = core_count
        self.rng = rng if rng is not None else random.Random(seed)
        self.state = VisualState.initial(core_count)

    def reseed(self, seed):
        self.rng.seed(seed)

    def clear_particles(self):
        self.state.particles = []

    def mean_load(self):
        """Average recent load over all cores, in [0, 1]"""
        samples = [load for band in self.state.bands for load in band.history]
        if not samples:
            return 0.0
        return sum(samples) / len(samples)

    def advance(self, snapshot, dt, dims, particles_enabled):
        dt = max(float(dt), 0.0)
        loads = snapshot.core_loads

        # Build every new value first, then install them together
        band_updates = []
        for i, band in enumerate(self.state.bands):
            load = clamp_unit(loads[i]) if i < len(loads) else 0.0
            band_updates.append(((band.phase + TAU * BAND_RATE * dt) % TAU, load))

        wave_phase = (self.state.wave.phase + TAU * WAVE_RATE * dt) % TAU
        wave_fraction = clamp_unit(snapshot.memory_fraction)

        if particles_enabled:
            particles = self._step_particles(snapshot, dt, dims)
        else:
            particles = []

        for band, (phase, load) in zip(self.state.bands, band_updates):
            band.phase = phase
            band.amplitude = load
            band.history.append(load)
        self.state.wave.phase = wave_phase
        self.state.wave.fraction = wave_fraction
        self.state.particles = particles
        return self.state

    def _step_particles(self, snapshot, dt, dims):
        # Move and age the survivors
        moved = []
        for p in self.state.particles:
            moved.append(Particle(
                col=p.col + p.vcol * dt,
                row=p.row + p.vrow * dt,
                vcol=p.vcol,
                vrow=p.vrow + GRAVITY * dt,
                kind=p.kind,
                glyph=p.glyph,
                age=p.age + dt,
            ))

        # Sweep out-of-bounds and expired
        alive = [
            p for p in moved
            if 0 <= p.row < dims.rows and 0 <= p.col < dims.cols and p.age <= MAX_AGE
        ]

        # Spawn after the sweep so new particles survive their first tick
        if dims.cols > 0 and dims.rows > 0:
            alive.extend(self._spawn(ParticleKind.NETWORK, snapshot.network_delta, dims))
            alive.extend(self._spawn(ParticleKind.DISK, snapshot.disk_delta, dims))

        overflow = len(alive) - PARTICLE_CAP
        if overflow > 0:
            # Oldest first in spawn order
            del alive[:overflow]
        return alive

    def _spawn(self, kind, magnitude, dims):
        threshold = SPAWN_THRESHOLDS[kind]
        if magnitude <= threshold:
            return []
        ratio = magnitude / threshold
        count = min(MAX_SPAWN, math.ceil(ratio))
        speed = min(MAX_SPEED, BASE_SPEED * (1.0 + math.log2(ratio)))
        glyphs = PARTICLE_GLYPHS[kind]
        spawned = []
        for _ in range(count):
            spawned.append(Particle(
                col=self.rng.uniform(0.0, dims.cols - 1e-6),
                row=0.0,
                vcol=self.rng.uniform(-MAX_DRIFT, MAX_DRIFT),
                vrow=speed,
                kind=kind,
                glyph=self.rng.choice(glyphs),
            ))
        if spawned:
            logger.debug("Spawned %d %s particles (%.0f bytes)", count, kind.value, magnitude)
        return spawned
