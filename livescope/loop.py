"""Fixed-cadence render loop"""

import dataclasses
import logging
import time
from enum import Enum

from livescope.compositor import composite

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q",)
TOGGLE_KEYS = ("p",)


class LoopState(Enum):
    INIT = "init"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"


class RenderLoop:
    """
    Drives sample -> advance -> composite -> draw -> poll -> sleep.

    Everything runs on the calling thread. A quit key is only acted on after
    the frame for the current tick has been drawn. A slow tick shortens the
    following sleep rather than skipping a frame.
    """

    def __init__(self, config, sampler, engine, surface,
                 clock=time.monotonic, sleep=time.sleep, max_ticks=None):
        self.config = config
        self.sampler = sampler
        self.engine = engine
        self.surface = surface
        self.clock = clock
        self.sleep = sleep
        self.max_ticks = max_ticks
        self.state = LoopState.INIT
        self.tick_count = 0
        self._quit = False
        self._last_tick_start = None

    def run(self):
        self.state = LoopState.RUNNING
        logger.info("Render loop running (theme=%s, interval=%.3fs, particles=%s)",
                    self.config.theme, self.config.tick_interval, self.config.particles)
        try:
            while not self._quit:
                self.tick()
                if self.max_ticks is not None and self.tick_count >= self.max_ticks:
                    break
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.state = LoopState.SHUTTING_DOWN
        logger.info("Render loop stopped after %d ticks", self.tick_count)
        return 0

    def tick(self):
        start = self.clock()
        if self._last_tick_start is None:
            dt = self.config.tick_interval
        else:
            dt = start - self._last_tick_start
        self._last_tick_start = start

        snapshot = self.sampler.sample()
        dims = self.surface.size()
        state = self.engine.advance(snapshot, dt, dims, self.config.particles)
        frame = composite(state, self.config, dims, mean_load=self.engine.mean_load())
        self.surface.draw(frame)
        self.tick_count += 1

        self.handle_key(self.surface.poll_key())
        if self._quit:
            return

        remaining = self.config.tick_interval - (self.clock() - start)
        if remaining > 0:
            self.sleep(remaining)

    def handle_key(self, key):
        if key is None:
            return
        if key in QUIT_KEYS:
            logger.info("Quit requested")
            self._quit = True
        elif key in TOGGLE_KEYS:
            enabled = not self.config.particles
            self.config = dataclasses.replace(self.config, particles=enabled)
            if not enabled:
                self.engine.clear_particles()
            logger.info("Particles %s", "enabled" if enabled else "disabled")
