"""Shared fakes for livescope tests."""

import pytest

from livescope.models import Dimensions, MetricsSnapshot


class FakeClock:
    """Monotonic clock that advances only when told to."""

    def __init__(self, start=100.0, step=0.004):
        self.now = start
        self.step = step

    def __call__(self):
        # Each reading costs a little "work" time
        self.now += self.step
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class FakeSampler:
    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0

    def sample(self):
        index = min(self.calls, len(self.snapshots) - 1)
        self.calls += 1
        return self.snapshots[index]


class FakeSurface:
    """Drawing surface that records frames and replays scripted keys."""

    def __init__(self, dims=Dimensions(cols=40, rows=12), keys=None):
        self.dims = dims
        self.keys = dict(keys or {})  # tick index -> key
        self.frames = []
        self.events = []

    def size(self):
        return self.dims

    def draw(self, frame):
        self.frames.append(frame)
        self.events.append("draw")

    def poll_key(self):
        key = self.keys.get(len(self.frames) - 1)
        self.events.append(("poll", key))
        return key


@pytest.fixture
def snapshot():
    return MetricsSnapshot(
        core_loads=(0.25, 0.5, 0.75, 1.0),
        memory_fraction=0.6,
        network_delta=0.0,
        disk_delta=0.0,
    )


@pytest.fixture
def busy_snapshot():
    return MetricsSnapshot(
        core_loads=(0.9, 0.9, 0.9, 0.9),
        memory_fraction=0.8,
        network_delta=10 * 1024 * 1024,
        disk_delta=10 * 1024 * 1024,
    )


@pytest.fixture
def dims():
    return Dimensions(cols=80, rows=24)
