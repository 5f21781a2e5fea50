"""psutil-backed metrics sampler"""

import logging

import psutil

from livescope.models import MetricsSnapshot, StartupError

logger = logging.getLogger(__name__)


def detect_core_count():
    count = psutil.cpu_count(logical=True)
    if not count or count < 1:
        raise StartupError("could not detect the number of CPU cores")
    return count


def _net_total():
    net_io = psutil.net_io_counters()
    if net_io is None:
        # No network interfaces
        return None
    return net_io.bytes_sent + net_io.bytes_recv


def _disk_total():
    disk_io = psutil.disk_io_counters()
    if disk_io is None:
        # No disks (some containers)
        return None
    return disk_io.read_bytes + disk_io.write_bytes


class MetricsSampler:
    """
    Reads per-core load, memory and I/O deltas once per tick.

    Every psutil call used here is non-blocking. If a read fails the previous
    snapshot is returned, so a stalled metric never stops the render loop.
    """

    def __init__(self, core_count=None):
        self.core_count = core_count or detect_core_count()
        self._last = MetricsSnapshot.idle(self.core_count)
        self._last_net = None
        self._last_disk = None
        try:
            # First call only establishes the baseline and returns zeros
            psutil.cpu_percent(percpu=True)
            self._last_net = _net_total()
            self._last_disk = _disk_total()
        except (psutil.Error, OSError) as e:
            logger.debug("Sampler priming failed: %s", e)

    @property
    def last(self):
        return self._last

    def sample(self):
        try:
            snapshot = self._read()
        except (psutil.Error, OSError) as e:
            logger.debug("Sampler unavailable, reusing last snapshot: %s", e)
            return self._last
        self._last = snapshot
        return snapshot

    def _read(self):
        percents = list(psutil.cpu_percent(percpu=True, interval=None))
        percents = (percents + [0.0] * self.core_count)[:self.core_count]
        loads = tuple(min(max(p / 100.0, 0.0), 1.0) for p in percents)

        memory = min(max(psutil.virtual_memory().percent / 100.0, 0.0), 1.0)

        net_total = _net_total()
        net_delta = self._delta(net_total, self._last_net)
        disk_total = _disk_total()
        disk_delta = self._delta(disk_total, self._last_disk)

        self._last_net = net_total
        self._last_disk = disk_total

        return MetricsSnapshot(
            core_loads=loads,
            memory_fraction=memory,
            network_delta=net_delta,
            disk_delta=disk_delta,
        )

    @staticmethod
    def _delta(current, previous):
        if current is None or previous is None:
            return 0.0
        # Counters can wrap or reset (interface down, driver reload)
        return float(max(current - previous, 0))
