"""Value types shared by the LiveScope pipeline"""

from dataclasses import dataclass, field
from enum import Enum


class StartupError(Exception):
    """Raised when LiveScope cannot start (no cores, no usable terminal)"""


class ParticleKind(Enum):
    NETWORK = "network"
    DISK = "disk"


@dataclass(slots=True, frozen=True)
class MetricsSnapshot:
    """One reading of every tracked metric, taken once per tick"""

    core_loads: tuple[float, ...]
    memory_fraction: float
    network_delta: float  # bytes since previous sample
    disk_delta: float  # bytes read + written since previous sample

    @classmethod
    def idle(cls, core_count):
        return cls(
            core_loads=(0.0,) * core_count,
            memory_fraction=0.0,
            network_delta=0.0,
            disk_delta=0.0,
        )


@dataclass(slots=True)
class Particle:
    col: float
    row: float
    vcol: float  # columns per second
    vrow: float  # rows per second, positive is downward
    kind: ParticleKind
    glyph: str
    age: float = 0.0


@dataclass(slots=True, frozen=True)
class Dimensions:
    cols: int
    rows: int

    def clamp(self, col, row):
        """Clamp a (possibly fractional) position into the grid"""
        c = min(max(int(col), 0), max(self.cols - 1, 0))
        r = min(max(int(row), 0), max(self.rows - 1, 0))
        return c, r


Color = tuple[int, int, int]


@dataclass(slots=True, frozen=True)
class Cell:
    glyph: str
    color: Color


@dataclass(slots=True)
class Frame:
    """Full character/color grid for one tick, indexed [row][col]"""

    dims: Dimensions
    cells: list[list[Cell]] = field(default_factory=list)

    @classmethod
    def filled(cls, dims, cell):
        return cls(dims, [[cell] * dims.cols for _ in range(dims.rows)])

    def put(self, col, row, glyph, color):
        if self.dims.cols <= 0 or self.dims.rows <= 0:
            return
        c, r = self.dims.clamp(col, row)
        self.cells[r][c] = Cell(glyph, color)

    def at(self, col, row):
        return self.cells[row][col]

    def row_text(self, row):
        return "".join(cell.glyph for cell in self.cells[row])


@dataclass(slots=True, frozen=True)
class Config:
    """Resolved startup configuration; replaced, never mutated, on toggle"""

    theme: str = "fire"
    tick_interval: float = 0.016  # seconds
    particles: bool = False
    show_hud: bool = True
    seed: int | None = None
