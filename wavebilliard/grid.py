"""Lattice <-> physical coordinate mapping."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from wavebilliard import defaults
from wavebilliard.errors import ConfigurationError


@dataclass(frozen=True)
class Grid:
    """Rectangular lattice of nx * ny cells over [xmin, xmax] x [ymin, ymax].

    Cell (i, j) sits at x = xmin + i*dx, y = ymin + j*dy. Arrays over the grid
    have shape (nx, ny) and are indexed [i, j], i along x and j along y.
    """

    nx: int = defaults.DEFAULT_GRID_SHAPE[0]
    ny: int = defaults.DEFAULT_GRID_SHAPE[1]
    xmin: float = defaults.DEFAULT_XMIN
    xmax: float = defaults.DEFAULT_XMAX
    ymin: float = defaults.DEFAULT_YMIN
    ymax: float = defaults.DEFAULT_YMAX

    def __post_init__(self) -> None:
        if self.nx < defaults.MIN_GRID_CELLS or self.ny < defaults.MIN_GRID_CELLS:
            raise ConfigurationError(
                f"grid must be at least {defaults.MIN_GRID_CELLS}x{defaults.MIN_GRID_CELLS}, "
                f"got {self.nx}x{self.ny}"
            )
        if not (self.xmax > self.xmin and self.ymax > self.ymin):
            raise ConfigurationError(
                f"empty extent: x [{self.xmin}, {self.xmax}], y [{self.ymin}, {self.ymax}]"
            )

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nx, self.ny)

    @property
    def dx(self) -> float:
        return (self.xmax - self.xmin) / self.nx

    @property
    def dy(self) -> float:
        return (self.ymax - self.ymin) / self.ny

    def index_to_coord(self, i, j):
        """Physical coordinates of cell (i, j). Works on scalars and arrays."""
        return self.xmin + i * self.dx, self.ymin + j * self.dy

    def coord_to_index(self, x, y):
        """Nearest cell to (x, y). No range check: callers own out-of-grid points."""
        i = np.rint((np.asarray(x, dtype=np.float64) - self.xmin) / self.dx).astype(np.int64)
        j = np.rint((np.asarray(y, dtype=np.float64) - self.ymin) / self.dy).astype(np.int64)
        if i.ndim == 0:
            return int(i), int(j)
        return i, j

    def contains_index(self, i: int, j: int) -> bool:
        return 0 <= i < self.nx and 0 <= j < self.ny

    def coordinates(self) -> tuple[np.ndarray, np.ndarray]:
        """Return (X, Y) arrays of shape (nx, ny) with every cell's coordinates."""
        x = self.xmin + np.arange(self.nx, dtype=np.float64) * self.dx
        y = self.ymin + np.arange(self.ny, dtype=np.float64) * self.dy
        return np.meshgrid(x, y, indexing="ij")
