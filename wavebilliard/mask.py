"""Domain mask: which cells of the lattice belong to the billiard."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np
from PIL import Image
from scipy.ndimage import convolve

from wavebilliard.errors import ConfigurationError
from wavebilliard.grid import Grid

logger = logging.getLogger(__name__)

OUTSIDE = 0
MEDIUM_A = 1
MEDIUM_B = 2

DomainPredicate = Callable[[float, float], "int | bool"]


class DomainMask:
    """Per-cell region ids, immutable once built.

    0 marks cells outside the simulated domain; positive values are material
    regions (1 = primary medium, >= 2 = secondary medium).
    """

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=np.int8, copy=True)
        if values.ndim != 2:
            raise ConfigurationError(f"mask must be 2D, got shape {values.shape}")
        if np.any(values < 0):
            raise ConfigurationError("mask region ids must be non-negative")
        values.setflags(write=False)
        self._values = values
        inside = values != OUTSIDE
        inside.setflags(write=False)
        self._inside = inside

    @classmethod
    def full(cls, grid: Grid, region: int = MEDIUM_A) -> "DomainMask":
        """Mask with every cell inside the given region."""
        return cls(np.full(grid.shape, region, dtype=np.int8))

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def inside(self) -> np.ndarray:
        """Read-only boolean array, True where the cell is simulated."""
        return self._inside

    def count_inside(self) -> int:
        return int(np.count_nonzero(self._inside))

    def region(self, region_id: int) -> np.ndarray:
        return self._values == region_id

    def boundary_cells(self) -> np.ndarray:
        """Inside cells with at least one outside 4-neighbour.

        Cells beyond the lattice count as outside, so the border of a fully
        inside grid is its boundary. Used by renderers to draw the wall.
        """
        kernel = np.array([[0, 1, 0],
                           [1, 0, 1],
                           [0, 1, 0]], dtype=np.uint8)
        outside_neighbor_count = convolve((~self._inside).astype(np.uint8), kernel,
                                          mode='constant', cval=1)
        return self._inside & (outside_neighbor_count > 0)

    def check_grid(self, grid: Grid) -> None:
        if self.shape != grid.shape:
            raise ConfigurationError(f"mask shape {self.shape} does not match grid {grid.shape}")

    def __repr__(self) -> str:
        return f"DomainMask(shape={self.shape}, inside={self.count_inside()})"


def build_domain_mask(grid: Grid, predicate: DomainPredicate) -> DomainMask:
    """Evaluate the membership predicate once at every cell's coordinates.

    Args:
        grid: Lattice to classify
        predicate: (x, y) -> region id; 0/False/None means outside, True means medium A

    Returns:
        The immutable DomainMask
    """
    values = np.zeros(grid.shape, dtype=np.int8)
    X, Y = grid.coordinates()
    for i in range(grid.nx):
        for j in range(grid.ny):
            region = predicate(float(X[i, j]), float(Y[i, j]))
            values[i, j] = int(region) if region else OUTSIDE
    mask = DomainMask(values)
    logger.debug("Built domain mask: %d of %d cells inside", mask.count_inside(), values.size)
    return mask


def load_mask_image(
    path: str,
    grid: Grid,
    threshold: float = 0.5,
    region: int = MEDIUM_A,
) -> DomainMask:
    """Build a mask from a PNG alpha channel.

    The image is resampled (nearest neighbour) to the lattice. Image row 0 is
    the top of the domain (largest y).

    Args:
        path: Image file with an alpha channel
        grid: Target lattice
        threshold: Alpha (0-1) above which a pixel is inside
        region: Region id assigned to inside pixels
    """
    img = Image.open(path).convert('RGBA')
    alpha = img.getchannel('A').resize((grid.nx, grid.ny), Image.Resampling.NEAREST)
    alpha = np.asarray(alpha, dtype=np.float32) / 255.0
    # (row, col) from the top-left -> [i, j] from the bottom-left
    alpha = alpha[::-1, :].T
    return DomainMask(np.where(alpha > threshold, region, OUTSIDE).astype(np.int8))


def save_mask_image(mask: DomainMask, path: str) -> None:
    """Save the inside cells as an opaque alpha channel (inverse of load_mask_image)."""
    alpha = np.where(mask.inside, 255, 0).astype(np.uint8).T[::-1, :]
    rgba = np.zeros((*alpha.shape, 4), dtype=np.uint8)
    rgba[..., 3] = alpha
    Image.fromarray(rgba).save(path)
