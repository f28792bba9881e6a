"""
Edge descriptors for the boundary passes of the stencil.

Each of the four edges (corners excluded) is described once: where it
starts, which way it runs, which way is "out", how a missing neighbour is
resolved and which edge coefficients apply. The four corners get their own
descriptors so each corner is written by exactly one rule.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from wavebilliard.config import WaveConfig
from wavebilliard.grid import Grid
from wavebilliard.types import AxisMode, BoundaryPolicy, axis_modes


@dataclass(frozen=True)
class EdgeDescriptor:
    """One border of the lattice, corners excluded.

    Attributes:
        name: "left", "right", "bottom" or "top"
        i0, j0: First cell of the edge
        si, sj: Step along the edge
        count: Number of cells (corners excluded)
        oi, oj: Offset pointing out of the grid
        mode: Resolution of the missing neighbour
        kappa, gamma: Stiffness/damping used when the edge is absorbing
    """
    name: str
    i0: int
    j0: int
    si: int
    sj: int
    count: int
    oi: int
    oj: int
    mode: AxisMode
    kappa: float
    gamma: float

    def cells(self) -> tuple[np.ndarray, np.ndarray]:
        k = np.arange(self.count)
        return self.i0 + k * self.si, self.j0 + k * self.sj

    def kernel_args(self) -> tuple:
        return (self.i0, self.j0, self.si, self.sj, self.count, self.oi, self.oj,
                int(self.mode), float(self.kappa), float(self.gamma))


@dataclass(frozen=True)
class CornerDescriptor:
    """A corner cell with its two outward offsets and both axis rules."""
    name: str
    i: int
    j: int
    oi: int
    oj: int
    mode_x: AxisMode
    mode_y: AxisMode
    kappa_x: float
    gamma_x: float
    kappa_y: float
    gamma_y: float

    @property
    def absorbing(self) -> bool:
        return AxisMode.ABSORB in (self.mode_x, self.mode_y)

    def kernel_args(self) -> tuple:
        return (self.i, self.j, self.oi, self.oj, int(self.mode_x), int(self.mode_y),
                float(self.kappa_x), float(self.gamma_x), float(self.kappa_y), float(self.gamma_y))


def edge_descriptors(grid: Grid, policy: BoundaryPolicy, config: WaveConfig) -> tuple[EdgeDescriptor, ...]:
    """Describe the left, right, bottom and top edges for a policy."""
    mode_x, mode_y = axis_modes(policy)
    nx, ny = grid.shape
    sides = (config.kappa_sides, config.gamma_sides)
    topbot = (config.kappa_topbot, config.gamma_topbot)
    return (
        EdgeDescriptor("left", 0, 1, 0, 1, ny - 2, -1, 0, mode_x, *sides),
        EdgeDescriptor("right", nx - 1, 1, 0, 1, ny - 2, 1, 0, mode_x, *sides),
        EdgeDescriptor("bottom", 1, 0, 1, 0, nx - 2, 0, -1, mode_y, *topbot),
        EdgeDescriptor("top", 1, ny - 1, 1, 0, nx - 2, 0, 1, mode_y, *topbot),
    )


def corner_descriptors(grid: Grid, policy: BoundaryPolicy, config: WaveConfig) -> tuple[CornerDescriptor, ...]:
    """Describe the four corners.

    A corner touching an absorbing axis decays toward the mean of its inward
    neighbours along the absorbing axes; otherwise it follows the leapfrog rule
    with both missing neighbours resolved by their axis modes.
    """
    mode_x, mode_y = axis_modes(policy)
    nx, ny = grid.shape
    coeffs = (config.kappa_sides, config.gamma_sides, config.kappa_topbot, config.gamma_topbot)
    return (
        CornerDescriptor("bottom_left", 0, 0, -1, -1, mode_x, mode_y, *coeffs),
        CornerDescriptor("bottom_right", nx - 1, 0, 1, -1, mode_x, mode_y, *coeffs),
        CornerDescriptor("top_left", 0, ny - 1, -1, 1, mode_x, mode_y, *coeffs),
        CornerDescriptor("top_right", nx - 1, ny - 1, 1, 1, mode_x, mode_y, *coeffs),
    )


def neighbor_indices(n: int, mode: AxisMode) -> tuple[np.ndarray, np.ndarray]:
    """Return (plus, minus) neighbour index vectors along one axis.

    Wrap maps the missing neighbours to the opposite side; clamp (and
    absorb, whose edge cells are overwritten separately) maps them onto the
    cell itself.
    """
    idx = np.arange(n)
    if AxisMode(mode) is AxisMode.WRAP:
        return (idx + 1) % n, (idx - 1) % n
    return np.minimum(idx + 1, n - 1), np.maximum(idx - 1, 0)


def laplacian(u: np.ndarray, policy: BoundaryPolicy) -> np.ndarray:
    """5-point Laplacian of a whole array with the policy's neighbour rules."""
    mode_x, mode_y = axis_modes(policy)
    ip, im = neighbor_indices(u.shape[0], mode_x)
    jp, jm = neighbor_indices(u.shape[1], mode_y)
    return u[ip, :] + u[im, :] + u[:, jp] + u[:, jm] - 4.0 * u
