"""Double-buffered field state."""

from __future__ import annotations

import numpy as np

from wavebilliard.errors import ConfigurationError
from wavebilliard.grid import Grid
from wavebilliard.types import FieldKind

PRECISION = np.float64


class FieldState:
    """Two same-shaped real arrays plus a scratch pair for the next level.

    For FieldKind.WAVE, ``phi`` is the displacement now and ``psi`` the
    displacement one step earlier. For FieldKind.SCHRODINGER they are the
    real and imaginary parts at the same time level.

    Stepping reads (phi, psi), writes the scratch pair and then calls
    ``swap()``; consumers should read ``state.phi``/``state.psi`` afresh each
    tick rather than holding on to the arrays.
    """

    def __init__(self, phi: np.ndarray, psi: np.ndarray, kind: FieldKind | str = FieldKind.WAVE):
        phi = np.array(phi, dtype=PRECISION, order='C', copy=True)
        psi = np.array(psi, dtype=PRECISION, order='C', copy=True)
        if phi.ndim != 2 or phi.shape != psi.shape:
            raise ConfigurationError(f"phi {phi.shape} and psi {psi.shape} must be equal 2D shapes")
        self.kind = FieldKind(kind)
        self.phi = phi
        self.psi = psi
        self._phi_next = phi.copy()
        self._psi_next = psi.copy()

    @classmethod
    def zeros(cls, grid: Grid, kind: FieldKind | str = FieldKind.WAVE) -> "FieldState":
        return cls(np.zeros(grid.shape, dtype=PRECISION), np.zeros(grid.shape, dtype=PRECISION), kind)

    @property
    def shape(self) -> tuple[int, int]:
        return self.phi.shape

    @property
    def scratch(self) -> tuple[np.ndarray, np.ndarray]:
        """Output pair for the next micro-step."""
        return self._phi_next, self._psi_next

    def swap(self) -> None:
        """Make the scratch pair current."""
        self.phi, self._phi_next = self._phi_next, self.phi
        self.psi, self._psi_next = self._psi_next, self.psi

    def check_grid(self, grid: Grid) -> None:
        if self.shape != grid.shape:
            raise ConfigurationError(f"state shape {self.shape} does not match grid {grid.shape}")

    def copy(self) -> "FieldState":
        return FieldState(self.phi, self.psi, self.kind)

    def __repr__(self) -> str:
        return f"FieldState(kind={self.kind.value}, shape={self.shape})"
