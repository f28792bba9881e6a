"""Initial conditions: localized packets seeded or superimposed onto a FieldState."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from wavebilliard import defaults
from wavebilliard.errors import ConfigurationError
from wavebilliard.grid import Grid
from wavebilliard.mask import DomainMask
from wavebilliard.state import FieldState
from wavebilliard.types import FieldKind


@dataclass(frozen=True)
class PulseParams:
    """Classical pulse ("drop"): amplitude * exp(-d²/variance) * cos(-d/wavelength)."""
    amplitude: float = defaults.DEFAULT_PULSE_AMPLITUDE
    variance: float = defaults.DEFAULT_PULSE_VARIANCE
    wavelength: float = defaults.DEFAULT_PULSE_WAVELENGTH

    def __post_init__(self) -> None:
        if self.variance <= 0 or self.wavelength <= 0:
            raise ConfigurationError("pulse variance and wavelength must be positive")


@dataclass(frozen=True)
class CoherentParams:
    """Coherent state: Gaussian envelope of width ``scale`` with momentum (px, py)."""
    px: float = 0.0
    py: float = 0.0
    scale: float = defaults.DEFAULT_PACKET_SCALE
    amplitude: float = defaults.DEFAULT_PACKET_AMPLITUDE

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ConfigurationError("wavepacket scale must be positive")


PacketParams = PulseParams | CoherentParams


def _dist2(grid: Grid, x: float, y: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    X, Y = grid.coordinates()
    return X - x, Y - y, (X - x) ** 2 + (Y - y) ** 2


def pulse_profile(grid: Grid, x: float, y: float, params: PulseParams) -> np.ndarray:
    """Unmasked classical pulse centred at (x, y)."""
    _, _, dist2 = _dist2(grid, x, y)
    return params.amplitude * np.exp(-dist2 / params.variance) * np.cos(-np.sqrt(dist2) / params.wavelength)


def coherent_profile(grid: Grid, x: float, y: float, params: CoherentParams) -> tuple[np.ndarray, np.ndarray]:
    """Unmasked (real, imaginary) parts of a coherent wavepacket centred at (x, y).

    The envelope is floored at 1e-15 so the phase stays defined everywhere.
    """
    ddx, ddy, dist2 = _dist2(grid, x, y)
    module = np.maximum(np.exp(-dist2 / (params.scale * params.scale)), defaults.MIN_PACKET_MODULE)
    module *= params.amplitude
    phase = (params.px * ddx + params.py * ddy) / params.scale
    return module * np.cos(phase), module * np.sin(phase)


def _packet(state: FieldState, grid: Grid, x: float, y: float, params: PacketParams) -> tuple[np.ndarray, np.ndarray | None]:
    """Return (phi part, psi part or None) for the state's field kind."""
    state.check_grid(grid)
    if state.kind is FieldKind.WAVE:
        if not isinstance(params, PulseParams):
            raise ConfigurationError(f"wave fields take PulseParams, got {type(params).__name__}")
        return pulse_profile(grid, x, y, params), None
    if not isinstance(params, CoherentParams):
        raise ConfigurationError(f"Schrodinger fields take CoherentParams, got {type(params).__name__}")
    return coherent_profile(grid, x, y, params)


def seed_packet(state: FieldState, mask: DomainMask, grid: Grid, x: float, y: float, params: PacketParams) -> None:
    """Overwrite the state with a single packet centred at (x, y).

    Wave fields get the pulse in ``phi`` and zero in ``psi`` (the field starts
    at rest one step earlier). Cells outside the domain are set to 0.0.
    """
    mask.check_grid(grid)
    phi_part, psi_part = _packet(state, grid, x, y, params)
    inside = mask.inside
    state.phi[...] = np.where(inside, phi_part, 0.0)
    if psi_part is None:
        state.psi[...] = 0.0
    else:
        state.psi[...] = np.where(inside, psi_part, 0.0)


def add_packet(
    state: FieldState,
    mask: DomainMask,
    grid: Grid,
    factor: float,
    x: float,
    y: float,
    params: PacketParams,
) -> None:
    """Superimpose ``factor`` times a packet onto the inside cells.

    Wave fields only receive the packet in ``phi``. Outside cells are left
    untouched.
    """
    mask.check_grid(grid)
    phi_part, psi_part = _packet(state, grid, x, y, params)
    inside = mask.inside
    state.phi[inside] += factor * phi_part[inside]
    if psi_part is not None:
        state.psi[inside] += factor * psi_part[inside]
