"""
Per-frame aggregate, display scale and probability renormalization.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from wavebilliard.boundary import laplacian
from wavebilliard.coefficients import CoefficientFields
from wavebilliard.config import WaveConfig
from wavebilliard.errors import ConfigurationError
from wavebilliard.mask import DomainMask
from wavebilliard.state import FieldState
from wavebilliard.types import FieldKind

logger = logging.getLogger(__name__)


def compute_aggregate(state: FieldState, mask: DomainMask) -> float:
    """Mean squared magnitude over the inside cells.

    Wave fields use phi² only; Schrodinger fields use phi² + psi². The
    inside-cell count is floored to 1 so an empty domain yields 0.0.
    """
    if state.shape != mask.shape:
        raise ConfigurationError(f"state shape {state.shape} does not match mask {mask.shape}")
    inside = mask.inside
    count = max(int(np.count_nonzero(inside)), 1)
    phi = state.phi[inside]
    total = float(np.dot(phi, phi))
    if state.kind is FieldKind.SCHRODINGER:
        psi = state.psi[inside]
        total += float(np.dot(psi, psi))
    return total / count


def derive_scale(aggregate: float) -> float:
    """Display scale sqrt(1 + aggregate)."""
    return math.sqrt(1.0 + aggregate)


def renormalize(state: FieldState, mask: DomainMask, aggregate: float) -> None:
    """Divide both parts of every inside cell by sqrt(aggregate).

    Afterwards ``compute_aggregate(state, mask)`` returns 1.0 (up to rounding).
    A non-positive aggregate (empty domain or zero field) leaves the state
    untouched.

    Raises:
        ConfigurationError: For wave fields, whose aggregate is not a probability
    """
    if state.kind is not FieldKind.SCHRODINGER:
        raise ConfigurationError("renormalize only applies to Schrodinger fields")
    if not aggregate > 0:
        logger.debug("Skipping renormalization: aggregate=%r", aggregate)
        return
    inside = mask.inside
    factor = 1.0 / math.sqrt(aggregate)
    state.phi[inside] *= factor
    state.psi[inside] *= factor


def normalize_frame(state: FieldState, mask: DomainMask, renormalize_field: bool = False) -> tuple[float, float]:
    """Aggregate, then scale, then optional renormalization.

    Returns:
        (aggregate, scale), both computed before any renormalization
    """
    aggregate = compute_aggregate(state, mask)
    scale = derive_scale(aggregate)
    if renormalize_field:
        renormalize(state, mask, aggregate)
    return aggregate, scale


def wave_energy(state: FieldState, mask: DomainMask, coefficients: CoefficientFields, config: WaveConfig) -> float:
    """Discrete energy of the leapfrog scheme.

    E = sum over active cells of (phi - psi)²/c² - phi·Δpsi + (kappa/c²)·phi·psi

    This is exactly conserved by the wave rule when damping is zero, no edge
    absorbs, the Courant number is uniform over the active cells and cells
    outside the domain hold zero. It is a check on the integrator, not a
    physical energy.
    """
    if state.kind is not FieldKind.WAVE:
        raise ConfigurationError("wave_energy requires a wave field")
    active = np.ones(mask.shape, dtype=np.bool_) if config.two_speeds else mask.inside
    c2 = coefficients.courant2[active]
    if np.any(c2 <= 0):
        raise ConfigurationError("wave_energy needs a positive Courant number on every active cell")
    phi = state.phi
    psi = state.psi
    lap = laplacian(psi, config.policy)
    diff = (phi - psi)[active]
    terms = diff * diff / c2 - phi[active] * lap[active] + config.kappa * phi[active] * psi[active] / c2
    return float(terms.sum())
