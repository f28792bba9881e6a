"""Per-cell propagation speed and damping tables."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from wavebilliard.config import WaveConfig
from wavebilliard.mask import DomainMask, MEDIUM_A, OUTSIDE


@dataclass(frozen=True)
class CoefficientFields:
    """Read-only coefficient arrays, one value per cell.

    Attributes:
        courant: Courant number (speed in lattice units per step)
        courant2: Squared Courant number used by the leapfrog rule
        damping: Damping coefficient
    """
    courant: np.ndarray
    courant2: np.ndarray
    damping: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.courant.shape


def build_coefficients(mask: DomainMask, config: WaveConfig) -> CoefficientFields:
    """Derive the coefficient tables from the mask in a single pass.

    Medium A gets (courant, gamma); medium B gets gamma_b and, in two-speed
    mode, courant_b. With two_speeds on, cells outside the billiard are
    stepped as medium B, so they get the medium B values too.
    """
    values = mask.values
    medium_a = values == MEDIUM_A
    medium_b = values > MEDIUM_A
    outside = values == OUTSIDE

    courant = np.zeros(values.shape, dtype=np.float64)
    damping = np.zeros(values.shape, dtype=np.float64)

    courant[medium_a] = config.courant
    damping[medium_a] = config.gamma

    courant[medium_b] = config.courant_b if config.two_speeds else config.courant
    damping[medium_b] = config.gamma_b

    if config.two_speeds:
        courant[outside] = config.courant_b
        damping[outside] = config.gamma_b

    courant2 = courant * courant
    for array in (courant, courant2, damping):
        array.setflags(write=False)
    return CoefficientFields(courant=courant, courant2=courant2, damping=damping)
