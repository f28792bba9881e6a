"""
Explicit stencil updater.

One micro-step reads the state's current pair, writes the scratch pair with
a bulk pass, four edge passes and one corner pass, then swaps. The wave rule
advances one time level per micro-step; the Schrodinger rule pairs two
half-steps per reported step.

A Courant number above the 2D stability limit 1/sqrt(2) makes the scheme
grow without bound. This is a precondition, not a checked invariant: only
the optional debug clamp hides the symptoms.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from wavebilliard import kernels
from wavebilliard.boundary import corner_descriptors, edge_descriptors
from wavebilliard.coefficients import CoefficientFields
from wavebilliard.config import WaveConfig
from wavebilliard.errors import ConfigurationError
from wavebilliard.grid import Grid
from wavebilliard.mask import DomainMask
from wavebilliard.rules import RuleRegistry, UpdateRule
from wavebilliard.state import FieldState

logger = logging.getLogger(__name__)


def active_cells(mask: DomainMask, config: WaveConfig) -> np.ndarray:
    """Cells the stencil updates: the billiard, or every cell in two-speed mode."""
    if config.two_speeds:
        return np.ones(mask.shape, dtype=np.bool_)
    return np.array(mask.inside, dtype=np.bool_, copy=True)


class Stepper:
    """Advance a FieldState under one boundary policy and update rule.

    Args:
        grid: Lattice
        mask: Domain mask built on the same grid
        coefficients: Coefficient tables from build_coefficients
        config: Run configuration
        rule: Update rule; defaults to the registered rule for config.kind
    """

    def __init__(
        self,
        grid: Grid,
        mask: DomainMask,
        coefficients: CoefficientFields,
        config: WaveConfig,
        rule: UpdateRule | None = None,
    ):
        mask.check_grid(grid)
        if coefficients.shape != grid.shape:
            raise ConfigurationError(
                f"coefficient shape {coefficients.shape} does not match grid {grid.shape}"
            )
        rule = rule if rule is not None else RuleRegistry.for_kind(config.kind)
        if rule.kind is not config.kind:
            raise ConfigurationError(
                f"rule '{rule.name}' steps {rule.kind.value} fields, config asks for {config.kind.value}"
            )

        self.grid = grid
        self.mask = mask
        self.coefficients = coefficients
        self.config = config
        self.rule = rule
        self.edges = edge_descriptors(grid, config.policy, config)
        self.corners = corner_descriptors(grid, config.policy, config)
        self._active = active_cells(mask, config)
        self._constants = tuple(float(c) for c in rule.constants(config, grid))
        self.time = 0
        self.micro_steps = 0

        logger.info(
            "Stepper ready: rule=%s policy=%s grid=%dx%d active=%d constants=%s",
            rule.name, config.policy.name, grid.nx, grid.ny,
            int(np.count_nonzero(self._active)), self._constants,
        )

    @property
    def active(self) -> np.ndarray:
        return self._active

    @property
    def integration_step(self) -> float:
        """Bulk constant of the rule (kappa for waves, dt/(dx² hbar) for Schrodinger)."""
        return self._constants[0]

    @property
    def edge_integration_step(self) -> float:
        return self._constants[1]

    def check_state(self, state: FieldState) -> None:
        state.check_grid(self.grid)
        if state.kind is not self.rule.kind:
            raise ConfigurationError(
                f"state holds a {state.kind.value} field, stepper runs the {self.rule.name} rule"
            )

    def step(self, state: FieldState, n: int = 1) -> None:
        """Advance the state by n reported steps."""
        self.check_state(state)
        for _ in range(n):
            for _ in range(self.rule.half_steps):
                self._micro_step(state)
                state.swap()
            self.time += 1

    def _micro_step(self, state: FieldState) -> None:
        self.micro_steps += 1
        rule = self.rule
        coeffs = self.coefficients
        phi_out, psi_out = state.scratch
        args = (state.phi, state.psi, phi_out, psi_out, self._active,
                coeffs.courant, coeffs.courant2, coeffs.damping, *self._constants)

        rule.bulk(*args)
        for edge in self.edges:
            rule.edge(*args, *edge.kernel_args())
        for corner in self.corners:
            rule.corner(*args, *corner.kernel_args())

        if self.config.drive_left:
            left = self._active[0]
            phi_out[0, left] = self.config.drive_amplitude * math.cos(self.micro_steps * self.config.drive_omega)

        if self.config.clamp:
            kernels.clamp_active(phi_out, psi_out, self._active, self.config.vmax)
