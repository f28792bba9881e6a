"""
Tensor rendition of the explicit stencil.

The Laplacian is taken on the whole array at once through per-axis neighbour
index tensors (clamp or wrap), then absorbing edges and corners are
overwritten from the same descriptors the numba kernels use. Inactive cells
keep their input values via ``torch.where``.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import torch

from wavebilliard.boundary import corner_descriptors, edge_descriptors, neighbor_indices
from wavebilliard.coefficients import CoefficientFields
from wavebilliard.config import WaveConfig
from wavebilliard.errors import ConfigurationError
from wavebilliard.gpu import GPUContext
from wavebilliard.grid import Grid
from wavebilliard.mask import DomainMask
from wavebilliard.rules import RuleRegistry
from wavebilliard.state import FieldState
from wavebilliard.stencil import active_cells
from wavebilliard.types import AxisMode, FieldKind, axis_modes

logger = logging.getLogger(__name__)


class TorchStepper:
    """Same contract as ``Stepper``, stepping on a torch device.

    The state is uploaded at the start of ``step`` and written back into the
    FieldState arrays at the end, so stepping many reported steps per call is
    much cheaper than many calls.
    """

    def __init__(
        self,
        grid: Grid,
        mask: DomainMask,
        coefficients: CoefficientFields,
        config: WaveConfig,
        device: Optional[torch.device] = None,
    ):
        mask.check_grid(grid)
        if coefficients.shape != grid.shape:
            raise ConfigurationError(
                f"coefficient shape {coefficients.shape} does not match grid {grid.shape}"
            )
        self.grid = grid
        self.mask = mask
        self.config = config
        self.rule = RuleRegistry.for_kind(config.kind)
        self.device = device if device is not None else GPUContext.device()
        self.dtype = GPUContext.dtype(self.device)
        self.time = 0
        self.micro_steps = 0

        self._constants = tuple(float(c) for c in self.rule.constants(config, grid))
        self._active_np = active_cells(mask, config)
        self._active = torch.from_numpy(self._active_np).to(self.device)
        self._courant = GPUContext.to_device(coefficients.courant, self.device)
        self._courant2 = GPUContext.to_device(coefficients.courant2, self.device)
        self._damping = GPUContext.to_device(coefficients.damping, self.device)

        mode_x, mode_y = axis_modes(config.policy)
        ip, im = neighbor_indices(grid.nx, mode_x)
        jp, jm = neighbor_indices(grid.ny, mode_y)
        self._ip, self._im, self._jp, self._jm = (
            torch.from_numpy(idx).to(self.device) for idx in (ip, im, jp, jm)
        )

        # Absorbing edges as flat index tensors; non-absorbing edges are
        # already covered by the whole-array Laplacian.
        self._edges = []
        for edge in edge_descriptors(grid, config.policy, config):
            if edge.mode is not AxisMode.ABSORB:
                continue
            ii, jj = edge.cells()
            self._edges.append((
                torch.from_numpy(ii).to(self.device),
                torch.from_numpy(jj).to(self.device),
                torch.from_numpy(ii - edge.oi).to(self.device),
                torch.from_numpy(jj - edge.oj).to(self.device),
                edge.kappa,
                edge.gamma,
            ))
        self._corners = [c for c in corner_descriptors(grid, config.policy, config) if c.absorbing]

        logger.info(
            "TorchStepper ready: rule=%s policy=%s grid=%dx%d device=%s dtype=%s",
            self.rule.name, config.policy.name, grid.nx, grid.ny, self.device, self.dtype,
        )

    @property
    def active(self) -> np.ndarray:
        return self._active_np

    def _laplacian(self, u: torch.Tensor) -> torch.Tensor:
        return u[self._ip, :] + u[self._im, :] + u[:, self._jp] + u[:, self._jm] - 4.0 * u

    def step(self, state: FieldState, n: int = 1) -> None:
        """Advance the state by n reported steps."""
        state.check_grid(self.grid)
        if state.kind is not self.rule.kind:
            raise ConfigurationError(
                f"state holds a {state.kind.value} field, stepper runs the {self.rule.name} rule"
            )
        phi = GPUContext.to_device(state.phi, self.device)
        psi = GPUContext.to_device(state.psi, self.device)
        with torch.no_grad():
            for _ in range(n):
                for _ in range(self.rule.half_steps):
                    phi, psi = self._micro_step(phi, psi)
                self.time += 1
        state.phi[...] = GPUContext.to_cpu(phi)
        state.psi[...] = GPUContext.to_cpu(psi)

    def _micro_step(self, phi: torch.Tensor, psi: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        self.micro_steps += 1
        if self.config.kind is FieldKind.WAVE:
            phi_new, psi_new = self._wave(phi, psi)
        else:
            phi_new, psi_new = self._schrodinger(phi, psi)

        phi_new = torch.where(self._active, phi_new, phi)
        psi_new = torch.where(self._active, psi_new, psi)

        if self.config.drive_left:
            value = self.config.drive_amplitude * math.cos(self.micro_steps * self.config.drive_omega)
            phi_new[0] = torch.where(self._active[0], torch.full_like(phi_new[0], value), phi_new[0])

        if self.config.clamp:
            vmax = self.config.vmax
            phi_new = torch.where(self._active, phi_new.clamp(-vmax, vmax), phi_new)
            psi_new = torch.where(self._active, psi_new.clamp(-vmax, vmax), psi_new)
        return phi_new, psi_new

    def _wave(self, x: torch.Tensor, y: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        kappa = self._constants[0]
        new = -y + 2.0 * x + self._courant2 * self._laplacian(x) - kappa * x - self._damping * (x - y)

        for ii, jj, iin, jin, kap, gam in self._edges:
            xe = x[ii, jj]
            new[ii, jj] = xe - self._courant[ii, jj] * (xe - x[iin, jin]) - kap * xe - gam * (xe - y[ii, jj])

        for c in self._corners:
            target, kap, gam = self._corner_average(x, c)
            xc = x[c.i, c.j]
            new[c.i, c.j] = xc - self._courant[c.i, c.j] * (xc - target) - kap * xc - gam * (xc - y[c.i, c.j])
        return new, x.clone()

    def _schrodinger(self, x: torch.Tensor, y: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        step, step1 = self._constants
        phi_new = x - step * self._laplacian(y)
        psi_new = y + step * self._laplacian(x)

        for ii, jj, iin, jin, _, _ in self._edges:
            xe = x[ii, jj]
            ye = y[ii, jj]
            phi_new[ii, jj] = xe - step1 * (ye - y[iin, jin])
            psi_new[ii, jj] = ye + step1 * (xe - x[iin, jin])

        for c in self._corners:
            x_target, _, _ = self._corner_average(x, c)
            y_target, _, _ = self._corner_average(y, c)
            xc = x[c.i, c.j]
            yc = y[c.i, c.j]
            phi_new[c.i, c.j] = xc - step1 * (yc - y_target)
            psi_new[c.i, c.j] = yc + step1 * (xc - x_target)
        return phi_new, psi_new

    @staticmethod
    def _corner_average(u: torch.Tensor, corner) -> tuple[torch.Tensor, float, float]:
        """Mean inward neighbour and mean (kappa, gamma) over the absorbing axes."""
        values = []
        kappas = []
        gammas = []
        if corner.mode_x is AxisMode.ABSORB:
            values.append(u[corner.i - corner.oi, corner.j])
            kappas.append(corner.kappa_x)
            gammas.append(corner.gamma_x)
        if corner.mode_y is AxisMode.ABSORB:
            values.append(u[corner.i, corner.j - corner.oj])
            kappas.append(corner.kappa_y)
            gammas.append(corner.gamma_y)
        n = len(values)
        return sum(values) / n, sum(kappas) / n, sum(gammas) / n
