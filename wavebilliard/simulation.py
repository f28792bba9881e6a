"""
Tick driver: one object owning the grid, mask, coefficients, state and stepper.

Each ``tick()`` yields one displayed frame: the field is evolved by
``config.substeps`` reported steps and periodic sources are re-injected, then
the aggregate and display scale are taken from the new field (optionally
renormalizing it) so the snapshot always carries the scale of its own field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from wavebilliard.coefficients import build_coefficients
from wavebilliard.config import WaveConfig
from wavebilliard.diagnostics import DiagnosticsLog, Probe
from wavebilliard.errors import ConfigurationError
from wavebilliard.grid import Grid
from wavebilliard.initial import PacketParams, add_packet, seed_packet
from wavebilliard.mask import DomainMask
from wavebilliard.normalize import compute_aggregate, derive_scale, normalize_frame
from wavebilliard.state import FieldState
from wavebilliard.stencil import Stepper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of one frame for a rendering collaborator."""
    phi: np.ndarray
    psi: np.ndarray
    mask: np.ndarray
    scale: float
    tick: int
    time: int


@dataclass(frozen=True)
class PeriodicSource:
    """Packet re-added every ``period`` ticks."""
    x: float
    y: float
    params: PacketParams
    period: int
    factor: float = 1.0


def _make_stepper(grid: Grid, mask: DomainMask, coefficients, config: WaveConfig):
    if config.backend == "torch":
        from wavebilliard.gpu.stepper import TorchStepper
        return TorchStepper(grid, mask, coefficients, config)
    return Stepper(grid, mask, coefficients, config)


class Simulation:
    """Drive a billiard simulation tick by tick.

    Args:
        grid: Lattice
        mask: Domain mask on that lattice
        config: Run configuration; ``config.backend`` selects numba or torch
    """

    def __init__(self, grid: Grid, mask: DomainMask, config: WaveConfig):
        mask.check_grid(grid)
        self.grid = grid
        self.mask = mask
        self.config = config
        self.coefficients = build_coefficients(mask, config)
        self.state = FieldState.zeros(grid, config.kind)
        self.stepper = _make_stepper(grid, mask, self.coefficients, config)
        self.diagnostics = DiagnosticsLog()
        self.sources: list[PeriodicSource] = []
        self.tick_count = 0
        self.scale = 1.0

        if mask.count_inside() == 0 and not config.two_speeds:
            logger.warning("Domain mask has no inside cells; the field will stay empty")
        logger.info(
            "Simulation ready: kind=%s backend=%s substeps=%d renormalize=%s",
            config.kind.value, config.backend, config.substeps, config.renormalize,
        )

    # ------------------------------------------------------------------
    # Initial conditions
    # ------------------------------------------------------------------

    def seed(self, x: float, y: float, params: PacketParams) -> None:
        seed_packet(self.state, self.mask, self.grid, x, y, params)

    def add(self, factor: float, x: float, y: float, params: PacketParams) -> None:
        add_packet(self.state, self.mask, self.grid, factor, x, y, params)

    def add_source(self, x: float, y: float, params: PacketParams, period: int, factor: float = 1.0) -> None:
        """Re-inject a packet after every ``period`` ticks."""
        if period < 1:
            raise ConfigurationError(f"source period must be at least 1, got {period}")
        self.sources.append(PeriodicSource(x, y, params, int(period), factor))

    def add_probe(self, name: str, x: float, y: float) -> Probe:
        """Sample phi at the cell nearest (x, y) after every reported step."""
        i, j = self.grid.coord_to_index(x, y)
        if not self.grid.contains_index(i, j):
            raise ConfigurationError(f"probe '{name}' at ({x}, {y}) lies outside the grid")
        probe = Probe(name, i, j)
        self.diagnostics.add_probe(probe)
        return probe

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    @property
    def time(self) -> int:
        """Reported steps taken so far."""
        return self.stepper.time

    def tick(self) -> FrameSnapshot:
        """Evolve by ``config.substeps`` steps, re-inject sources, normalize.

        The returned snapshot's scale is derived from the field it carries.
        The logged aggregate is the one measured before any renormalization.
        """
        if self.diagnostics.probes:
            for _ in range(self.config.substeps):
                self.stepper.step(self.state, 1)
                self.diagnostics.record_samples(self.state.phi)
        elif self.config.substeps:
            self.stepper.step(self.state, self.config.substeps)

        self.tick_count += 1
        for source in self.sources:
            if self.tick_count % source.period == 0:
                self.add(source.factor, source.x, source.y, source.params)

        aggregate, scale = normalize_frame(self.state, self.mask, self.config.renormalize)
        if self.config.renormalize:
            scale = derive_scale(compute_aggregate(self.state, self.mask))
        self.scale = scale

        self.diagnostics.record_aggregate(self.tick_count, aggregate)
        logger.debug("tick %d: aggregate=%.6e scale=%.6f time=%d", self.tick_count, aggregate, scale, self.time)
        return self._snapshot(scale)

    def run(self, n_ticks: int) -> Iterator[FrameSnapshot]:
        """Yield a snapshot after each of ``n_ticks`` ticks."""
        for _ in range(n_ticks):
            yield self.tick()

    def snapshot(self) -> FrameSnapshot:
        """Snapshot of the current field, scaled from its current aggregate."""
        return self._snapshot(derive_scale(compute_aggregate(self.state, self.mask)))

    def _snapshot(self, scale: float) -> FrameSnapshot:
        phi = self.state.phi.copy()
        psi = self.state.psi.copy()
        phi.setflags(write=False)
        psi.setflags(write=False)
        return FrameSnapshot(
            phi=phi,
            psi=psi,
            mask=self.mask.values,
            scale=scale,
            tick=self.tick_count,
            time=self.time,
        )
