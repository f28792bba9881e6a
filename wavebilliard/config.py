"""Immutable run configuration for the stencil engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from wavebilliard import defaults
from wavebilliard.errors import ConfigurationError
from wavebilliard.types import BoundaryPolicy, FieldKind

BACKENDS = ("numba", "torch")


@dataclass(frozen=True)
class WaveConfig:
    """Physical constants and run switches, fixed for the lifetime of a run.

    The Stepper and the coefficient builder receive this object at
    construction and never read module-level state afterwards.

    Attributes:
        kind: Update rule (wave or Schrodinger)
        policy: Boundary condition on the enclosing rectangle
        courant, courant_b: Courant numbers in medium A / medium B
        gamma, gamma_b: Damping in medium A / medium B
        kappa: Global "elasticity" term
        kappa_sides, gamma_sides: Stiffness/damping on absorbing left/right edges
        kappa_topbot, gamma_topbot: Stiffness/damping on absorbing bottom/top edges
        two_speeds: Treat cells outside the billiard as medium B instead of walls
        dt, hbar: Time increment and reduced constant (Schrodinger only)
        clamp, vmax: Debug clamp of both arrays to [-vmax, vmax]
        drive_left: Force the left edge to drive_amplitude*cos(t*drive_omega)
        substeps: Micro-steps per displayed tick
        renormalize: Renormalize total probability every tick (Schrodinger only)
        backend: "numba" (CPU kernels) or "torch"
    """

    kind: FieldKind = FieldKind.WAVE
    policy: BoundaryPolicy = BoundaryPolicy.DIRICHLET
    courant: float = defaults.DEFAULT_COURANT
    courant_b: float = defaults.DEFAULT_COURANT_B
    gamma: float = defaults.DEFAULT_GAMMA
    gamma_b: float = defaults.DEFAULT_GAMMA_B
    kappa: float = defaults.DEFAULT_KAPPA
    kappa_sides: float = defaults.DEFAULT_KAPPA_SIDES
    gamma_sides: float = defaults.DEFAULT_GAMMA_SIDES
    kappa_topbot: float = defaults.DEFAULT_KAPPA_TOPBOT
    gamma_topbot: float = defaults.DEFAULT_GAMMA_TOPBOT
    two_speeds: bool = False
    dt: float = defaults.DEFAULT_DT
    hbar: float = defaults.DEFAULT_HBAR
    clamp: bool = False
    vmax: float = defaults.DEFAULT_VMAX
    drive_left: bool = False
    drive_amplitude: float = defaults.DEFAULT_DRIVE_AMPLITUDE
    drive_omega: float = defaults.DEFAULT_DRIVE_OMEGA
    substeps: int = defaults.DEFAULT_WAVE_SUBSTEPS
    renormalize: bool = False
    backend: str = "numba"

    def __post_init__(self) -> None:
        # Accept plain strings/ints from callers and settings files
        try:
            object.__setattr__(self, "kind", FieldKind(self.kind))
        except ValueError:
            raise ConfigurationError(f"unknown field kind: {self.kind!r}")
        try:
            object.__setattr__(self, "policy", BoundaryPolicy(self.policy))
        except ValueError:
            raise ConfigurationError(f"unknown boundary policy: {self.policy!r}")
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError if the values cannot describe a run."""
        for name in ("courant", "courant_b", "gamma", "gamma_b", "kappa",
                     "kappa_sides", "gamma_sides", "kappa_topbot", "gamma_topbot",
                     "drive_amplitude", "drive_omega"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be finite and non-negative, got {value}")
        if self.vmax <= 0:
            raise ConfigurationError("vmax must be positive")
        if self.substeps < 0:
            raise ConfigurationError("substeps must be non-negative")
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"unknown backend {self.backend!r}. Available: {list(BACKENDS)}")

        if self.kind is FieldKind.SCHRODINGER:
            if self.two_speeds:
                raise ConfigurationError("two_speeds (heterogeneous medium) requires the wave rule")
            if self.drive_left:
                raise ConfigurationError("drive_left requires the wave rule")
            if not (self.dt > 0 and self.hbar > 0):
                raise ConfigurationError("dt and hbar must be positive for the Schrodinger rule")
        elif self.renormalize:
            raise ConfigurationError("renormalize only applies to the Schrodinger rule")

    def replace(self, **kwargs) -> "WaveConfig":
        """Return a new validated config with updated fields."""
        return replace(self, **kwargs)


def default_config(kind: FieldKind | str = FieldKind.WAVE) -> WaveConfig:
    """Return the default configuration for a field kind.

    Example:
        >>> cfg = default_config("schrodinger")
        >>> cfg.renormalize
        True
    """
    kind = FieldKind(kind)
    if kind is FieldKind.SCHRODINGER:
        return WaveConfig(
            kind=kind,
            policy=BoundaryPolicy.ABSORBING,
            substeps=defaults.DEFAULT_SCHRODINGER_SUBSTEPS,
            renormalize=True,
        )
    return WaveConfig(kind=kind)
