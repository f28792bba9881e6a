"""
Pluggable per-cell update rules.

The stencil skeleton (4-neighbour Laplacian, read one pair / write the other)
is shared; a rule supplies the recurrence as three numba kernels plus the two
scalar constants those kernels take.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from wavebilliard import kernels
from wavebilliard.config import WaveConfig
from wavebilliard.grid import Grid
from wavebilliard.types import FieldKind


@dataclass(frozen=True)
class UpdateRule:
    """Definition of one explicit recurrence.

    Attributes:
        name: Registry key
        display_name: Human readable name
        description: One-line summary of the recurrence
        kind: Field pairing the rule expects
        half_steps: Kernel applications per reported step
        bulk: Kernel for cells 1..nx-2 x 1..ny-2
        edge: Kernel for one EdgeDescriptor
        corner: Kernel for one CornerDescriptor
        constants: (config, grid) -> the two scalars passed to every kernel
    """
    name: str
    display_name: str
    description: str
    kind: FieldKind
    half_steps: int
    bulk: Callable
    edge: Callable
    corner: Callable
    constants: Callable[[WaveConfig, Grid], tuple[float, float]]


def _wave_constants(config: WaveConfig, grid: Grid) -> tuple[float, float]:
    return config.kappa, 0.0


def schrodinger_steps(config: WaveConfig, grid: Grid) -> tuple[float, float]:
    """Return (bulk step, absorbing-edge step) = (dt/(dx² hbar), dt/(dx hbar))."""
    dx = grid.dx
    return config.dt / (dx * dx * config.hbar), config.dt / (dx * config.hbar)


WAVE_RULE = UpdateRule(
    name="wave",
    display_name="Wave equation",
    description="u(t+1) = 2u - u(t-1) + c²Δu - κu - γ(u - u(t-1))",
    kind=FieldKind.WAVE,
    half_steps=1,
    bulk=kernels.wave_bulk,
    edge=kernels.wave_edge,
    corner=kernels.wave_corner,
    constants=_wave_constants,
)

SCHRODINGER_RULE = UpdateRule(
    name="schrodinger",
    display_name="Schrödinger equation",
    description="Re -= s·ΔIm, Im += s·ΔRe, two half-steps per step",
    kind=FieldKind.SCHRODINGER,
    half_steps=2,
    bulk=kernels.schrodinger_bulk,
    edge=kernels.schrodinger_edge,
    corner=kernels.schrodinger_corner,
    constants=schrodinger_steps,
)


class RuleRegistry:
    """
    Global registry of update rules.

    The built-in wave and Schrodinger rules are registered at import.
    """
    _rules: dict[str, UpdateRule] = {}

    @classmethod
    def register(cls, rule: UpdateRule) -> None:
        """Register an update rule."""
        if rule.name in cls._rules:
            raise ValueError(f"Rule '{rule.name}' is already registered")
        cls._rules[rule.name] = rule

    @classmethod
    def get(cls, name: str) -> UpdateRule:
        """Get a rule by name."""
        if name not in cls._rules:
            raise ValueError(f"Unknown rule: {name}. Available: {list(cls._rules.keys())}")
        return cls._rules[name]

    @classmethod
    def for_kind(cls, kind: FieldKind) -> UpdateRule:
        """Get the rule registered under a field kind's name."""
        return cls.get(FieldKind(kind).value)

    @classmethod
    def list_available(cls) -> list[str]:
        return list(cls._rules.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all rules (mainly for testing)."""
        cls._rules.clear()

    @classmethod
    def register_builtin(cls) -> None:
        """Reset the registry to the built-in rules."""
        cls.clear()
        cls.register(WAVE_RULE)
        cls.register(SCHRODINGER_RULE)


RuleRegistry.register_builtin()
