"""Core enums shared by the simulation modules."""

import enum


class FieldKind(enum.Enum):
    """Which pair of arrays a FieldState holds.

    WAVE: displacement now (phi) and one step before (psi).
    SCHRODINGER: real (phi) and imaginary (psi) part at the same time level.
    """
    WAVE = "wave"
    SCHRODINGER = "schrodinger"


class BoundaryPolicy(enum.IntEnum):
    """Boundary condition on the rectangle enclosing the billiard."""
    DIRICHLET = 0   # Reflecting wall, missing neighbour clamped to the cell
    PERIODIC = 1    # Torus
    ABSORBING = 2   # One-sided decay on all four edges
    VPER_HABS = 3   # Periodic along y, absorbing along x
    HPER_VABS = 4   # Periodic along x, absorbing along y


class AxisMode(enum.IntEnum):
    """How a missing neighbour is resolved along one axis."""
    CLAMP = 0
    WRAP = 1
    ABSORB = 2


_POLICY_AXES: dict[BoundaryPolicy, tuple[AxisMode, AxisMode]] = {
    BoundaryPolicy.DIRICHLET: (AxisMode.CLAMP, AxisMode.CLAMP),
    BoundaryPolicy.PERIODIC: (AxisMode.WRAP, AxisMode.WRAP),
    BoundaryPolicy.ABSORBING: (AxisMode.ABSORB, AxisMode.ABSORB),
    BoundaryPolicy.VPER_HABS: (AxisMode.ABSORB, AxisMode.WRAP),
    BoundaryPolicy.HPER_VABS: (AxisMode.WRAP, AxisMode.ABSORB),
}


def axis_modes(policy: BoundaryPolicy) -> tuple[AxisMode, AxisMode]:
    """Return (x-axis mode, y-axis mode) for a boundary policy."""
    return _POLICY_AXES[BoundaryPolicy(policy)]
