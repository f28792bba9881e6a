"""Shared fixtures: small grids, reference domain predicates and masks."""

import numpy as np
import pytest

from wavebilliard.grid import Grid
from wavebilliard.mask import MEDIUM_A, MEDIUM_B, OUTSIDE, DomainMask, build_domain_mask


# ---------------------------------------------------------------------------
# Reference predicates
# ---------------------------------------------------------------------------

def rectangle(x, y):
    return abs(x) < 0.8 and abs(y) < 0.5


def disk(x, y):
    return x * x + y * y < 0.5


def stadium(x, y):
    """Bunimovich stadium: a 1.0 x 0.8 rectangle capped by two half-disks."""
    r = 0.4
    if abs(x) <= 0.5:
        return abs(y) < r
    cx = 0.5 if x > 0 else -0.5
    return (x - cx) ** 2 + y * y < r * r


def two_media(x, y):
    """Disk of medium A inside a ring of medium B."""
    d2 = x * x + y * y
    if d2 < 0.25:
        return MEDIUM_A
    if d2 < 0.7:
        return MEDIUM_B
    return OUTSIDE


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def grid():
    return Grid(24, 20, -1.2, 1.2, -1.0, 1.0)


@pytest.fixture
def small_grid():
    """4x4 unit-spaced lattice."""
    return Grid(4, 4, 0.0, 4.0, 0.0, 4.0)


@pytest.fixture
def full_mask(grid):
    return DomainMask.full(grid)


@pytest.fixture
def disk_mask(grid):
    return build_domain_mask(grid, disk)


@pytest.fixture
def stadium_mask(grid):
    return build_domain_mask(grid, stadium)


@pytest.fixture
def two_media_mask(grid):
    return build_domain_mask(grid, two_media)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
