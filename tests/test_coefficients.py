"""Tests for the coefficient field builder."""

import numpy as np
import pytest

from wavebilliard.coefficients import build_coefficients
from wavebilliard.config import WaveConfig
from wavebilliard.mask import MEDIUM_A, MEDIUM_B, OUTSIDE


@pytest.fixture
def config():
    return WaveConfig(courant=0.1, courant_b=0.3, gamma=1e-3, gamma_b=2e-3)


def test_single_medium(two_media_mask, config):
    coeffs = build_coefficients(two_media_mask, config)
    a = two_media_mask.region(MEDIUM_A)
    b = two_media_mask.region(MEDIUM_B)
    out = two_media_mask.region(OUTSIDE)

    assert np.all(coeffs.courant[a] == 0.1)
    assert np.all(coeffs.damping[a] == 1e-3)
    # Without two_speeds medium B keeps the base speed
    assert np.all(coeffs.courant[b] == 0.1)
    assert np.all(coeffs.damping[b] == 2e-3)
    assert np.all(coeffs.courant[out] == 0.0)
    assert np.all(coeffs.damping[out] == 0.0)


def test_two_speeds(two_media_mask, config):
    coeffs = build_coefficients(two_media_mask, config.replace(two_speeds=True))
    b = two_media_mask.region(MEDIUM_B)
    out = two_media_mask.region(OUTSIDE)

    assert np.all(coeffs.courant[b] == 0.3)
    # Outside cells are stepped as medium B
    assert np.all(coeffs.courant[out] == 0.3)
    assert np.all(coeffs.damping[out] == 2e-3)


def test_squared_courant(two_media_mask, config):
    coeffs = build_coefficients(two_media_mask, config.replace(two_speeds=True))
    np.testing.assert_allclose(coeffs.courant2, coeffs.courant ** 2)


def test_shape_and_read_only(grid, disk_mask, config):
    coeffs = build_coefficients(disk_mask, config)
    assert coeffs.shape == grid.shape
    for array in (coeffs.courant, coeffs.courant2, coeffs.damping):
        with pytest.raises(ValueError):
            array[0, 0] = 1.0
