"""Tests for packet seeding and superposition."""

import numpy as np
import pytest

from wavebilliard.errors import ConfigurationError
from wavebilliard.initial import (
    CoherentParams,
    PulseParams,
    add_packet,
    coherent_profile,
    pulse_profile,
    seed_packet,
)
from wavebilliard.state import FieldState
from wavebilliard.types import FieldKind


@pytest.fixture
def centre(grid):
    return grid.index_to_coord(12, 10)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def test_pulse_peak(grid, centre):
    params = PulseParams(amplitude=0.3, variance=0.05, wavelength=0.1)
    profile = pulse_profile(grid, *centre, params)
    assert profile[12, 10] == pytest.approx(0.3)
    assert np.abs(profile).max() == pytest.approx(0.3)


def test_coherent_modulus_and_phase(grid, centre):
    params = CoherentParams(px=2.0, py=0.0, scale=0.3, amplitude=1.5)
    re, im = coherent_profile(grid, *centre, params)
    assert re[12, 10] == pytest.approx(1.5)
    assert im[12, 10] == pytest.approx(0.0)
    # One cell along x: phase advances by px*dx/scale
    phase = 2.0 * grid.dx / 0.3
    assert np.arctan2(im[13, 10], re[13, 10]) == pytest.approx(phase)


def test_coherent_envelope_floor(grid, centre):
    params = CoherentParams(scale=0.01)
    re, im = coherent_profile(grid, *centre, params)
    modulus = np.hypot(re, im)
    assert modulus.min() == pytest.approx(1e-15)


@pytest.mark.parametrize("kwargs", [{"variance": 0.0}, {"wavelength": -1.0}])
def test_invalid_pulse(kwargs):
    with pytest.raises(ConfigurationError):
        PulseParams(**kwargs)


def test_invalid_packet_scale():
    with pytest.raises(ConfigurationError):
        CoherentParams(scale=0.0)


# ---------------------------------------------------------------------------
# seed_packet / add_packet
# ---------------------------------------------------------------------------

def test_seed_wave_zero_outside(grid, disk_mask, centre):
    state = FieldState.zeros(grid)
    state.phi[...] = 1.0
    state.psi[...] = 1.0
    seed_packet(state, disk_mask, grid, *centre, PulseParams(variance=0.1))

    outside = ~disk_mask.inside
    assert np.all(state.phi[outside] == 0.0)
    assert np.all(state.psi == 0.0)
    assert state.phi[12, 10] == pytest.approx(PulseParams().amplitude)


def test_seed_schrodinger(grid, disk_mask, centre):
    state = FieldState.zeros(grid, FieldKind.SCHRODINGER)
    seed_packet(state, disk_mask, grid, *centre, CoherentParams(px=1.0))
    outside = ~disk_mask.inside
    assert np.all(state.phi[outside] == 0.0)
    assert np.all(state.psi[outside] == 0.0)
    assert np.any(state.psi[disk_mask.inside] != 0.0)


def test_add_then_subtract_restores(grid, stadium_mask, rng):
    state = FieldState(rng.normal(size=grid.shape), rng.normal(size=grid.shape), FieldKind.SCHRODINGER)
    before = state.copy()
    params = CoherentParams(px=3.0, py=-1.0, scale=0.2)
    add_packet(state, stadium_mask, grid, 1.0, 0.1, 0.0, params)
    add_packet(state, stadium_mask, grid, -1.0, 0.1, 0.0, params)
    np.testing.assert_allclose(state.phi, before.phi, atol=1e-12)
    np.testing.assert_allclose(state.psi, before.psi, atol=1e-12)


def test_add_leaves_outside_untouched(grid, disk_mask, centre):
    state = FieldState.zeros(grid)
    state.phi[~disk_mask.inside] = 0.5
    add_packet(state, disk_mask, grid, 2.0, *centre, PulseParams(variance=1.0))
    assert np.all(state.phi[~disk_mask.inside] == 0.5)
    assert state.phi[12, 10] == pytest.approx(2.0 * PulseParams().amplitude)


def test_add_wave_touches_phi_only(grid, disk_mask, centre):
    state = FieldState.zeros(grid)
    add_packet(state, disk_mask, grid, 1.0, *centre, PulseParams())
    assert np.all(state.psi == 0.0)


def test_two_sources_superpose(grid, full_mask):
    params = PulseParams(variance=0.05)
    a = FieldState.zeros(grid)
    add_packet(a, full_mask, grid, 1.0, -0.5, 0.0, params)
    add_packet(a, full_mask, grid, 1.0, 0.5, 0.0, params)
    expected = pulse_profile(grid, -0.5, 0.0, params) + pulse_profile(grid, 0.5, 0.0, params)
    np.testing.assert_allclose(a.phi, expected)


def test_params_must_match_kind(grid, disk_mask):
    with pytest.raises(ConfigurationError):
        seed_packet(FieldState.zeros(grid), disk_mask, grid, 0.0, 0.0, CoherentParams())
    with pytest.raises(ConfigurationError):
        add_packet(FieldState.zeros(grid, "schrodinger"), disk_mask, grid, 1.0, 0.0, 0.0, PulseParams())
