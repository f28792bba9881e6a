"""Tests for the append-only diagnostics log."""

import numpy as np
import pytest

from wavebilliard.diagnostics import DiagnosticsLog, Probe
from wavebilliard.errors import ConfigurationError


@pytest.fixture
def log():
    log = DiagnosticsLog()
    log.add_probe(Probe("left", 1, 2))
    log.add_probe(Probe("right", 3, 0))
    return log


def test_records(log):
    phi = np.arange(20, dtype=float).reshape(5, 4)
    log.record_samples(phi)
    log.record_samples(-phi)
    log.record_aggregate(1, 0.5)

    arrays = log.as_arrays()
    np.testing.assert_array_equal(arrays["tick"], [1])
    np.testing.assert_array_equal(arrays["aggregate"], [0.5])
    np.testing.assert_array_equal(arrays["probe_left"], [6.0, -6.0])
    np.testing.assert_array_equal(arrays["probe_right"], [12.0, -12.0])
    assert len(log) == 1


def test_duplicate_probe(log):
    with pytest.raises(ConfigurationError):
        log.add_probe(Probe("left", 0, 0))


def test_save_npz(tmp_path, log):
    log.record_aggregate(1, 0.25)
    log.record_aggregate(2, 0.75)
    path = log.save(tmp_path / "run")
    assert path.suffix == ".npz"
    with np.load(path) as data:
        np.testing.assert_array_equal(data["aggregate"], [0.25, 0.75])
        np.testing.assert_array_equal(data["tick"], [1, 2])
        assert data["probe_left"].size == 0


def test_time_series_format(tmp_path, log):
    log.samples["left"].extend([0.25, -0.5, 0.0])
    path = log.save_time_series(tmp_path / "left.txt", "left")
    lines = path.read_text().splitlines()
    assert lines == [
        "0002500000000000000",
        "-005000000000000000",
        "0000000000000000000",
    ]
    assert all(len(line) == 19 for line in lines)


def test_time_series_unknown_probe(tmp_path, log):
    with pytest.raises(ConfigurationError):
        log.save_time_series(tmp_path / "x.txt", "middle")
