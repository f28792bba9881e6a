"""Append-only diagnostics log: per-tick aggregate and probe-cell samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from wavebilliard import defaults
from wavebilliard.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Probe:
    """A fixed lattice cell sampled after every reported step."""
    name: str
    i: int
    j: int


class DiagnosticsLog:
    """Numeric log fed by the simulation driver.

    Aggregates are recorded once per tick, probe values once per reported
    step (``substeps`` times per tick). Nothing is ever removed.
    """

    def __init__(self):
        self.ticks: list[int] = []
        self.aggregates: list[float] = []
        self.probes: dict[str, Probe] = {}
        self.samples: dict[str, list[float]] = {}

    def add_probe(self, probe: Probe) -> None:
        if probe.name in self.probes:
            raise ConfigurationError(f"probe '{probe.name}' is already registered")
        self.probes[probe.name] = probe
        self.samples[probe.name] = []

    def record_aggregate(self, tick: int, aggregate: float) -> None:
        self.ticks.append(int(tick))
        self.aggregates.append(float(aggregate))

    def record_samples(self, phi: np.ndarray) -> None:
        """Append the current value at every probe cell."""
        for name, probe in self.probes.items():
            self.samples[name].append(float(phi[probe.i, probe.j]))

    def __len__(self) -> int:
        return len(self.aggregates)

    def as_arrays(self) -> dict[str, np.ndarray]:
        """Return the log as float64 arrays.

        Keys are ``tick``, ``aggregate`` and ``probe_<name>`` for each probe.
        """
        arrays = {
            "tick": np.asarray(self.ticks, dtype=np.int64),
            "aggregate": np.asarray(self.aggregates, dtype=np.float64),
        }
        for name, values in self.samples.items():
            arrays[f"probe_{name}"] = np.asarray(values, dtype=np.float64)
        return arrays

    def save(self, path: str | Path) -> Path:
        """Write the log to a compressed ``.npz`` archive."""
        path = Path(path)
        if path.suffix != ".npz":
            path = path.with_suffix(".npz")
        np.savez_compressed(path, **self.as_arrays())
        logger.debug("Saved diagnostics (%d ticks) to %s", len(self), path)
        return path

    def save_time_series(self, path: str | Path, probe: str) -> Path:
        """Write one probe as fixed-point text, one sample per line.

        Each value is multiplied by 1e16, truncated toward zero and printed
        zero-padded to 19 characters.
        """
        if probe not in self.samples:
            raise ConfigurationError(f"unknown probe '{probe}'. Available: {list(self.samples.keys())}")
        path = Path(path)
        lines = ["%019d" % int(value * defaults.TIME_SERIES_FACTOR) for value in self.samples[probe]]
        path.write_text("".join(line + "\n" for line in lines))
        logger.debug("Saved %d samples of probe '%s' to %s", len(lines), probe, path)
        return path
