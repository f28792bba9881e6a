"""Compare numba kernels vs the torch stepper on a stadium billiard."""

import time

import numpy as np
import torch

from wavebilliard.coefficients import build_coefficients
from wavebilliard.config import WaveConfig
from wavebilliard.gpu import GPUContext
from wavebilliard.gpu.stepper import TorchStepper
from wavebilliard.grid import Grid
from wavebilliard.initial import PulseParams, seed_packet
from wavebilliard.mask import DomainMask
from wavebilliard.state import FieldState
from wavebilliard.stencil import Stepper
from wavebilliard.types import BoundaryPolicy

NX, NY = 1280, 720
STEPS = 200
grid = Grid(NX, NY)
print(f"Grid: {NX} x {NY}, {STEPS} steps\n")

# Stadium mask, built vectorized (build_domain_mask calls the predicate per cell)
X, Y = grid.coordinates()
r = 0.9
cx = np.clip(X, -1.0, 1.0)
mask = DomainMask(((X - cx) ** 2 + Y ** 2 < r * r).astype(np.int8))

config = WaveConfig(courant=0.3, policy=BoundaryPolicy.ABSORBING)
coeffs = build_coefficients(mask, config)


def fresh_state():
    state = FieldState.zeros(grid)
    seed_packet(state, mask, grid, 0.2, 0.1, PulseParams())
    return state


# ============================================================
# Method 1: numba kernels
# ============================================================
stepper = Stepper(grid, mask, coeffs, config)

print("Numba (compiling...):")
stepper.step(fresh_state(), 1)

state = fresh_state()
t0 = time.perf_counter()
stepper.step(state, STEPS)
t_numba = time.perf_counter() - t0
print(f"  {STEPS} steps: {t_numba:.2f}s ({t_numba / STEPS * 1000:.1f}ms/step)")

# ============================================================
# Method 2: torch stepper
# ============================================================
device = GPUContext.device()
torch_stepper = TorchStepper(grid, mask, coeffs, config, device=device)

print(f"\nTorch on {device} (warmup...):")
torch_stepper.step(fresh_state(), 1)
GPUContext.synchronize()

torch_state = fresh_state()
t0 = time.perf_counter()
with torch.no_grad():
    torch_stepper.step(torch_state, STEPS)
GPUContext.synchronize()
t_torch = time.perf_counter() - t0
print(f"  {STEPS} steps: {t_torch:.2f}s ({t_torch / STEPS * 1000:.1f}ms/step)")

diff = np.abs(torch_state.phi - state.phi).max()
print("\n" + "=" * 60)
print(f"Max |numba - torch|: {diff:.2e}")
print(f"Speedup: {t_numba / t_torch:.1f}x")
