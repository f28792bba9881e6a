"""
Numba kernels for one explicit micro-step.

Every kernel reads (phi_in, psi_in) and writes (phi_out, psi_out); the input
pair is never written, so rows can be split across threads freely. Cells that
are not active copy their input value to the output.

Arrays are indexed [i, j] with i along x. An edge pass walks ``count`` cells
starting at (i0, j0) in steps of (si, sj); (oi, oj) points out of the grid.
"""

import numba

from wavebilliard.types import AxisMode

CLAMP = int(AxisMode.CLAMP)
WRAP = int(AxisMode.WRAP)
ABSORB = int(AxisMode.ABSORB)


@numba.njit(cache=True)
def _outward(p: int, n: int, mode: int) -> int:
    """Index standing in for the missing neighbour p (p == -1 or p == n)."""
    if 0 <= p < n:
        return p
    if mode == WRAP:
        return n - 1 if p < 0 else 0
    # Clamp to the cell itself: the neighbour drops out of the Laplacian
    return 0 if p < 0 else n - 1


# ---------------------------------------------------------------------------
# Wave equation: phi = u(t), psi = u(t - 1)
# ---------------------------------------------------------------------------

@numba.njit(cache=True, parallel=True)
def wave_bulk(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, kappa, _unused):
    nx, ny = phi_in.shape
    for i in numba.prange(1, nx - 1):
        for j in range(1, ny - 1):
            x = phi_in[i, j]
            y = psi_in[i, j]
            if not active[i, j]:
                phi_out[i, j] = x
                psi_out[i, j] = y
                continue
            delta = phi_in[i + 1, j] + phi_in[i - 1, j] + phi_in[i, j + 1] + phi_in[i, j - 1] - 4.0 * x
            phi_out[i, j] = -y + 2.0 * x + courant2[i, j] * delta - kappa * x - damping[i, j] * (x - y)
            psi_out[i, j] = x


@numba.njit(cache=True, parallel=True)
def wave_edge(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, kappa, _unused,
              i0, j0, si, sj, count, oi, oj, mode, kappa_edge, gamma_edge):
    nx, ny = phi_in.shape
    for k in numba.prange(count):
        i = i0 + k * si
        j = j0 + k * sj
        x = phi_in[i, j]
        y = psi_in[i, j]
        if not active[i, j]:
            phi_out[i, j] = x
            psi_out[i, j] = y
            continue
        inward = phi_in[i - oi, j - oj]
        if mode == ABSORB:
            phi_out[i, j] = x - courant[i, j] * (x - inward) - kappa_edge * x - gamma_edge * (x - y)
        else:
            io = _outward(i + oi, nx, mode)
            jo = _outward(j + oj, ny, mode)
            delta = phi_in[i + si, j + sj] + phi_in[i - si, j - sj] + inward + phi_in[io, jo] - 4.0 * x
            phi_out[i, j] = -y + 2.0 * x + courant2[i, j] * delta - kappa * x - damping[i, j] * (x - y)
        psi_out[i, j] = x


@numba.njit(cache=True)
def wave_corner(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, kappa, _unused,
                i, j, oi, oj, mode_x, mode_y, kappa_x, gamma_x, kappa_y, gamma_y):
    nx, ny = phi_in.shape
    x = phi_in[i, j]
    y = psi_in[i, j]
    if not active[i, j]:
        phi_out[i, j] = x
        psi_out[i, j] = y
        return
    if mode_x == ABSORB or mode_y == ABSORB:
        target = 0.0
        kap = 0.0
        gam = 0.0
        n = 0
        if mode_x == ABSORB:
            target += phi_in[i - oi, j]
            kap += kappa_x
            gam += gamma_x
            n += 1
        if mode_y == ABSORB:
            target += phi_in[i, j - oj]
            kap += kappa_y
            gam += gamma_y
            n += 1
        target /= n
        phi_out[i, j] = x - courant[i, j] * (x - target) - (kap / n) * x - (gam / n) * (x - y)
    else:
        io = _outward(i + oi, nx, mode_x)
        jo = _outward(j + oj, ny, mode_y)
        delta = phi_in[i - oi, j] + phi_in[io, j] + phi_in[i, j - oj] + phi_in[i, jo] - 4.0 * x
        phi_out[i, j] = -y + 2.0 * x + courant2[i, j] * delta - kappa * x - damping[i, j] * (x - y)
    psi_out[i, j] = x


# ---------------------------------------------------------------------------
# Schrodinger equation: phi = Re, psi = Im at the same time level
# ---------------------------------------------------------------------------

@numba.njit(cache=True, parallel=True)
def schrodinger_bulk(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, step, _step1):
    nx, ny = phi_in.shape
    for i in numba.prange(1, nx - 1):
        for j in range(1, ny - 1):
            x = phi_in[i, j]
            y = psi_in[i, j]
            if not active[i, j]:
                phi_out[i, j] = x
                psi_out[i, j] = y
                continue
            delta1 = phi_in[i + 1, j] + phi_in[i - 1, j] + phi_in[i, j + 1] + phi_in[i, j - 1] - 4.0 * x
            delta2 = psi_in[i + 1, j] + psi_in[i - 1, j] + psi_in[i, j + 1] + psi_in[i, j - 1] - 4.0 * y
            phi_out[i, j] = x - step * delta2
            psi_out[i, j] = y + step * delta1


@numba.njit(cache=True, parallel=True)
def schrodinger_edge(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, step, step1,
                     i0, j0, si, sj, count, oi, oj, mode, kappa_edge, gamma_edge):
    nx, ny = phi_in.shape
    for k in numba.prange(count):
        i = i0 + k * si
        j = j0 + k * sj
        x = phi_in[i, j]
        y = psi_in[i, j]
        if not active[i, j]:
            phi_out[i, j] = x
            psi_out[i, j] = y
            continue
        if mode == ABSORB:
            phi_out[i, j] = x - step1 * (y - psi_in[i - oi, j - oj])
            psi_out[i, j] = y + step1 * (x - phi_in[i - oi, j - oj])
        else:
            io = _outward(i + oi, nx, mode)
            jo = _outward(j + oj, ny, mode)
            delta1 = (phi_in[i + si, j + sj] + phi_in[i - si, j - sj]
                      + phi_in[i - oi, j - oj] + phi_in[io, jo] - 4.0 * x)
            delta2 = (psi_in[i + si, j + sj] + psi_in[i - si, j - sj]
                      + psi_in[i - oi, j - oj] + psi_in[io, jo] - 4.0 * y)
            phi_out[i, j] = x - step * delta2
            psi_out[i, j] = y + step * delta1


@numba.njit(cache=True)
def schrodinger_corner(phi_in, psi_in, phi_out, psi_out, active, courant, courant2, damping, step, step1,
                       i, j, oi, oj, mode_x, mode_y, kappa_x, gamma_x, kappa_y, gamma_y):
    nx, ny = phi_in.shape
    x = phi_in[i, j]
    y = psi_in[i, j]
    if not active[i, j]:
        phi_out[i, j] = x
        psi_out[i, j] = y
        return
    if mode_x == ABSORB or mode_y == ABSORB:
        phi_target = 0.0
        psi_target = 0.0
        n = 0
        if mode_x == ABSORB:
            phi_target += phi_in[i - oi, j]
            psi_target += psi_in[i - oi, j]
            n += 1
        if mode_y == ABSORB:
            phi_target += phi_in[i, j - oj]
            psi_target += psi_in[i, j - oj]
            n += 1
        phi_out[i, j] = x - step1 * (y - psi_target / n)
        psi_out[i, j] = y + step1 * (x - phi_target / n)
    else:
        io = _outward(i + oi, nx, mode_x)
        jo = _outward(j + oj, ny, mode_y)
        delta1 = phi_in[i - oi, j] + phi_in[io, j] + phi_in[i, j - oj] + phi_in[i, jo] - 4.0 * x
        delta2 = psi_in[i - oi, j] + psi_in[io, j] + psi_in[i, j - oj] + psi_in[i, jo] - 4.0 * y
        phi_out[i, j] = x - step * delta2
        psi_out[i, j] = y + step * delta1


# ---------------------------------------------------------------------------
# Debug clamp
# ---------------------------------------------------------------------------

@numba.njit(cache=True, parallel=True)
def clamp_active(phi, psi, active, vmax):
    """Clip active cells of both arrays to [-vmax, vmax]."""
    nx, ny = phi.shape
    for i in numba.prange(nx):
        for j in range(ny):
            if active[i, j]:
                if phi[i, j] > vmax:
                    phi[i, j] = vmax
                elif phi[i, j] < -vmax:
                    phi[i, j] = -vmax
                if psi[i, j] > vmax:
                    psi[i, j] = vmax
                elif psi[i, j] < -vmax:
                    psi[i, j] = -vmax

