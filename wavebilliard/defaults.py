"""Central place for wavebilliard default settings."""

# Lattice / physical extent (16:9 window of the planar billiard)
DEFAULT_GRID_SHAPE: tuple[int, int] = (640, 360)
DEFAULT_XMIN: float = -2.0
DEFAULT_XMAX: float = 2.0
DEFAULT_YMIN: float = -1.125
DEFAULT_YMAX: float = 1.125
MIN_GRID_CELLS: int = 3  # Need at least one bulk cell per axis

# Wave equation
DEFAULT_COURANT: float = 0.01       # c*DT/DX
DEFAULT_COURANT_B: float = 0.03     # Courant number in medium B
DEFAULT_GAMMA: float = 0.0          # Damping in medium A
DEFAULT_GAMMA_B: float = 1.0e-7     # Damping in medium B
DEFAULT_KAPPA: float = 5.0e-6       # "Elasticity" term enforcing oscillations

# Absorbing edges
DEFAULT_KAPPA_SIDES: float = 5.0e-4
DEFAULT_GAMMA_SIDES: float = 1.0e-4
DEFAULT_KAPPA_TOPBOT: float = 0.0
DEFAULT_GAMMA_TOPBOT: float = 1.0e-7

# Oscillating left edge
DEFAULT_DRIVE_AMPLITUDE: float = 0.8
DEFAULT_DRIVE_OMEGA: float = 0.005

# Schrodinger equation
DEFAULT_DT: float = 1.0e-8
DEFAULT_HBAR: float = 1.0

# Debug clamp (blow-up guard, not physics)
DEFAULT_VMAX: float = 10.0

# Reported steps per displayed tick; a wave step advances one time level
DEFAULT_WAVE_SUBSTEPS: int = 25
DEFAULT_SCHRODINGER_SUBSTEPS: int = 2000

# Classical pulse ("drop")
DEFAULT_PULSE_AMPLITUDE: float = 0.2
DEFAULT_PULSE_VARIANCE: float = 0.001
DEFAULT_PULSE_WAVELENGTH: float = 0.01

# Coherent wavepacket
DEFAULT_PACKET_AMPLITUDE: float = 1.0
DEFAULT_PACKET_SCALE: float = 0.25
MIN_PACKET_MODULE: float = 1.0e-15

# Fixed-point factor of the time-series text format
TIME_SERIES_FACTOR: float = 1.0e16
