"""
Explicit finite-difference wave and Schrodinger engine on masked billiard lattices.
"""

from .config import WaveConfig, default_config
from .errors import ConfigurationError, WaveBilliardError
from .grid import Grid
from .initial import CoherentParams, PulseParams, add_packet, seed_packet
from .mask import DomainMask, build_domain_mask, load_mask_image
from .normalize import compute_aggregate, derive_scale, normalize_frame, renormalize
from .simulation import FrameSnapshot, Simulation
from .state import FieldState
from .stencil import Stepper
from .types import BoundaryPolicy, FieldKind

__all__ = [
    'BoundaryPolicy',
    'CoherentParams',
    'ConfigurationError',
    'DomainMask',
    'FieldKind',
    'FieldState',
    'FrameSnapshot',
    'Grid',
    'PulseParams',
    'Simulation',
    'Stepper',
    'WaveBilliardError',
    'WaveConfig',
    'add_packet',
    'build_domain_mask',
    'compute_aggregate',
    'default_config',
    'derive_scale',
    'load_mask_image',
    'normalize_frame',
    'renormalize',
    'seed_packet',
]
