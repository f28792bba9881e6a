"""GPU acceleration using PyTorch (CUDA or MPS backend)."""

import logging
from typing import Optional

import numpy as np
import torch

logger = logging.getLogger(__name__)


class GPUContext:
    """Global device context for the tensor stepper (CUDA, MPS or CPU)."""

    _device: Optional[torch.device] = None
    _available: Optional[bool] = None
    _backend: Optional[str] = None  # 'cuda', 'mps', or None

    @classmethod
    def device(cls) -> torch.device:
        """Get the compute device (lazy initialization).

        Returns CUDA if available, then MPS (Apple Silicon), otherwise CPU.
        """
        if cls._device is None:
            if torch.cuda.is_available():
                cls._device = torch.device('cuda')
                cls._backend = 'cuda'
            elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                cls._device = torch.device('mps')
                cls._backend = 'mps'
            else:
                cls._device = torch.device('cpu')
                cls._backend = None
            logger.info("Torch stepper device: %s", cls._device)
        return cls._device

    @classmethod
    def is_available(cls) -> bool:
        """Check if GPU acceleration is available (CUDA or MPS)."""
        if cls._available is None:
            cuda_ok = torch.cuda.is_available()
            mps_ok = hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()
            cls._available = cuda_ok or mps_ok
        return cls._available

    @classmethod
    def dtype(cls, device: Optional[torch.device] = None) -> torch.dtype:
        """float64 on CPU; float32 on GPUs (MPS has no float64)."""
        device = device if device is not None else cls.device()
        return torch.float64 if device.type == 'cpu' else torch.float32

    @classmethod
    def to_device(cls, arr: np.ndarray, device: Optional[torch.device] = None) -> torch.Tensor:
        """Upload a NumPy array, converting floats to the device's working precision."""
        device = device if device is not None else cls.device()
        tensor = torch.from_numpy(np.array(arr, order="C", copy=True))
        if tensor.is_floating_point():
            tensor = tensor.to(dtype=cls.dtype(device))
        return tensor.to(device)

    @classmethod
    def to_cpu(cls, tensor: torch.Tensor) -> np.ndarray:
        """Download a tensor to a float64 NumPy array."""
        return tensor.detach().cpu().numpy().astype(np.float64, copy=False)

    @classmethod
    def synchronize(cls) -> None:
        if cls._backend == 'cuda':
            torch.cuda.synchronize()
        elif cls._backend == 'mps' and hasattr(torch.mps, 'synchronize'):
            torch.mps.synchronize()


__all__ = ['GPUContext']
