"""
Device selection utilities.

Models default to the CPU: training walks the data one vector at a time, so
small access matrices gain nothing from a GPU. ``'auto'`` picks the best
available device; an unavailable accelerator falls back to the CPU with a
warning instead of failing.
"""

from typing import List, Optional, Union
import torch
import warnings


def _mps_available() -> bool:
    backend = getattr(torch.backends, 'mps', None)
    return backend is not None and backend.is_available()


def available_devices() -> List[str]:
    """Names of the device kinds usable in this process, best first."""
    kinds = []
    if torch.cuda.is_available():
        kinds.append('cuda')
    if _mps_available():
        kinds.append('mps')
    kinds.append('cpu')
    return kinds


def get_default_device() -> torch.device:
    """Best available device (cuda, then mps, then cpu)."""
    return torch.device(available_devices()[0])


def parse_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Turn a device argument into a ``torch.device``.

    Args:
        device: None or 'cpu' for the CPU, 'auto' for the best available
            device, 'cuda' / 'cuda:N' / 'mps' for an accelerator, or a
            ``torch.device`` (returned unchanged)

    Returns:
        Parsed device

    Raises:
        ValueError: For an unknown device name
        TypeError: For anything that is not a string or torch.device
    """
    if isinstance(device, torch.device):
        return device
    if device is None:
        return torch.device('cpu')
    if not isinstance(device, str):
        raise TypeError(f"Device must be str or torch.device, got {type(device)}")

    if device == 'auto':
        return get_default_device()
    if device == 'cpu':
        return torch.device('cpu')

    kind = device.split(':', 1)[0]
    if kind not in ('cuda', 'mps'):
        raise ValueError(f"Unknown device: {device}")
    if kind not in available_devices():
        warnings.warn(f"{kind.upper()} not available, falling back to CPU")
        return torch.device('cpu')
    return torch.device(device)
