"""
Input validation utilities.

Provides functions for validating vector collections and configuration values
before a clusterer is built, so that bad input is rejected at construction
time rather than part-way through training.
"""

from typing import Optional, Union
import numbers
import torch
from torch import Tensor
import numpy as np


def validate_data(X: Union[Tensor, np.ndarray, list, tuple],
                  dim: Optional[int] = None,
                  dtype: torch.dtype = torch.float32,
                  device: Optional[torch.device] = None,
                  ensure_finite: bool = True,
                  name: str = 'X') -> Tensor:
    """Validate and convert a vector collection to an (n, d) tensor.

    An empty collection is valid and comes back with shape (0, dim).

    Args:
        X: Input vectors (tensor, numpy array, or list of sequences)
        dim: Required vector length (None to accept any)
        dtype: Target data type
        device: Target device
        ensure_finite: Whether to check for inf/nan
        name: Name used in error messages

    Returns:
        Validated tensor

    Raises:
        ValueError: If validation fails
        TypeError: If X cannot be converted
    """
    if isinstance(X, Tensor):
        X = X.detach().to(dtype=dtype, device=device)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.asarray(X, dtype=np.float64)).to(dtype=dtype, device=device)
    elif isinstance(X, (list, tuple)):
        try:
            X = torch.tensor(X, dtype=dtype, device=device)
        except (ValueError, TypeError) as e:
            raise ValueError(f"{name} must be a list of equal-length numeric vectors: {e}") from e
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() in (1, 2) and X.shape[0] == 0:
        # (0,) and (0, 0) carry no width; any other empty input must match dim
        width = X.shape[1] if X.dim() == 2 else 0
        if dim is not None and width not in (0, dim):
            raise ValueError(f"{name}: expected vectors of dimension {dim}, got {width}")
        width = dim if dim is not None else width
        return X.reshape(0, width)

    if X.dim() != 2:
        raise ValueError(f"{name}: expected 2D array, got {X.dim()}D")

    if dim is not None and X.shape[1] != dim:
        raise ValueError(f"{name}: expected vectors of dimension {dim}, got {X.shape[1]}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise ValueError(f"{name} contains NaN values")
        if torch.isinf(X).any():
            raise ValueError(f"{name} contains infinite values")

    return X


def check_positive_int(value: int, name: str) -> int:
    """Validate a strictly positive integer parameter.

    Raises:
        TypeError: If value is not an integer
        ValueError: If value <= 0
    """
    value = check_int(value, name)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def check_int(value: int, name: str) -> int:
    """Validate an integer parameter (bools are rejected)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be int, got {type(value)}")
    return int(value)


def check_real(value: float, name: str) -> float:
    """Validate a real, non-NaN parameter (bools are rejected)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, got {type(value)}")
    value = float(value)
    if value != value:
        raise ValueError(f"{name} must not be NaN")
    return value


def check_threshold(value: float, name: str = 'prefetch_threshold') -> float:
    """Validate a real-valued threshold.

    Any real is accepted; only values in [0, 1] are meaningful for
    access-frequency prototypes.
    """
    return check_real(value, name)


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create generator from random state.

    Args:
        random_state: Seed, generator, or None for fresh entropy

    Returns:
        CPU generator every random draw of a model is taken from
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, numbers.Integral) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")
