"""
Reading access-vector files.

A vector file holds one client per line and one value per resource. Values
are separated by whitespace unless a delimiter is given; blank lines and
``#`` comments are skipped. Line order is client order, which must be the
same in the training and the test file.
"""

from typing import Optional, Union
from pathlib import Path
import torch
from torch import Tensor
import numpy as np
import pandas as pd


def _read_frame(path: Path, delimiter: Optional[str]) -> Optional[pd.DataFrame]:
    """Raw table of the file, None when it holds no vectors."""
    try:
        return pd.read_csv(path, sep=delimiter or r'\s+', header=None, comment='#',
                           skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return None
    except pd.errors.ParserError as e:
        raise ValueError(f"{path}: {e}") from e


def load_vectors(path: Union[str, Path],
                 delimiter: Optional[str] = None,
                 dim: Optional[int] = None,
                 dtype: torch.dtype = torch.float32) -> Tensor:
    """Load a vector file into an (n, d) tensor.

    Args:
        path: File to read
        delimiter: Value separator (None for any whitespace)
        dim: Required vector length; also fixes the width of an empty file
        dtype: Tensor dtype

    Returns:
        (n, d) tensor, (0, dim) for a file without vectors

    Raises:
        ValueError: On non-numeric values, rows of different lengths, or a
            width different from ``dim``
        OSError: If the file cannot be read
    """
    path = Path(path)
    frame = _read_frame(path, delimiter)

    if frame is None or frame.empty:
        return torch.zeros((0, dim or 0), dtype=dtype)

    numeric = frame.apply(pd.to_numeric, errors='coerce')
    bad = (numeric.isna() & frame.notna()).to_numpy()
    if bad.any():
        row = int(np.argmax(bad.any(axis=1)))
        raise ValueError(f"{path}: row {row + 1}: non-numeric value in "
                         f"{frame.iloc[row].dropna().tolist()!r}")

    width = frame.shape[1]
    counts = frame.notna().sum(axis=1).to_numpy()
    short = np.flatnonzero(counts != width)
    if short.size:
        row = int(short[0])
        raise ValueError(f"{path}: row {row + 1}: expected {width} values, got {counts[row]}")

    if dim is not None and width != dim:
        raise ValueError(f"{path}: expected {dim} values per row, got {width}")

    data = numeric.to_numpy(dtype=np.float64)
    return torch.from_numpy(data).to(dtype)
