"""Headerless numeric CSV reader feeding :class:`~neuralnetwork.data.dataset.DataSet`."""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd


def read_csv_rows(path: str | Path) -> List[List[float]] | None:
    """Return every row of ``path`` as a list of floats.

    Returns ``None`` (and warns) when the file is missing or not numeric.
    """

    path = Path(path)
    try:
        frame = pd.read_csv(path, header=None, dtype=np.float64)
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        warnings.warn(
            f"error parsing CSV file [{path}] - {exc}", RuntimeWarning, stacklevel=2
        )
        return None
    return frame.to_numpy(dtype=np.float64).tolist()


def write_csv_rows(path: str | Path, rows: np.ndarray) -> Path:
    """Write ``rows`` as a headerless CSV file."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(np.asarray(rows, dtype=np.float64)).to_csv(path, header=False, index=False)
    return path


__all__ = ["read_csv_rows", "write_csv_rows"]
