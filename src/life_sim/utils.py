# src/life_sim/utils.py
from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable

import numpy as np
from numba import njit


###############################################################################
# Array helpers
###############################################################################


def cells_to_array(cells: Iterable[tuple[int, int]]) -> np.ndarray:
    """Returns an (N, 2) int64 array of (x, y) rows sorted by y, then x."""
    arr = np.array(list(cells), dtype=np.int64).reshape(-1, 2)
    if arr.shape[0] == 0:
        return arr
    order = np.lexsort((arr[:, 0], arr[:, 1]))
    return arr[order]


@njit(cache=True)
def _fill_blocks(
    grid: np.ndarray, corners: np.ndarray, x_origin: int, y_origin: int, block_size: int
) -> None:
    """
    Marks one raster pixel per populated block. Pixel (row, col) covers the
    block whose top-left corner is (x_origin + col * block_size,
    y_origin + row * block_size).
    """
    rows = grid.shape[0]
    cols = grid.shape[1]
    for i in range(corners.shape[0]):
        col = (corners[i, 0] - x_origin) // block_size
        row = (corners[i, 1] - y_origin) // block_size
        if 0 <= row < rows and 0 <= col < cols:
            grid[row, col] = True


def rasterize_blocks(
    corners: np.ndarray, x_origin: int, y_origin: int, side: int, block_size: int
) -> np.ndarray:
    """
    Boolean (side // block_size) x (side // block_size) raster of the square
    anchored at (x_origin, y_origin), indexed ``[y, x]``.
    """
    pixels = side // block_size
    grid = np.zeros((pixels, pixels), dtype=np.bool_)
    if corners.shape[0] == 0 or pixels == 0:
        return grid
    _fill_blocks(
        grid,
        np.ascontiguousarray(corners, dtype=np.int64),
        np.int64(x_origin),
        np.int64(y_origin),
        np.int64(block_size),
    )
    return grid


###############################################################################
# Parameter files
###############################################################################


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing parameter file: {path}")
    data = path.read_bytes()
    suffix = path.suffix.lower()
    if suffix in {".json", ""}:
        params = json.loads(data.decode("utf-8"))
    elif suffix in {".toml", ".tml"}:
        params = tomllib.loads(data.decode("utf-8"))
    else:
        raise ValueError(f"Unsupported parameter file format: {suffix}")
    if not isinstance(params, dict):
        raise ValueError(f"Parameter file must hold a table/object, got {type(params).__name__}")
    return params
