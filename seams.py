from __future__ import annotations
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
from numba import njit

from energy import dual_gradient_energy
from errors import ConfigurationError, InternalConsistencyError
from utils import transpose_image

VERTICAL = "vertical"
HORIZONTAL = "horizontal"
DIRECTIONS = (VERTICAL, HORIZONTAL)


class Pixel(NamedTuple):
    """Pixel coordinate, x is the column and y the row."""
    x: int
    y: int


def check_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise ConfigurationError(f"Invalid direction: {direction!r} (expected one of {DIRECTIONS})")
    return direction


# ==========================
# Numba-compiled DP helpers
# ==========================
@njit(cache=True)
def _dp_accumulate(energy: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Top-to-bottom DP over an energy matrix (float64 HxW). Returns:
      - cost: float64 HxW, minimum cumulative energy of a path from row 0
      - parent: int64 HxW, column of the predecessor in the previous row
        (-1 on row 0, which has no predecessor)
    Candidates are tried straight, then left, then right, and only a strictly
    smaller cost replaces the current choice.
    """
    h, w = energy.shape
    cost = np.empty((h, w), dtype=np.float64)
    parent = np.full((h, w), -1, dtype=np.int64)

    for j in range(w):
        cost[0, j] = energy[0, j]

    for i in range(1, h):
        for j in range(w):
            best_j = j
            best = cost[i - 1, j]
            if j > 0 and cost[i - 1, j - 1] < best:
                best_j = j - 1
                best = cost[i - 1, j - 1]
            if j < w - 1 and cost[i - 1, j + 1] < best:
                best_j = j + 1
                best = cost[i - 1, j + 1]
            parent[i, j] = best_j
            cost[i, j] = energy[i, j] + best

    return cost, parent


@njit(cache=True)
def _dp_backtrack(parent: np.ndarray, end_j: int) -> np.ndarray:
    """
    Reconstruct the seam indices given a parent table and the last-row column end_j.
    Returns seam_idx of shape (H,) int64 such that seam_idx[i] is the column in row i.
    A broken chain, or a parent outside [0, W), leaves -1 in the rows it
    could not reach.
    """
    h, w = parent.shape
    seam = np.full(h, -1, dtype=np.int64)
    j = end_j
    for i in range(h - 1, -1, -1):
        if j < 0 or j >= w:
            break
        seam[i] = j
        j = parent[i, j]
    return seam


# =======================
# CORE DP / SEAM SEARCH
# =======================
def cumulative_cost(energy: np.ndarray, direction: str = VERTICAL) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run the minimum-cost path DP over an energy map.

    Both maps come back in image orientation (H x W). For a vertical sweep
    parent[y, x] is the predecessor's column in row y - 1; for a horizontal
    sweep it is the predecessor's row in column x - 1. Starting-border pixels
    hold -1.
    """
    check_direction(direction)
    energy = np.asarray(energy, dtype=np.float64)
    if energy.ndim != 2 or energy.size == 0:
        raise InternalConsistencyError(f"energy map must be a non-empty 2D array, got shape {energy.shape}")
    if not np.all(np.isfinite(energy)):
        raise InternalConsistencyError("energy map contains non-finite values")

    if direction == VERTICAL:
        return _dp_accumulate(np.ascontiguousarray(energy))
    cost, parent = _dp_accumulate(transpose_image(energy))
    return transpose_image(cost), transpose_image(parent)


def extract_seam(cost: np.ndarray, parent: np.ndarray, direction: str = VERTICAL) -> np.ndarray:
    """
    Pick the cheapest pixel on the far border (lowest index on ties) and walk
    the parent links back to the starting border.

    Returns an int64 array: one column per row (vertical) or one row per
    column (horizontal).
    """
    check_direction(direction)
    if cost.shape != parent.shape:
        raise InternalConsistencyError(
            f"cost map {cost.shape} and parent map {parent.shape} describe different images"
        )
    if direction == HORIZONTAL:
        cost, parent = transpose_image(cost), transpose_image(parent)

    end_j = int(np.argmin(cost[-1]))
    seam_idx = _dp_backtrack(np.ascontiguousarray(parent, dtype=np.int64), end_j)

    if seam_idx[0] < 0 or not is_connected(seam_idx, cost.shape[1]):
        raise InternalConsistencyError("parent map does not lead back to the starting border")
    return seam_idx


def find_seam(
    im: np.ndarray,
    direction: str = VERTICAL,
    energy: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Find the seam of minimum energy.

    The energy map is computed from `im` unless given; a supplied map must
    have been computed against this exact image size.
    """
    check_direction(direction)
    if energy is None:
        energy = dual_gradient_energy(im)
    elif energy.shape != im.shape[:2]:
        raise InternalConsistencyError(
            f"energy map {energy.shape} is stale for image {im.shape[:2]}; recompute it"
        )
    cost, parent = cumulative_cost(energy, direction)
    return extract_seam(cost, parent, direction)


# ==============
# SEAM HELPERS
# ==============
def is_connected(seam_idx: np.ndarray, limit: int) -> bool:
    """True if every index lies in [0, limit) and neighbors differ by at most 1."""
    if seam_idx.size == 0:
        return False
    if seam_idx.min() < 0 or seam_idx.max() >= limit:
        return False
    return bool(np.all(np.abs(np.diff(seam_idx)) <= 1))


def seam_pixels(seam_idx: np.ndarray, direction: str = VERTICAL) -> List[Pixel]:
    """Seam as pixel coordinates, ordered along the traversal axis."""
    check_direction(direction)
    if direction == VERTICAL:
        return [Pixel(int(x), y) for y, x in enumerate(seam_idx)]
    return [Pixel(x, int(y)) for x, y in enumerate(seam_idx)]


def seam_energy(energy: np.ndarray, seam_idx: np.ndarray, direction: str = VERTICAL) -> float:
    """Total energy of the pixels on a seam."""
    return float(sum(energy[p.y, p.x] for p in seam_pixels(seam_idx, direction)))


def seam_boolmask(shape_hw: Tuple[int, int], seam_idx: np.ndarray) -> np.ndarray:
    """Bool HxW mask for a vertical seam where False marks the seam."""
    h, w = shape_hw[:2]
    if seam_idx.shape != (h,) or not is_connected(seam_idx, w):
        raise InternalConsistencyError(
            f"seam of length {seam_idx.shape[0]} does not fit an image of {w}x{h} (WxH)"
        )
    boolmask = np.ones((h, w), dtype=np.bool_)
    boolmask[np.arange(h), seam_idx] = False
    return boolmask


def remove_seam(im: np.ndarray, seam_idx: np.ndarray, direction: str = VERTICAL) -> np.ndarray:
    """
    Remove a seam from a color (HxWx3) or grayscale (HxW) image.
    Returns a new array one column (vertical) or one row (horizontal) smaller;
    the input is left untouched.
    """
    check_direction(direction)
    if direction == HORIZONTAL:
        return transpose_image(remove_seam(transpose_image(im), seam_idx, VERTICAL))

    h, w = im.shape[:2]
    boolmask = seam_boolmask((h, w), np.asarray(seam_idx, dtype=np.int64))
    if im.ndim == 3:
        return im[boolmask].reshape((h, w - 1, im.shape[2]))
    return im[boolmask].reshape((h, w - 1))
