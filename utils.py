"""
Utilities and configuration for the seam-carving project.

This module defines:
  - Config: Immutable dataclass storing downsizing and visualization settings.
  - Lightweight helpers for loading, saving, resizing and transposing images.
  - Request checks that return an error value (or None) for the orchestrator.

Design notes:
  - I/O uses uint8 BGR (OpenCV). Energy works on integer channel values.
  - Horizontal seams are handled by transposing, never by rotating, so the
    left-to-right sweep keeps the same neighbor order as the top-to-bottom one.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from errors import RasterIOError, ValidationError

# Smallest extent the shifted two-pixel energy window fits into.
MIN_ENERGY_EXTENT = 3


@dataclass(frozen=True)
class Config:
    """Immutable configuration container for the seam-carving algorithm."""
    should_downsize: bool = False
    downsize_width: int = 500
    marker_color: Tuple[int, int, int] = (0, 0, 255)  # BGR red


def load_image(path: str) -> np.ndarray:
    """Read a 3-channel uint8 BGR image, raising RasterIOError if it cannot be decoded."""
    try:
        img = cv2.imread(path, cv2.IMREAD_COLOR)
    except cv2.error as exc:
        raise RasterIOError(f"Could not read image at {path}: {exc}") from exc
    if img is None:
        raise RasterIOError(f"Could not read image at {path}")
    return img


def resize(image: np.ndarray, width: int) -> np.ndarray:
    """Resize an image to a target width, preserving aspect ratio."""
    h, w = image.shape[:2]
    dim = (width, max(1, int(h * width / float(w))))
    return cv2.resize(image, dim)


def transpose_image(image: np.ndarray) -> np.ndarray:
    """Swap rows and columns (x <-> y); channels stay last."""
    if image.ndim == 3:
        return np.ascontiguousarray(image.transpose(1, 0, 2))
    return np.ascontiguousarray(image.T)


def ensure_parent_dir(path: str) -> None:
    """Create the directory that will hold `path`, raising RasterIOError if it cannot exist."""
    out_dir = os.path.dirname(os.path.abspath(path))
    if out_dir and not os.path.isdir(out_dir):
        try:
            os.makedirs(out_dir, exist_ok=True)
        except OSError as exc:
            raise RasterIOError(f"Cannot create output directory {out_dir}: {exc}") from exc


def save_uint8(path: str, img: np.ndarray) -> None:
    """Save an image to disk as uint8, clipping to [0, 255] if needed."""
    if img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)
    try:
        ok = cv2.imwrite(path, img)
    except cv2.error as exc:
        raise RasterIOError(f"Failed to write image to: {path} ({exc})") from exc
    if not ok:
        raise RasterIOError(f"Failed to write image to: {path}")


def check_energy_shape(shape_hw: Tuple[int, int]) -> Optional[ValidationError]:
    """Return an error if the image is too small for the shifted energy window."""
    h, w = shape_hw[:2]
    if h < MIN_ENERGY_EXTENT or w < MIN_ENERGY_EXTENT:
        return ValidationError(
            f"image is {w}x{h} (WxH); energy needs at least "
            f"{MIN_ENERGY_EXTENT} pixels along each axis"
        )
    return None


def check_seam_counts(
    shape_hw: Tuple[int, int],
    num_vertical: int,
    num_horizontal: int,
) -> Optional[ValidationError]:
    """Return an error if the requested seam counts cannot be removed from an image of this size.

    Every removal recomputes energy, so the image has to stay large enough for
    the energy window until the last seam is found.
    """
    h, w = shape_hw[:2]
    if num_vertical < 0 or num_horizontal < 0:
        return ValidationError(
            f"seam counts must be non-negative, got width={num_vertical}, height={num_horizontal}"
        )
    if num_vertical >= w:
        return ValidationError(f"cannot remove {num_vertical} vertical seams from width {w}")
    if num_horizontal >= h:
        return ValidationError(f"cannot remove {num_horizontal} horizontal seams from height {h}")

    # Size of the image when the last seam of each pass is searched.
    if num_vertical > 0:
        err = check_energy_shape((h, w - num_vertical + 1))
        if err is not None:
            return err
    if num_horizontal > 0:
        err = check_energy_shape((h - num_horizontal + 1, w - num_vertical))
        if err is not None:
            return err
    return None
