from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from utils import Config, check_energy_shape, check_seam_counts, resize
from energy import dual_gradient_energy, energy_to_gray
from seams import HORIZONTAL, VERTICAL, check_direction, find_seam, remove_seam
from viz import paint_seam

logger = logging.getLogger(__name__)

# Type alias: on_seam(image_uint8, seam_idx_int64, direction) -> None
OnSeam = Optional[Callable[[np.ndarray, np.ndarray, str], None]]


def prepare_image(im: np.ndarray, cfg: Config) -> np.ndarray:
    """Apply the optional downsizing from `cfg`; images at or below the width pass through."""
    if cfg.should_downsize and im.shape[1] > cfg.downsize_width:
        logger.info("Downsizing %dx%d to width %d", im.shape[1], im.shape[0], cfg.downsize_width)
        return resize(im, width=cfg.downsize_width)
    return im


def seams_removal(
    im: np.ndarray,
    num_remove: int,
    direction: str = VERTICAL,
    on_seam: OnSeam = None,
) -> np.ndarray:
    """
    Remove `num_remove` seams in one direction; optionally call `on_seam` before each removal.
    Energy is recomputed from the current image before every seam.
    """
    check_direction(direction)
    for n in range(int(num_remove)):
        seam_idx = find_seam(im, direction, energy=dual_gradient_energy(im))
        if on_seam is not None:
            on_seam(im, seam_idx, direction)  # visualize current seam on current image
        im = remove_seam(im, seam_idx, direction)
        logger.debug("Removed %s seam %d/%d -> %dx%d", direction, n + 1, num_remove, im.shape[1], im.shape[0])
    return im


def seam_carve(
    im: np.ndarray,
    num_vertical: int,
    num_horizontal: int,
    cfg: Optional[Config] = None,
    on_seam: OnSeam = None,
) -> np.ndarray:
    """
    Shrink `im` by `num_vertical` columns, then by `num_horizontal` rows.

    The request is validated against the working image before any seam is
    removed; the caller's array is never modified.
    """
    cfg = cfg or Config()
    im = prepare_image(im, cfg)

    err = check_seam_counts(im.shape, num_vertical, num_horizontal)
    if err is not None:
        raise err

    h, w = im.shape[:2]
    logger.info("Carving %dx%d -> %dx%d (WxH)", w, h, w - num_vertical, h - num_horizontal)

    output = im
    if num_vertical > 0:
        logger.info("Removing %d vertical seams", num_vertical)
        output = seams_removal(output, num_vertical, VERTICAL, on_seam=on_seam)
    if num_horizontal > 0:
        logger.info("Removing %d horizontal seams", num_horizontal)
        output = seams_removal(output, num_horizontal, HORIZONTAL, on_seam=on_seam)

    logger.info("Resized size: %dx%d (WxH)", output.shape[1], output.shape[0])
    return output


def highlight_seam(im: np.ndarray, direction: str = VERTICAL, cfg: Optional[Config] = None) -> np.ndarray:
    """Paint the minimum-energy seam of `im` in the marker color, in place, and return `im`."""
    cfg = cfg or Config()
    check_direction(direction)
    err = check_energy_shape(im.shape)
    if err is not None:
        raise err

    seam_idx = find_seam(im, direction)
    logger.info("Highlighting %s seam of %d pixels", direction, len(seam_idx))
    return paint_seam(im, seam_idx, direction, cfg.marker_color)


def energy_image(im: np.ndarray) -> np.ndarray:
    """Grey rendering of the energy map, brightest where the energy is highest."""
    err = check_energy_shape(im.shape)
    if err is not None:
        raise err
    return energy_to_gray(dual_gradient_energy(im))
