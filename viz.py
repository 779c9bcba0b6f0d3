from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import cv2
import imageio.v2 as imageio
import numpy as np

from seams import VERTICAL, check_direction, seam_pixels
from errors import InternalConsistencyError, RasterIOError
from utils import ensure_parent_dir

logger = logging.getLogger(__name__)

RED_BGR = (0, 0, 255)


def paint_seam(
    im: np.ndarray,
    seam_idx: np.ndarray,
    direction: str = VERTICAL,
    color: Tuple[int, int, int] = RED_BGR,
) -> np.ndarray:
    """
    Overwrite every seam pixel of `im` with `color`, in place.
    The image keeps its size; it is returned for convenience.
    """
    check_direction(direction)
    h, w = im.shape[:2]
    expected = h if direction == VERTICAL else w
    if len(seam_idx) != expected:
        raise InternalConsistencyError(
            f"{direction} seam of length {len(seam_idx)} does not fit an image of {w}x{h} (WxH)"
        )
    pixels = seam_pixels(seam_idx, direction)
    for p in pixels:
        if not (0 <= p.x < w and 0 <= p.y < h):
            raise InternalConsistencyError(f"seam pixel {p} lies outside a {w}x{h} image")
    for p in pixels:
        im[p.y, p.x] = color
    return im


def _pad_to_size_bgr(img_bgr: np.ndarray, target_h: int, target_w: int) -> np.ndarray:
    """Pad BGR image to (target_h, target_w) with solid white (255,255,255)."""
    h, w = img_bgr.shape[:2]
    dh = max(0, target_h - h)
    dw = max(0, target_w - w)
    if dh == 0 and dw == 0:
        return img_bgr
    return cv2.copyMakeBorder(img_bgr, 0, dh, 0, dw, borderType=cv2.BORDER_CONSTANT, value=(255, 255, 255))


class VizGifRecorder:
    """
    GIF recorder for seam carving.

    - on_seam(im, seam_idx, direction): paints the seam (red) on a uint8 copy
      and stores an RGB frame.
    - Carving only shrinks the image, so the first frame fixes the canvas size
      and later frames are padded with white to match it.
    - close(): writes the animated GIF via imageio.
    """
    def __init__(self, gif_path: str, every: int = 1, max_frames: Optional[int] = None, fps: int = 12,
                 color: Tuple[int, int, int] = RED_BGR):
        self.gif_path = gif_path
        self.every = max(1, int(every))
        self.max_frames = max_frames if (max_frames is None or max_frames > 0) else None
        self.fps = max(1, int(fps))
        self.color = color

        ensure_parent_dir(gif_path)

        self._frames: List[np.ndarray] = []   # RGB frames, all of the target size
        self._step = 0
        self._target_h: Optional[int] = None
        self._target_w: Optional[int] = None

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def on_seam(self, im: np.ndarray, seam_idx: np.ndarray, direction: str = VERTICAL) -> None:
        """
        Record a frame with the current seam drawn in red.
        im: HxWx3 BGR image the seam was computed against (not modified)
        seam_idx: column per row (vertical) or row per column (horizontal)
        """
        step = self._step
        self._step += 1
        if step % self.every != 0:
            return
        if self.max_frames is not None and len(self._frames) >= self.max_frames:
            return

        frame_bgr = np.clip(im, 0, 255).astype(np.uint8)  # astype copies
        if self._target_h is None:
            self._target_h, self._target_w = frame_bgr.shape[:2]

        paint_seam(frame_bgr, seam_idx, direction, self.color)
        frame_bgr = _pad_to_size_bgr(frame_bgr, self._target_h, self._target_w)
        self._frames.append(cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB))

    def close(self) -> None:
        """Write the animated GIF to disk (if any frames were recorded)."""
        if not self._frames:
            logger.info("No seams recorded; GIF %s not written", self.gif_path)
            return

        duration_sec = 1.0 / float(self.fps)
        try:
            imageio.mimsave(self.gif_path, self._frames, format="GIF", duration=duration_sec, loop=0)
        except (OSError, ValueError) as exc:
            raise RasterIOError(f"Failed to write GIF to: {self.gif_path} ({exc})") from exc
        logger.info("Wrote %d frames to %s", len(self._frames), self.gif_path)
