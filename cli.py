from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

import numpy as np

from errors import ConfigurationError, RasterIOError, SeamCarvingError
from utils import Config, check_seam_counts, ensure_parent_dir, load_image, save_uint8
from ops import energy_image, highlight_seam, prepare_image, seam_carve
from seams import DIRECTIONS, VERTICAL
from viz import VizGifRecorder

logger = logging.getLogger(__name__)

MODES = ("resize", "seam", "energy")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> dict:
    ap = argparse.ArgumentParser(description="Content-aware seam carving")

    ap.add_argument(
        "--mode",
        choices=MODES,
        required=False,  # keep False so legacy -resize/-seam/-energy still work
        help="Operation mode: resize (remove seams), seam (paint the lowest-energy seam) "
             "or energy (write the energy map as a grey image).",
    )

    ap.add_argument("-in", "--image", help="Path to input image", required=True)
    ap.add_argument("-out", "--output", help="Output image path", required=True)

    # Seam counts (add legacy aliases)
    ap.add_argument("--width", "-width", type=int, default=0,
                    help="Vertical seams to remove (reduces width)")
    ap.add_argument("--height", "-height", type=int, default=0,
                    help="Horizontal seams to remove (reduces height)")

    ap.add_argument("--direction", choices=DIRECTIONS, default=VERTICAL,
                    help="Seam orientation for --mode seam (default: vertical).")

    # Downsizing toggle
    ap.add_argument("--downsize", action="store_true",
                    help="Shrink wide inputs to --downsize-width before carving (faster on large images).")
    ap.add_argument("--downsize-width", type=int, default=500,
                    help="Working width used with --downsize (default: 500).")

    # Plan-only (dry run)
    ap.add_argument(
        "--plan-only",
        action="store_true",
        help="Print what would happen (mode, dims, downsizing decision) and exit without processing.",
    )

    # Visualization (GIF)
    ap.add_argument("--viz-gif", help="Path to an output GIF that visualizes carved seams over time.")
    ap.add_argument("--viz-every", type=int, default=1, help="Record every N-th seam (default: 1 = every seam).")
    ap.add_argument("--viz-max-frames", type=int, default=0, help="Optional cap on recorded frames (0 = unlimited).")
    ap.add_argument("--viz-fps", type=int, default=12, help="GIF frames per second (default: 12).")

    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")

    # Backward-compat shim (silent)
    ap.add_argument("-resize", action="store_true", help=argparse.SUPPRESS)
    ap.add_argument("-seam", action="store_true", help=argparse.SUPPRESS)
    ap.add_argument("-energy", action="store_true", help=argparse.SUPPRESS)

    return vars(ap.parse_args(argv))


def validate_and_normalize_args(a: dict) -> dict:
    # Back-compat mapping
    if a.get("mode") is None:
        legacy = [m for m in MODES if a.get(m)]
        if len(legacy) > 1:
            raise ConfigurationError(f"Conflicting legacy mode flags: {', '.join('-' + m for m in legacy)}")
        if legacy:
            a["mode"] = legacy[0]

    if a.get("mode") not in MODES:
        raise ConfigurationError("You must specify --mode {resize,seam,energy} (or use legacy -resize / -seam / -energy).")

    if a["width"] < 0 or a["height"] < 0:
        raise ConfigurationError("--width and --height count seams to remove and must be >= 0.")
    if a["mode"] != "resize" and (a["width"] or a["height"]):
        raise ConfigurationError(f"--mode {a['mode']} takes no seam counts (did you mean --mode resize?).")
    if a["mode"] != "resize" and a.get("viz_gif"):
        raise ConfigurationError("--viz-gif is only available with --mode resize.")
    if a["downsize_width"] < 1:
        raise ConfigurationError("--downsize-width must be positive.")

    # Basic file checks
    if not os.path.exists(a["image"]):
        raise RasterIOError(f"Input image not found: {a['image']}")

    # Ensure output directory exists (quality-of-life)
    ensure_parent_dir(a["output"])
    if a.get("viz_gif"):
        ensure_parent_dir(a["viz_gif"])

    return a


def print_plan(args: dict, cfg: Config, im_work: np.ndarray, original_hw: tuple) -> None:
    """Emit a deterministic, human-friendly plan."""
    h0, w0 = original_hw
    working_h, working_w = im_work.shape[:2]
    downsizing_decision = (working_w, working_h) != (w0, h0)

    print("=== Seam Carving Plan ===")
    print(f"Mode:            {args['mode']}")
    print(f"Input size:      {w0}x{h0} (WxH)")
    print(f"Downsize:        {'ON' if cfg.should_downsize else 'OFF'} "
          f"({'will downsize' if downsizing_decision else 'no downsizing needed'})")
    print(f"Working size:    {working_w}x{working_h} (WxH)")

    if args["mode"] == "resize":
        print(f"Seams removed:   width={args['width']} (vertical), height={args['height']} (horizontal)")
        print(f"Target size:     {working_w - args['width']}x{working_h - args['height']} (WxH)")
        err = check_seam_counts((working_h, working_w), args["width"], args["height"])
        print(f"Feasible:        {'yes' if err is None else 'no - ' + str(err)}")
    elif args["mode"] == "seam":
        print(f"Orientation:     {args['direction']} seam painted in red")
    else:
        print("Output:          energy map as grey levels")

    # Visualization summary
    if args.get("viz_gif"):
        cap = args["viz_max_frames"] if args["viz_max_frames"] > 0 else "unlimited"
        print(f"Visualization:   GIF -> {args['viz_gif']}  (every={args['viz_every']}, max_frames={cap}, fps={args['viz_fps']})")
    else:
        print("Visualization:   (disabled)")

    print("Plan-only:       No processing will be performed.")


def run(args: dict) -> None:
    args = validate_and_normalize_args(args)

    cfg = Config(
        should_downsize=args["downsize"],
        downsize_width=args["downsize_width"],
    )

    im_u8 = load_image(args["image"])
    im_work = prepare_image(im_u8, cfg)

    if args["plan_only"]:
        print_plan(args, cfg, im_work, im_u8.shape[:2])
        return

    # Optional GIF recorder
    recorder = None
    if args.get("viz_gif"):
        max_frames = args["viz_max_frames"] if args["viz_max_frames"] > 0 else None
        recorder = VizGifRecorder(
            gif_path=args["viz_gif"],
            every=max(1, int(args["viz_every"])),
            max_frames=max_frames,
            fps=max(1, int(args["viz_fps"])),
            color=cfg.marker_color,
        )

    # Execute
    if args["mode"] == "resize":
        output = seam_carve(im_work, args["width"], args["height"], cfg,
                            on_seam=(recorder.on_seam if recorder else None))
    elif args["mode"] == "seam":
        output = highlight_seam(im_work, args["direction"], cfg)
    else:  # energy
        output = energy_image(im_work)

    # Write GIF (if any) first; the output image is the last thing written
    if recorder is not None:
        recorder.close()

    try:
        save_uint8(args["output"], output)
    except RasterIOError:
        if recorder is not None and os.path.exists(recorder.gif_path):
            os.remove(recorder.gif_path)
        raise
    logger.info("Saved %s", args["output"])


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    _configure_logging(args["log_level"])
    try:
        run(args)
    except SeamCarvingError as exc:
        sys.exit(f"Error: {exc}")


if __name__ == "__main__":
    main()
