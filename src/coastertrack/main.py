"""
Command-line Application
========================
Builds a demo track and shows, exports or summarizes it.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Sets up logging (console + optional file).
2. Translates command-line arguments into a curve and TrackOptions.
3. Runs the mesher and hands the result to the view layer or IOManager.

Usage:
    $ python -m coastertrack --curve helix --style "B&M" --cross-ties --show
    $ python -m coastertrack --bank-keyframes "0:0,50:45,100:0" --output track.vtp
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from coastertrack.controller.frames import FrameStrategy
from coastertrack.controller.mesher import build_track_mesh
from coastertrack.exceptions import CoasterTrackError
from coastertrack.logging_config import setup_logging
from coastertrack.model.banking import BankKeyframe, FunctionBank, KeyframeBank
from coastertrack.model.curves import CatmullRomCurve, HelixCurve, LineCurve
from coastertrack.model.geometry_utils import deg2rad
from coastertrack.model.options import TrackOptions
from coastertrack.model.profiles import STYLE_NAMES

logger = logging.getLogger(__name__)

# Demo layout: lift hill, drop, and a banked turn
DEMO_POINTS = [
    (0.0, 0.0, 0.0),
    (10.0, 0.0, 0.0),
    (20.0, 12.0, 0.0),
    (28.0, 12.0, 0.0),
    (36.0, 1.0, 4.0),
    (40.0, 2.0, 16.0),
    (30.0, 3.0, 24.0),
    (18.0, 2.0, 20.0),
]

CURVES = {
    "helix": lambda: HelixCurve(radius=10.0, height=8.0, turns=1.5),
    "line": lambda: LineCurve(start=(0.0, 0.0, 0.0), end=(0.0, 0.0, 10.0)),
    "spline": lambda: CatmullRomCurve(DEMO_POINTS),
}


def parse_keyframes(text: str) -> KeyframeBank:
    """Parse "percent:degrees,percent:degrees,..." into a KeyframeBank."""
    keys = []
    for item in filter(None, (s.strip() for s in text.split(","))):
        try:
            percent, degrees = item.split(":")
            keys.append(BankKeyframe.from_dict({"percent": float(percent), "angle": deg2rad(float(degrees))}))
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Invalid keyframe '{item}', expected percent:degrees.") from e
    return KeyframeBank(keys)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coastertrack",
        description="Generate a roller-coaster track mesh along a demo curve.",
    )
    parser.add_argument("--curve", choices=sorted(CURVES), default="helix")
    parser.add_argument("--divisions", type=int, default=300)
    parser.add_argument("--style", default="B&M", help=f"One of {STYLE_NAMES}; unknown names use 'default'.")
    parser.add_argument("--rail-radius", type=float, default=None)
    parser.add_argument("--rail-sides", type=int, default=None)
    parser.add_argument("--strategy", choices=[str(s) for s in FrameStrategy],
                        default=str(FrameStrategy.PARALLEL_TRANSPORT))
    bank = parser.add_mutually_exclusive_group()
    bank.add_argument("--bank-degrees", type=float, default=None, help="Constant bank angle.")
    bank.add_argument("--bank-keyframes", type=parse_keyframes, default=None,
                      help='Keyframes as "percent:degrees,...".')
    parser.add_argument("--cross-ties", action="store_true")
    parser.add_argument("--output", default=None, help="Write .h5 (HDF5) or any PyVista format.")
    parser.add_argument("--show", action="store_true", help="Open an interactive viewer.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser


def options_from_args(args: argparse.Namespace) -> TrackOptions:
    bank = args.bank_keyframes
    if args.bank_degrees is not None:
        angle = deg2rad(args.bank_degrees)
        bank = FunctionBank(lambda t: angle)

    options = TrackOptions(
        bank=bank,
        style=args.style,
        frame_strategy=args.strategy,
        cross_ties=args.cross_ties,
    )
    if args.rail_radius is not None:
        options = options.with_overrides(rail_radius=args.rail_radius)
    if args.rail_sides is not None:
        options = options.with_overrides(rail_sides=args.rail_sides)
    return options


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    curve = CURVES[args.curve]()
    try:
        mesh = build_track_mesh(curve, args.divisions, options_from_args(args))
    except CoasterTrackError as e:
        logger.error(str(e))
        return 2

    stats = mesh.stats()
    logger.info(
        f"style={stats.style} divisions={stats.divisions} vertices={stats.num_vertices} "
        f"triangles={stats.num_triangles} ties={stats.num_cross_ties}"
    )
    logger.info(f"bounds min={stats.bounds_min} max={stats.bounds_max}")

    if args.output:
        if args.output.lower().endswith((".h5", ".hdf5")):
            from coastertrack.model.io import IOManager
            IOManager.save_mesh(mesh, args.output)
        else:
            from coastertrack.view.vtk_utils import export_mesh
            export_mesh(mesh, args.output)

    if args.show:
        from coastertrack.view.vtk_utils import plot_track
        plot_track(mesh)

    return 0


if __name__ == "__main__":
    sys.exit(main())
