"""
Single entry point for primscene: preview, record, describe.

Usage:
    uv run primscene preview [--seed N] [--preset NAME ...] [--view-mode MODE]
    uv run primscene record --out scene.rrd [--seed N] [--preset all]
    uv run primscene describe [--seeds 1 2 3] [--count N]
    uv run primscene smoketest          # Short recording, no viewer
"""

from __future__ import annotations

import argparse
import logging
import sys

from primscene.config import Config
from primscene.animation import AnimationPreset
from primscene.composer import describe_scene, generate
from primscene.primitives import ViewMode

log = logging.getLogger(__name__)

PRESET_CHOICES = [p.value for p in AnimationPreset] + ["all"]
VIEW_MODE_CHOICES = [m.value for m in ViewMode]


def _setup_logging(verbose: bool = False) -> None:
    """Configure root logger level and install an excepthook.

    The excepthook routes unhandled exceptions through logging so they are
    captured by whatever handlers are active at the time.
    """
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Capture unhandled exceptions to the log
    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _add_scene_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--seed", type=int, default=None, help="Scene seed (default: random)")
    p.add_argument("--count", type=int, default=None, help="Primitives to place (default: 5)")
    p.add_argument(
        "--preset",
        action="append",
        choices=PRESET_CHOICES,
        default=None,
        help="Preset to play, repeatable (default: all, in order)",
    )
    p.add_argument(
        "--view-mode",
        choices=VIEW_MODE_CHOICES,
        default=None,
        help="Shading mode (default: standard)",
    )
    p.add_argument("--duration", type=float, default=None, help="Seconds per preset")
    p.add_argument("--fps", type=int, default=None, help="Frames per second")


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="primscene",
        description="primscene - procedural primitive scenes with animation presets",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # preview
    p_preview = sub.add_parser("preview", help="Stream a scene to a Rerun viewer")
    _add_scene_args(p_preview)

    # record
    p_record = sub.add_parser("record", help="Record a scene to an .rrd file")
    _add_scene_args(p_record)
    p_record.add_argument("--out", type=str, default="scene.rrd", help="Output .rrd path")

    # describe
    p_desc = sub.add_parser("describe", help="Print scene descriptions for seeds")
    p_desc.add_argument("--seeds", nargs="*", type=int, default=[0], help="Seeds to describe")
    p_desc.add_argument("--count", type=int, default=None, help="Primitives to place (default: 5)")

    # smoketest
    p_smoke = sub.add_parser("smoketest", help="Short recording to a file, no viewer")
    p_smoke.add_argument("--out", type=str, default="smoketest.rrd", help="Output .rrd path")

    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Apply CLI overrides to a default Config."""
    cfg = Config()
    if getattr(args, "count", None) is not None:
        cfg.scene.count = args.count
    if getattr(args, "seed", None) is not None:
        cfg.preview.seed = args.seed
    if getattr(args, "view_mode", None) is not None:
        cfg.view.view_mode = args.view_mode
    if getattr(args, "duration", None) is not None:
        cfg.preview.duration = args.duration
    if getattr(args, "fps", None) is not None:
        cfg.preview.fps = args.fps
    presets = getattr(args, "preset", None)
    if presets and "all" not in presets:
        cfg.preview.presets = tuple(presets)
    return cfg


def main(argv: list[str] | None = None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(verbose=args.verbose)

    if args.command is None:
        parser.print_help()

    elif args.command == "preview":
        from primscene.scene_preview import run_scene_preview

        run_scene_preview(config_from_args(args))

    elif args.command == "record":
        from primscene.scene_preview import run_scene_preview

        cfg = config_from_args(args)
        cfg.preview.output = args.out
        cfg.preview.realtime = False
        run_scene_preview(cfg)

    elif args.command == "describe":
        cfg = config_from_args(args)
        cfg.validate()
        for seed in args.seeds:
            scene = generate(
                cfg.scene.count,
                seed=seed,
                plane_size=cfg.scene.plane_size,
                max_attempts=cfg.scene.max_attempts,
            )
            log.info("%s", describe_scene(scene, seed=seed))

    elif args.command == "smoketest":
        from primscene.scene_preview import run_scene_preview

        cfg = Config.for_smoketest()
        cfg.preview.output = args.out
        run_scene_preview(cfg)


if __name__ == "__main__":
    main()
