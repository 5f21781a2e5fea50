"""Entry point for livescope."""

import argparse
import logging
import sys

from livescope import __version__
from livescope.engine import VisualStateEngine
from livescope.loop import RenderLoop
from livescope.models import Config, StartupError
from livescope.palette import resolve_theme, theme_names
from livescope.sampler import MetricsSampler
from livescope.terminal import TerminalSurface

logger = logging.getLogger("livescope")


def refresh_ms(value):
    ms = int(value)
    if ms <= 0:
        raise argparse.ArgumentTypeError("refresh must be a positive number of milliseconds")
    return ms


def build_parser():
    parser = argparse.ArgumentParser(
        prog="livescope",
        description="A mesmerizing real-time system performance art visualizer",
    )
    parser.add_argument("--theme", "-t", default="fire",
                        help=f"Color theme ({', '.join(theme_names())}; default: fire)")
    parser.add_argument("--refresh", "-r", type=refresh_ms, default=16,
                        help="Refresh interval in milliseconds (default: 16, ~60fps)")
    parser.add_argument("--particles", "-p", action="store_true",
                        help="Enable particle effects for network and disk activity")
    parser.add_argument("--no-hud", action="store_true", help="Hide the status line")
    parser.add_argument("--seed", type=int, help="Seed for particle placement")
    parser.add_argument("--log-file", help="Write logs to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug-level logging")
    parser.add_argument("--version", action="version", version=f"livescope {__version__}")
    return parser


def configure_logging(log_file, verbose):
    level = logging.DEBUG if verbose else logging.INFO
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        # The terminal is the canvas; nothing may be printed over it
        logging.basicConfig(level=level, handlers=[logging.NullHandler()])


def config_from_args(args):
    return Config(
        theme=resolve_theme(args.theme),
        tick_interval=args.refresh / 1000.0,
        particles=args.particles,
        show_hud=not args.no_hud,
        seed=args.seed,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)
    config = config_from_args(args)

    try:
        sampler = MetricsSampler()
        engine = VisualStateEngine(sampler.core_count, seed=config.seed)
        with TerminalSurface() as surface:
            loop = RenderLoop(config, sampler, engine, surface)
            code = loop.run()
    except StartupError as e:
        logger.error("Startup failed: %s", e)
        print(f"livescope: {e}", file=sys.stderr)
        return 1

    print("LiveScope terminated. Thanks for watching the show!")
    return code


if __name__ == "__main__":
    sys.exit(main())
