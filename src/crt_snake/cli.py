"""Command line tools for CRT Snake."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crt-snake",
        description="CRT Snake headless simulation and configuration tools.",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game with the built-in autopilot.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    sim_p.add_argument("--grid-size", type=int, default=None)
    sim_p.add_argument("--start-coil", type=int, default=None)
    sim_p.add_argument("--growth-ratio", type=float, default=None)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=10_000)
    sim_p.add_argument(
        "--json", action="store_true", help="Print the result as JSON.",
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Print or write the default config.")
    cfg_p.add_argument(
        "output", nargs="?", default=None,
        help="Write the config to this path instead of printing it.",
    )

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from crt_snake.config import GameConfig
    from crt_snake.simulate import run_headless

    config = GameConfig.load(args.config) if args.config else GameConfig()

    flag_map = {
        "grid_size": "grid_size",
        "start_coil": "start_coil",
        "growth_ratio": "growth_ratio",
    }
    overrides = {
        cfg_name: getattr(args, cli_name)
        for cli_name, cfg_name in flag_map.items()
        if getattr(args, cli_name) is not None
    }
    if overrides:
        d = config.to_dict()
        d.update(overrides)
        try:
            config = GameConfig(**d)
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            return 2

    result = run_headless(config, seed=args.seed, max_ticks=args.max_ticks)
    if args.json:
        print(json.dumps(result.to_dict()))  # noqa: T201
    else:
        print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from crt_snake.config import GameConfig

    config = GameConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``crt-snake`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
