"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import DEFAULT_INSTRUCTION_RATE
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import PALETTES


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "rom",
        type=Path,
        help="Path to a raw CHIP-8 ROM image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--rate",
        type=int,
        default=DEFAULT_INSTRUCTION_RATE,
        help=f"Instructions executed per second (default: {DEFAULT_INSTRUCTION_RATE})",
    )
    parser.add_argument(
        "--wrap-sprites",
        action="store_true",
        help="Wrap sprites past the right edge instead of clipping them",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number generator used by RND",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.is_file():
        parser.exit(1, f"run.py: ROM file not found: {args.rom}\n")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.rate <= 0:
        parser.error("--rate must be positive")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        instruction_rate=args.rate,
        wrap_sprites=args.wrap_sprites,
        seed=args.seed,
        palette=args.palette,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
