#!/usr/bin/env python3
# ascii_image/cli.py
"""
Entry point for ascii-image.
Converts one image and prints it, writes it to a file, or opens the viewer.

Usage:
    ascii-image photo.png --max-width 120
    ascii-image https://example.org/cat.jpg --avoid '$@' -o cat.txt
    ascii-image photo.png --view
"""

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from typing import List, Optional

from ascii_image.config import Config, ConversionOptions
from ascii_image.converter import convert_to_ascii
from ascii_image.errors import AsciiImageError
from ascii_image.loader import ImageLoader
from ascii_image.logging_conf import setup_logging
from ascii_image.version import version_info

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ascii-image", description="Convert an image to ASCII art")
    p.add_argument("source", nargs="?", help="Image path, file:// / data: URI or http(s) URL")
    p.add_argument("--max-width", type=int, help="Maximum glyphs per row (default from config, 300)")
    p.add_argument("--max-height", type=int, help="Maximum rows (default from config, 500)")
    p.add_argument("--avoid", default=None, help="Characters to remove from the glyph ramp")
    p.add_argument("-o", "--output", help="Write the result to this file instead of stdout")
    p.add_argument("--view", action="store_true", help="Open the result in the full-screen viewer")
    p.add_argument("--config", help="Config file path (default: per-user config)")
    p.add_argument("--write-config", action="store_true", help="Save the effective config and exit")
    p.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"), help="Override log level")
    p.add_argument("--version", action="version", version=version_info())
    return p


def _apply_overrides(cfg: Config, args: argparse.Namespace) -> None:
    partial = {}
    # Sizes only go into the config when it is being written; see _conversion_options
    if args.write_config and args.max_width is not None:
        partial["max_width"] = args.max_width
    if args.write_config and args.max_height is not None:
        partial["max_height"] = args.max_height
    if args.avoid is not None:
        partial["avoided_characters"] = args.avoid
    if partial:
        cfg.update({"convert": partial})


def _conversion_options(cfg: Config, args: argparse.Namespace) -> ConversionOptions:
    """Options from config, with command line sizes taken as given (config clamps them)."""
    options = ConversionOptions.from_config(cfg)
    sizes = {}
    if args.max_width is not None:
        sizes["max_width"] = args.max_width
    if args.max_height is not None:
        sizes["max_height"] = args.max_height
    return dataclasses.replace(options, **sizes) if sizes else options


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    for name in ("max_width", "max_height"):
        v = getattr(args, name)
        if v is not None and v < 1:
            parser.error(f"--{name.replace('_', '-')} must be positive")

    cfg = Config.load(args.config)
    _apply_overrides(cfg, args)
    setup_logging(cfg, args.log_level)

    if args.write_config:
        cfg.save()
        print(cfg.path)
        return 0

    if not args.source:
        parser.error("the following arguments are required: source")

    if args.view and os.name == "nt" and not sys.stdout.isatty():
        print("No Windows console detected. Run from cmd, PowerShell, or Windows Terminal.", file=sys.stderr)
        return 1

    options = _conversion_options(cfg, args)
    loader = ImageLoader.from_config(cfg)
    try:
        text = asyncio.run(convert_to_ascii(args.source, options, loader=loader))
    except AsciiImageError as e:
        log.debug("Conversion failed", exc_info=True)
        print(f"ascii-image: {e}", file=sys.stderr)
        return 1
    finally:
        loader.close()

    if args.view:
        from ascii_image.ui.app import AsciiViewerApp
        AsciiViewerApp(text, cfg, title=str(args.source)).run()
    elif args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        log.info("Wrote %s", args.output)
    else:
        sys.stdout.write(text)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
