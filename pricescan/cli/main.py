#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: from config, else http://localhost:8001)")
    parser.add_argument("--config", action="append", default=None, help="Engine config TOML (repeatable, later wins)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--save", action="store_true", help="Also save results under captures/results/")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Extract item prices from photos of receipts and shelf labels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <image>               Extract prices from one photo
  batch <image> [...]        Extract prices from independent photos
  long <section> [...]       Merge the sections of one long receipt

Exit codes:
  0  at least one capture processed (including "no prices found")
  1  every capture failed, or bad arguments
  130 cancelled (Ctrl+C)
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--root", default=None, help="Project root (default: $PRICESCAN_HOME or cwd)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser("scan", help="Extract prices from one photo")
    scan_parser.add_argument("image", help="Path to photo")
    _add_common_arguments(scan_parser)

    batch_parser = subparsers.add_parser("batch", help="Extract prices from independent photos")
    batch_parser.add_argument("images", nargs="+", help="Paths to photos")
    _add_common_arguments(batch_parser)

    long_parser = subparsers.add_parser("long", help="Merge the sections of one long receipt")
    long_parser.add_argument("sections", nargs="+", help="Section photos, top of the receipt first")
    _add_common_arguments(long_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    from pricescan.runtime import set_log_level, set_project_root

    if args.verbose:
        set_log_level(logging.DEBUG)
    if args.root:
        set_project_root(Path(args.root))

    if args.command == "scan":
        from pricescan.cli.capture import cmd_scan

        return cmd_scan(args)
    elif args.command == "batch":
        from pricescan.cli.capture import cmd_batch

        return cmd_batch(args)
    elif args.command == "long":
        from pricescan.cli.capture import cmd_long

        return cmd_long(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
