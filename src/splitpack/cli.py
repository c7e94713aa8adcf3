"""CLI entry point for splitpack."""

import argparse
import logging
import sys
from pathlib import Path

from splitpack.config import BYTES_PER_MB, get_settings
from splitpack.errors import MalformedSource, SplitError
from splitpack.formats import get_decomposer
from splitpack.models import FormatKind, SourceFile
from splitpack.splitter import split_file
from splitpack.utils.detection import SNIFF_BYTES, detect_format, format_warning

logger = logging.getLogger(__name__)


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024:
        return f"{size} B"
    elif size < BYTES_PER_MB:
        return f"{size / 1024:.1f} KB"
    return f"{size / BYTES_PER_MB:.2f} MB"


def _read(source_path: Path) -> bytes:
    try:
        return source_path.read_bytes()
    except OSError as exc:
        logger.error(f"Cannot read {source_path}: {exc}")
        sys.exit(1)


def split(source: str, max_mb: float, output: str) -> None:
    """Split a file into parts of at most ``max_mb`` megabytes.

    Args:
        source: Path to the file to split
        max_mb: Maximum size of each part in MB
        output: Directory the parts are written to
    """
    source_path = Path(source)
    output_path = Path(output)
    max_bytes = int(max_mb * BYTES_PER_MB)
    if max_bytes <= 0:
        logger.error("Chunk size must be greater than zero.")
        sys.exit(1)

    data = _read(source_path)

    if data and len(data) <= max_bytes:
        logger.error(
            "File is already smaller than the selected chunk size. No splitting is required."
        )
        sys.exit(1)

    try:
        result = split_file(data, source_path.name, max_bytes)
    except SplitError as exc:
        logger.error(f"Error: {exc}")
        sys.exit(1)

    for warning in result.warnings:
        logger.warning(f"Warning: {warning}")

    if len(result) <= 1:
        logger.error(
            "This file cannot be split into multiple parts with the selected chunk size. "
            "Try selecting a smaller chunk size."
        )
        sys.exit(1)

    output_path.mkdir(parents=True, exist_ok=True)
    for part in result:
        (output_path / part.name).write_bytes(part.data)
        flag = "  [over limit]" if part.size > max_bytes else ""
        logger.info(f"  {part.name:<50} {format_size(part.size):>10}{flag}")

    logger.info(f"")
    logger.info(
        f"Split {source_path.name} into {len(result)} {result.kind.value} parts -> {output_path}"
    )


def info(source: str) -> None:
    """Show how a file would be split.

    Args:
        source: Path to the file
    """
    source_path = Path(source)
    data = _read(source_path)
    kind = detect_format(source_path.name, data[:SNIFF_BYTES])

    print(f"File: {source_path.name}")
    print(f"  Size: {format_size(len(data))}")
    print(f"  Format: {kind.value}")

    decomposer = get_decomposer(kind)
    if decomposer is not None and data:
        try:
            units = decomposer.decompose(SourceFile(name=source_path.name, data=data)).units
        except MalformedSource as exc:
            print(f"  Structure: unreadable ({exc}), will be split by size")
            kind = FormatKind.GENERIC
        else:
            largest = max(units, key=lambda unit: unit.cost)
            print(f"  Units: {len(units)}")
            print(f"  Largest unit: {largest.label} ({format_size(largest.cost)})")

    warning = format_warning(source_path.name, kind)
    if warning:
        print(f"")
        print(f"Warning: {warning}")


def main() -> None:
    """Main CLI entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="splitpack",
        description="splitpack - split large PDF, ZIP and other files into smaller parts",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show packing decisions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # split command
    split_parser = subparsers.add_parser(
        "split",
        help="Split a file into size-limited parts",
    )
    split_parser.add_argument("source", help="File to split")
    split_parser.add_argument(
        "-s",
        "--max-mb",
        type=float,
        default=settings.default_max_mb,
        help=f"Maximum part size in MB (default: {settings.default_max_mb:g})",
    )
    split_parser.add_argument(
        "-o",
        "--output",
        default=str(settings.output_dir),
        help=f"Output directory (default: {settings.output_dir})",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show the detected format and units of a file",
    )
    info_parser.add_argument("source", help="File to inspect")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(message)s",
    )

    if args.command == "split":
        split(args.source, args.max_mb, args.output)
    elif args.command == "info":
        info(args.source)


if __name__ == "__main__":
    main()
