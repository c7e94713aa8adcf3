"""Entry point: split one file into size-bounded, independently usable parts."""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from splitpack.assembler import assemble
from splitpack.errors import EmptySource, MalformedSource, UnreadableSource
from splitpack.formats import get_decomposer
from splitpack.models import BuiltChunk, FormatKind, SourceFile, SplitResult
from splitpack.packers import ByteRangePacker, GreedyPacker
from splitpack.utils.detection import SNIFF_BYTES, detect_format, format_warning

logger = logging.getLogger(__name__)

DegradeHook = Callable[[SourceFile, MalformedSource], None]
BytesLike = Union[bytes, bytearray, memoryview]


def _read_source(data: Optional[BytesLike], name: str) -> SourceFile:
    if data is None:
        raise UnreadableSource(f"No content could be read for {name}")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise UnreadableSource(
            f"Cannot read {name}: expected bytes, got {type(data).__name__}"
        )
    source = SourceFile(name=name, data=bytes(data))
    if source.size == 0:
        raise EmptySource(f"{name} is empty")
    return source


def _split_units(source: SourceFile, kind: FormatKind, max_bytes: int) -> list[BuiltChunk]:
    decomposer = get_decomposer(kind)
    decomposed = decomposer.decompose(source)
    return GreedyPacker(max_bytes).pack(decomposed)


def _split_bytes(source: SourceFile, max_bytes: int) -> list[BuiltChunk]:
    return [
        BuiltChunk(chunk=chunk, data=source.data[chunk.start : chunk.end])
        for chunk in ByteRangePacker(max_bytes).pack(source.size)
    ]


def split_file(
    data: Optional[BytesLike],
    name: str,
    max_bytes: int,
    *,
    on_degrade: Optional[DegradeHook] = None,
) -> SplitResult:
    """Split a file's bytes into parts of at most ``max_bytes`` each.

    PDFs are split between pages and zip archives between entries, so every
    part opens on its own. Anything else, including a PDF or archive whose
    structure cannot be read, is cut into raw byte ranges.

    Args:
        data: The file content
        name: Display name, used for detection hints and output names
        max_bytes: Size ceiling per part
        on_degrade: Called with the source and the parse error when a
                    structured file falls back to byte slicing

    Returns:
        The produced parts in order. A part holding a single page or entry
        that is larger than ``max_bytes`` on its own is listed in
        ``SplitResult.oversized``.

    Raises:
        UnreadableSource: If ``data`` is missing or not bytes
        EmptySource: If ``data`` is empty
        ValueError: If ``max_bytes`` is not positive
    """
    if max_bytes <= 0:
        raise ValueError("max_bytes must be positive")

    source = _read_source(data, name)
    kind = detect_format(source.name, source.data[:SNIFF_BYTES])
    degraded = False
    warnings: list[str] = []
    built: Optional[list[BuiltChunk]] = None

    if kind is not FormatKind.GENERIC:
        try:
            built = _split_units(source, kind, max_bytes)
        except MalformedSource as exc:
            logger.warning("Falling back to byte slicing for %s: %s", source.name, exc)
            if on_degrade is not None:
                on_degrade(source, exc)
            warnings.append(
                f"The {kind.value} structure could not be read ({exc}); "
                "the file was split by size instead."
            )
            kind = FormatKind.GENERIC
            degraded = True

    if built is None:
        built = _split_bytes(source, max_bytes)

    warning = format_warning(source.name, kind)
    if warning:
        warnings.append(warning)

    result = assemble(source, kind, built, max_bytes, warnings, degraded)

    for part in result.oversized:
        logger.warning(
            "%s is %d bytes, over the %d byte limit: it holds a single unit that cannot be split",
            part.name,
            part.size,
            max_bytes,
        )
    logger.info(
        "Split %s (%d bytes, %s) into %d parts",
        source.name,
        source.size,
        kind.value,
        len(result),
    )
    return result


def split_path(path: Union[Path, str], max_bytes: int, **kwargs) -> SplitResult:
    """Read a file from disk and split it.

    Raises:
        UnreadableSource: If the file cannot be read
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise UnreadableSource(f"Cannot read {path}: {exc}") from exc
    return split_file(data, path.name, max_bytes, **kwargs)
