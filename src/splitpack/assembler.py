"""Naming and indexing of produced chunks."""

from typing import Sequence

from splitpack.models import BuiltChunk, FormatKind, SourceFile, SplitFile, SplitResult

MIN_INDEX_WIDTH = 3


def chunk_name(source: SourceFile, index: int, count: int = 1) -> str:
    """Derive an output name like ``report_001.pdf``.

    The index is zero-padded to three digits, or wider when there are more
    chunks than three digits can number, so names sort in chunk order.
    """
    width = max(MIN_INDEX_WIDTH, len(str(count)))
    base = source.base_name or "file"
    return f"{base}_{index:0{width}d}{source.extension}"


def assemble(
    source: SourceFile,
    kind: FormatKind,
    built: Sequence[BuiltChunk],
    max_bytes: int,
    warnings: Sequence[str] = (),
    degraded: bool = False,
) -> SplitResult:
    """Collect built chunks into an ordered SplitResult.

    Raises:
        ValueError: If there are no chunks or a chunk has no bytes
    """
    if not built:
        raise ValueError(f"No chunks were produced for {source.name}")

    files = []
    for index, item in enumerate(built, start=1):
        if not item.data:
            raise ValueError(f"Chunk {index} of {source.name} is empty")
        files.append(
            SplitFile(
                index=index,
                name=chunk_name(source, index, len(built)),
                data=item.data,
                first_unit=item.chunk.first_unit,
                last_unit=item.chunk.last_unit,
            )
        )

    return SplitResult(
        source_name=source.name,
        source_size=source.size,
        max_bytes=max_bytes,
        kind=kind,
        files=files,
        warnings=list(warnings),
        degraded=degraded,
    )
