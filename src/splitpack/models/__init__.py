"""Data models for splitpack."""

from splitpack.models.source import (
    BuiltChunk,
    Chunk,
    FormatKind,
    SourceFile,
    SplitFile,
    SplitResult,
    Unit,
)

__all__ = [
    "SourceFile",
    "FormatKind",
    "Unit",
    "Chunk",
    "BuiltChunk",
    "SplitFile",
    "SplitResult",
]
