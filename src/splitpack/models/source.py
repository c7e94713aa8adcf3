"""Core data models for sources, units, chunks and split results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Hashable, Iterator, Optional


class FormatKind(str, Enum):
    """Closed set of formats the splitter knows how to handle."""

    PDF = "pdf"
    ARCHIVE = "archive"
    GENERIC = "generic"


@dataclass(frozen=True)
class SourceFile:
    """The caller's file: a display name and its bytes."""

    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Last suffix including the dot, or an empty string."""
        return PurePath(self.name).suffix

    @property
    def base_name(self) -> str:
        """Display name without directories or its last suffix."""
        name = PurePath(self.name).name
        suffix = self.extension
        return name[: len(name) - len(suffix)] if suffix else name


@dataclass(frozen=True)
class Unit:
    """An indivisible structural piece: a PDF page or an archive entry."""

    index: int
    label: str
    cost: int
    resources: frozenset[Hashable] = frozenset()


@dataclass(frozen=True)
class Chunk:
    """One output file's share of the source.

    Structured formats carry a run of consecutive units; Generic chunks
    carry the half-open byte range ``[start, end)`` instead.
    """

    units: Optional[tuple[Unit, ...]] = None
    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.units is not None:
            if not self.units:
                raise ValueError("A chunk must hold at least one unit")
        elif self.end <= self.start:
            raise ValueError("A chunk must cover at least one byte")

    @property
    def first_unit(self) -> Optional[int]:
        return self.units[0].index if self.units else None

    @property
    def last_unit(self) -> Optional[int]:
        return self.units[-1].index if self.units else None


@dataclass(frozen=True)
class BuiltChunk:
    """A chunk together with its serialized container bytes."""

    chunk: Chunk
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class SplitFile:
    """A produced output file."""

    index: int  # 1-based
    name: str
    data: bytes = field(repr=False)
    first_unit: Optional[int] = None
    last_unit: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class SplitResult:
    """Ordered output of one split request."""

    source_name: str
    source_size: int
    max_bytes: int
    kind: FormatKind
    files: list[SplitFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    degraded: bool = False  # structured parse failed, fell back to byte slicing

    @property
    def independently_usable(self) -> bool:
        """False when the outputs are raw byte slices."""
        return self.kind is not FormatKind.GENERIC

    @property
    def oversized(self) -> list[SplitFile]:
        """Files above the ceiling (single units that could not be split)."""
        return [f for f in self.files if f.size > self.max_bytes]

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[SplitFile]:
        return iter(self.files)
