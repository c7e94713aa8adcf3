"""Protocols for format decomposers and the sources they produce."""

from typing import Protocol, Sequence, runtime_checkable

from splitpack.models import FormatKind, SourceFile, Unit
from splitpack.protocols.estimate import ChunkEstimate


@runtime_checkable
class DecomposedSource(Protocol):
    """A source broken into ordered units, able to rebuild any run of them."""

    @property
    def units(self) -> Sequence[Unit]:
        """Units in source order."""
        ...

    def new_estimate(self) -> ChunkEstimate:
        """Start a size estimate for an empty chunk."""
        ...

    def build(self, units: Sequence[Unit]) -> bytes:
        """Serialize a stand-alone container holding exactly ``units``."""
        ...


@runtime_checkable
class FormatDecomposer(Protocol):
    """Turns a source of one format into units.

    Implementations raise a MalformedSource subclass when the structure
    cannot be parsed.
    """

    @property
    def kind(self) -> FormatKind:
        """The format this decomposer handles."""
        ...

    def decompose(self, source: SourceFile) -> DecomposedSource:
        """Parse ``source`` into ordered units."""
        ...
