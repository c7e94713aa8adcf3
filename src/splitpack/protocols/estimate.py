"""Protocol for per-chunk size estimation."""

from typing import Protocol, runtime_checkable

from splitpack.models import Unit


@runtime_checkable
class ChunkEstimate(Protocol):
    """Running size estimate for one chunk under construction.

    A fresh estimate starts at the container's fixed overhead. Estimates
    track what the chunk already pays for, so a resource shared by several
    units is billed once per chunk.
    """

    @property
    def total(self) -> int:
        """Estimated serialized size of the chunk so far, overhead included."""
        ...

    def marginal_cost(self, unit: Unit) -> int:
        """Bytes that adding ``unit`` would add to ``total``."""
        ...

    def add(self, unit: Unit) -> None:
        """Account for ``unit`` as part of this chunk."""
        ...
