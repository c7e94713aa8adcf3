"""Protocol definitions for the per-format components."""

from splitpack.protocols.decomposer import DecomposedSource, FormatDecomposer
from splitpack.protocols.estimate import ChunkEstimate

__all__ = ["FormatDecomposer", "DecomposedSource", "ChunkEstimate"]
