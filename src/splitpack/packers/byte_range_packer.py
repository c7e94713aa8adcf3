"""Contiguous byte-range packing for sources without structure."""

from splitpack.models import Chunk


class ByteRangePacker:
    """Cut a byte stream into ranges of exactly ``max_bytes``.

    The final range holds the remainder, so a source of ``S`` bytes yields
    ``ceil(S / max_bytes)`` chunks.
    """

    def __init__(self, max_bytes: int):
        if max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        self.max_bytes = max_bytes

    def pack(self, size: int) -> list[Chunk]:
        """Return the byte ranges covering ``[0, size)`` in order."""
        return [
            Chunk(start=start, end=min(start + self.max_bytes, size))
            for start in range(0, size, self.max_bytes)
        ]
