"""Greedy size-bounded packing of ordered units."""

import logging
from typing import Sequence

from splitpack.models import BuiltChunk, Chunk, Unit
from splitpack.protocols import DecomposedSource

logger = logging.getLogger(__name__)


class GreedyPacker:
    """Group consecutive units into chunks that fit under a byte ceiling.

    Units are taken in source order and never reordered:
    - A unit joins the open chunk while the estimate stays within the ceiling
    - A unit that does not fit closes the chunk and opens the next one
    - A unit too large on its own still gets a one-unit chunk

    Estimates are approximate, so every chunk is built and measured. A chunk
    whose real size is over the ceiling gives up its last unit to the next
    chunk and is rebuilt, until it fits or holds a single unit.
    """

    def __init__(self, max_bytes: int):
        if max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        self.max_bytes = max_bytes

    def plan(self, source: DecomposedSource, start: int = 0) -> list[Unit]:
        """Choose the units of the chunk beginning at unit ``start`` by estimate."""
        estimate = source.new_estimate()
        members: list[Unit] = []
        for unit in source.units[start:]:
            cost = estimate.marginal_cost(unit)
            if members and estimate.total + cost > self.max_bytes:
                break
            estimate.add(unit)
            members.append(unit)
        return members

    def pack(self, source: DecomposedSource) -> list[BuiltChunk]:
        """Pack and build every chunk of ``source``.

        Args:
            source: A decomposed source with at least one unit

        Returns:
            Built chunks in order, together covering every unit exactly once
        """
        units: Sequence[Unit] = source.units
        built: list[BuiltChunk] = []
        position = 0

        while position < len(units):
            members = self.plan(source, position)
            data = source.build(members)

            while len(data) > self.max_bytes and len(members) > 1:
                deferred = members.pop()
                logger.debug(
                    "Chunk %d built to %d bytes, deferring %s",
                    len(built) + 1,
                    len(data),
                    deferred.label,
                )
                data = source.build(members)

            logger.debug(
                "Chunk %d: %s..%s, %d bytes",
                len(built) + 1,
                members[0].label,
                members[-1].label,
                len(data),
            )
            built.append(BuiltChunk(chunk=Chunk(units=tuple(members)), data=data))
            position += len(members)

        return built
