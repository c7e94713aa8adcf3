"""Packing strategies that group units or bytes into size-bounded chunks."""

from splitpack.packers.byte_range_packer import ByteRangePacker
from splitpack.packers.greedy_packer import GreedyPacker

__all__ = ["GreedyPacker", "ByteRangePacker"]
