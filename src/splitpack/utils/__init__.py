"""Utility functions for splitpack."""

from splitpack.utils.detection import SNIFF_BYTES, detect_format, format_warning

__all__ = ["SNIFF_BYTES", "detect_format", "format_warning"]
