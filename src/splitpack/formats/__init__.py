"""Per-format decomposers for splitpack."""

from typing import Optional

from splitpack.formats.archive import ArchiveDecomposer, ArchiveSource
from splitpack.formats.pdf import PdfDecomposer, PdfSource
from splitpack.models import FormatKind
from splitpack.protocols import FormatDecomposer

# Closed set: Generic has no decomposer and is byte-sliced
_DECOMPOSERS: dict[FormatKind, FormatDecomposer] = {
    FormatKind.PDF: PdfDecomposer(),
    FormatKind.ARCHIVE: ArchiveDecomposer(),
}


def get_decomposer(kind: FormatKind) -> Optional[FormatDecomposer]:
    """Return the decomposer for a format, or None for Generic.

    Args:
        kind: The detected format

    Returns:
        A FormatDecomposer instance, or None if the format has no units
    """
    return _DECOMPOSERS.get(kind)


__all__ = [
    "get_decomposer",
    "PdfDecomposer",
    "PdfSource",
    "ArchiveDecomposer",
    "ArchiveSource",
]
