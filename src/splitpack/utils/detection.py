"""Format detection from signature bytes and file extensions."""

from pathlib import PurePath
from typing import Optional

from splitpack.models import FormatKind

# Number of leading bytes the detector inspects
SNIFF_BYTES = 1024

PDF_MAGIC = b"%PDF-"
PDF_LEADING_PADDING = b"\x00\t\n\r\f "
ZIP_LOCAL_HEADER_MAGIC = b"PK\x03\x04"

# Editable office formats: only raw byte slicing is offered for these
WORD_EXCEL_EXTENSIONS = {".doc", ".docx", ".xls", ".xlsx"}

# Zip-based containers whose entries are not independently openable documents
OFFICE_CONTAINER_EXTENSIONS = {
    ".docx", ".docm", ".dotx", ".xlsx", ".xlsm", ".xltx",
    ".pptx", ".pptm", ".odt", ".ods", ".odp", ".epub",
}

OFFICE_WARNING = (
    "Page-aware splitting is not supported for Word/Excel. The file will be "
    "split by size, which may corrupt complex files. PDF is recommended for "
    "page-based splitting."
)
GENERIC_WARNING = (
    "Unrecognized format: the file will be split into raw byte ranges, which "
    "may not be usable on their own."
)


def _extension(name: str) -> str:
    return PurePath(name).suffix.lower()


def detect_format(name: str, head: bytes) -> FormatKind:
    """Classify a file by its leading bytes.

    Args:
        name: Display name (used only to keep office containers out of
              entry-level splitting)
        head: Leading bytes of the file; ``SNIFF_BYTES`` is enough

    Returns:
        The FormatKind; unrecognized input is Generic, never an error
    """
    head = head[:SNIFF_BYTES]

    # Readers tolerate whitespace and NUL padding ahead of the signature
    if head.lstrip(PDF_LEADING_PADDING).startswith(PDF_MAGIC):
        return FormatKind.PDF

    if head.startswith(ZIP_LOCAL_HEADER_MAGIC):
        if _extension(name) in OFFICE_CONTAINER_EXTENSIONS:
            return FormatKind.GENERIC
        return FormatKind.ARCHIVE

    return FormatKind.GENERIC


def format_warning(name: str, kind: FormatKind) -> Optional[str]:
    """Return the user-facing warning for a file, if any."""
    if kind is not FormatKind.GENERIC:
        return None
    extension = _extension(name)
    if extension in WORD_EXCEL_EXTENSIONS or extension in OFFICE_CONTAINER_EXTENSIONS:
        return OFFICE_WARNING
    return GENERIC_WARNING
