"""splitpack - split oversized files into independently usable parts."""

from splitpack.errors import (
    EmptySource,
    MalformedArchive,
    MalformedDocument,
    MalformedSource,
    SplitError,
    UnreadableSource,
)
from splitpack.models import FormatKind, SplitFile, SplitResult
from splitpack.splitter import split_file, split_path
from splitpack.utils.detection import detect_format

__all__ = [
    "split_file",
    "split_path",
    "detect_format",
    "FormatKind",
    "SplitFile",
    "SplitResult",
    "SplitError",
    "UnreadableSource",
    "EmptySource",
    "MalformedSource",
    "MalformedDocument",
    "MalformedArchive",
]
