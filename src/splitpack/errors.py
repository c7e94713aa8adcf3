"""Exceptions raised by the splitting engine."""


class SplitError(Exception):
    """Base class for splitpack errors."""


class UnreadableSource(SplitError):
    """The source bytes could not be accessed."""


class EmptySource(SplitError):
    """The source holds no bytes."""


class MalformedSource(SplitError):
    """A structured source could not be decomposed into units.

    Never surfaced by ``split_file``: the splitter falls back to byte slicing.
    """


class MalformedDocument(MalformedSource):
    """The PDF cross-reference or page tree could not be parsed."""


class MalformedArchive(MalformedSource):
    """The zip central directory or a local entry record is invalid."""
