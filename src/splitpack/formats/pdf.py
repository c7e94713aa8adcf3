"""PDF decomposition, estimation and rebuilding.

Units are pages. A page's closure is every indirect object reachable from
its dictionary, except through ``/Parent`` (each chunk gets a fresh page
tree) and except other pages, which internal links may point at. Links
whose target page lands in another chunk are dropped when the chunk is
built. Object sizes are measured once per document by serializing the
object the way a writer would emit it.
"""

import logging
from io import BytesIO
from typing import Hashable, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    PdfObject,
)

from splitpack.errors import MalformedDocument
from splitpack.models import FormatKind, SourceFile, Unit

logger = logging.getLogger(__name__)

# "12345 0 obj\n" + "\nendobj\n"
OBJ_FRAME_SIZE = 32
# "0000012345 00000 n\r\n"
XREF_ENTRY_SIZE = 20
# "12345 0 R " in the rebuilt /Kids array
KIDS_ENTRY_SIZE = 12
# Header, catalog, page tree root, producer info, trailer, startxref
PDF_BASE_OVERHEAD = 640

CLOSURE_EXCLUDED_KEYS = frozenset({"/Parent"})
# Rebuilt per chunk from the in-chunk links only
ANNOTATION_CLONE_EXCLUDED_KEYS = ("/P", "/Parent", "/Dest", "/A")
ACTION_CLONE_EXCLUDED_KEYS = ("/P", "/Parent", "/Next")

ObjectKey = Hashable


def _serialized_size(obj: PdfObject) -> int:
    """Bytes the object occupies in a rebuilt file, framing included."""
    buffer = BytesIO()
    obj.write_to_stream(buffer)
    return len(buffer.getvalue()) + OBJ_FRAME_SIZE + XREF_ENTRY_SIZE


def _reference_key(value) -> Optional[ObjectKey]:
    """Identity of an indirect object, given as a reference or resolved."""
    if isinstance(value, IndirectObject):
        return (value.idnum, value.generation)
    reference = getattr(value, "indirect_reference", None)
    if reference is not None:
        return (reference.idnum, reference.generation)
    return None


def _is_page(obj) -> bool:
    return isinstance(obj, DictionaryObject) and obj.get("/Type") == "/Page"


def _retarget(destination, targets: dict) -> Optional[ArrayObject]:
    """Point an explicit destination at the chunk's copy of its page.

    Returns None for named destinations and for pages outside the chunk.
    """
    if not isinstance(destination, ArrayObject) or not destination:
        return None
    items = list(destination)
    key = _reference_key(items[0])
    if key not in targets:
        return None
    return ArrayObject([targets[key], *items[1:]])


def _as_reference(obj: PdfObject) -> PdfObject:
    reference = getattr(obj, "indirect_reference", None)
    return reference if reference is not None else obj


class PdfChunkEstimate:
    """Running size of a PDF chunk.

    Keeps the set of objects already paid for, so a font or image shared by
    several pages is billed once per chunk.
    """

    def __init__(self, costs: dict[ObjectKey, int]):
        self._costs = costs
        self._counted: set[ObjectKey] = set()
        self._total = PDF_BASE_OVERHEAD

    @property
    def total(self) -> int:
        return self._total

    @property
    def counted(self) -> frozenset[ObjectKey]:
        return frozenset(self._counted)

    def marginal_cost(self, unit: Unit) -> int:
        new_objects = unit.resources - self._counted
        return KIDS_ENTRY_SIZE + sum(self._costs[key] for key in new_objects)

    def add(self, unit: Unit) -> None:
        self._total += self.marginal_cost(unit)
        self._counted.update(unit.resources)


class PdfSource:
    """A parsed PDF with one unit per page."""

    def __init__(self, reader: PdfReader, units: list[Unit], costs: dict[ObjectKey, int]):
        self._reader = reader
        self._units = units
        self._costs = costs

    @property
    def units(self) -> Sequence[Unit]:
        return self._units

    def new_estimate(self) -> PdfChunkEstimate:
        return PdfChunkEstimate(self._costs)

    def build(self, units: Sequence[Unit]) -> bytes:
        """Write a new document holding exactly these pages, in order.

        The writer copies each page's referenced objects once, renumbers
        them, and emits a fresh page tree, cross-reference table and trailer.
        Annotations are copied after all pages are in place, so link
        destinations can be pointed at the copied pages; links to pages
        outside the chunk are dropped.
        """
        writer = PdfWriter()
        try:
            added = []
            for unit in units:
                page = self._reader.pages[unit.index]
                added.append((page, writer.add_page(page, excluded_keys=("/Annots",))))

            targets = {
                _reference_key(page): copied.indirect_reference for page, copied in added
            }
            for page, copied in added:
                annotations = self._chunk_annotations(page, copied, writer, targets)
                if annotations:
                    copied[NameObject("/Annots")] = ArrayObject(annotations)

            buffer = BytesIO()
            writer.write(buffer)
        except Exception as exc:  # pypdf raises many error types on damaged objects
            raise MalformedDocument(f"Could not rebuild pages: {exc}") from exc
        return buffer.getvalue()

    @staticmethod
    def _chunk_annotations(page, copied, writer: PdfWriter, targets: dict) -> list:
        annots = page.get("/Annots")
        if annots is None:
            return []

        kept = []
        for item in annots.get_object():
            annotation = item.get_object()
            if not isinstance(annotation, DictionaryObject):
                continue

            destination = annotation.get("/Dest")
            new_destination = None
            if destination is not None:
                new_destination = _retarget(destination.get_object(), targets)
                if new_destination is None:
                    continue

            action = annotation.get("/A")
            action = action.get_object() if action is not None else None
            new_action = None
            if isinstance(action, DictionaryObject):
                if action.get("/S") == "/GoTo":
                    goto = action.get("/D")
                    goto = goto.get_object() if goto is not None else None
                    retargeted = _retarget(goto, targets)
                    if retargeted is None:
                        continue
                    new_action = DictionaryObject({
                        NameObject("/S"): NameObject("/GoTo"),
                        NameObject("/D"): retargeted,
                    })
                else:
                    new_action = _as_reference(
                        action.clone(writer, False, ACTION_CLONE_EXCLUDED_KEYS)
                    )

            cloned = annotation.clone(writer, False, ANNOTATION_CLONE_EXCLUDED_KEYS)
            cloned[NameObject("/P")] = copied.indirect_reference
            if new_destination is not None:
                cloned[NameObject("/Dest")] = new_destination
            if new_action is not None:
                cloned[NameObject("/A")] = new_action
            kept.append(_as_reference(cloned))
        return kept


class PdfDecomposer:
    """Decomposer for PDF documents."""

    kind = FormatKind.PDF

    def decompose(self, source: SourceFile) -> PdfSource:
        """Parse the page tree and measure each page's object closure.

        Raises:
            MalformedDocument: If the cross-reference or page tree cannot be
                read, the document has no pages, or it is encrypted
        """
        try:
            reader = PdfReader(BytesIO(source.data))
            if reader.is_encrypted:
                raise MalformedDocument("Encrypted documents cannot be split by page")

            costs: dict[ObjectKey, int] = {}
            units = [
                self._page_unit(index, page, costs)
                for index, page in enumerate(reader.pages)
            ]
        except MalformedDocument:
            raise
        except Exception as exc:  # pypdf raises many error types on damaged input
            raise MalformedDocument(f"Unreadable document structure: {exc}") from exc

        if not units:
            raise MalformedDocument("Document has no pages")

        logger.debug(
            "Decomposed %s into %d pages (%d distinct objects)",
            source.name,
            len(units),
            len(costs),
        )
        return PdfSource(reader, units, costs)

    @staticmethod
    def _page_unit(index: int, page: DictionaryObject, costs: dict[ObjectKey, int]) -> Unit:
        """Collect the page's closure, filling ``costs`` for unseen objects."""
        closure: set[ObjectKey] = set()

        reference = getattr(page, "indirect_reference", None)
        if reference is not None:
            key = (reference.idnum, reference.generation)
            closure.add(key)
            # The flattened page carries inherited attributes, measure it as written
            if key not in costs:
                costs[key] = _serialized_size(page)
        else:
            key = ("page", index)
            closure.add(key)
            costs[key] = _serialized_size(page)

        pending: list = [
            value for name, value in page.items() if name not in CLOSURE_EXCLUDED_KEYS
        ]
        while pending:
            value = pending.pop()
            if isinstance(value, IndirectObject):
                key = (value.idnum, value.generation)
                if key in closure:
                    continue
                target = value.get_object()
                # Link destinations reach other pages, which are units of their own
                if _is_page(target):
                    continue
                closure.add(key)
                if target is None:
                    costs.setdefault(key, OBJ_FRAME_SIZE + XREF_ENTRY_SIZE)
                    continue
                if key not in costs:
                    costs[key] = _serialized_size(target)
                pending.append(target)
            elif isinstance(value, DictionaryObject):
                pending.extend(
                    item for name, item in value.items() if name not in CLOSURE_EXCLUDED_KEYS
                )
            elif isinstance(value, ArrayObject):
                pending.extend(value)

        resources = frozenset(closure)
        return Unit(
            index=index,
            label=f"page {index + 1}",
            cost=KIDS_ENTRY_SIZE + sum(costs[key] for key in resources),
            resources=resources,
        )
