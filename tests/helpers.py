"""Builders for hand-assembled PDFs and zip archives used across tests."""

import io
import random
import zipfile
from typing import Optional

from pypdf import PdfReader


def build_pdf(
    page_sizes: list[int],
    shared_font_bytes: int = 0,
    links_from_first: bool = False,
) -> bytes:
    """Assemble a PDF whose page ``i`` carries ``/Marker i+1`` and a content
    stream padded to ``page_sizes[i]`` bytes.

    With ``shared_font_bytes`` every page references the same font, whose
    embedded font file is that many bytes. With ``links_from_first`` the
    first page is a table of contents: one link annotation per later page,
    alternating ``/Dest`` arrays and ``GoTo`` actions, plus a URI link.
    """
    objects: dict[int, bytes] = {}
    objects[1] = b"<< /Type /Catalog /Pages 2 0 R >>"

    next_number = 3
    font_ref = None
    if shared_font_bytes:
        font_ref = 3
        objects[3] = b"<< /Type /Font /Subtype /TrueType /BaseFont /Shared /FontDescriptor 4 0 R >>"
        objects[4] = b"<< /Type /FontDescriptor /FontName /Shared /FontFile2 5 0 R >>"
        objects[5] = _stream(b"F" * shared_font_bytes)
        next_number = 6

    kids = [next_number + 2 * index for index in range(len(page_sizes))]
    next_number += 2 * len(page_sizes)

    annots = []
    if links_from_first and kids:
        for target_index, target in enumerate(kids[1:], start=1):
            if target_index % 2:
                link = f"/Dest [{target} 0 R /Fit]"
            else:
                link = f"/A << /S /GoTo /D [{target} 0 R /Fit] >>"
            objects[next_number] = (
                f"<< /Type /Annot /Subtype /Link /Rect [0 0 10 10] /P {kids[0]} 0 R {link} >>"
            ).encode()
            annots.append(next_number)
            next_number += 1
        objects[next_number] = (
            b"<< /Type /Annot /Subtype /Link /Rect [0 0 10 10] "
            b"/A << /S /URI /URI (https://example.com/) >> >>"
        )
        annots.append(next_number)
        next_number += 1

    for index, size in enumerate(page_sizes):
        page_number, content_number = kids[index], kids[index] + 1
        resources = (
            f"<< /Font << /F1 {font_ref} 0 R >> >>" if font_ref else "<< >>"
        )
        annots_entry = ""
        if index == 0 and annots:
            annots_entry = "/Annots [" + " ".join(f"{number} 0 R" for number in annots) + "] "
        objects[page_number] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources {resources} /Contents {content_number} 0 R "
            f"{annots_entry}/Marker {index + 1} >>"
        ).encode()
        objects[content_number] = _stream(b"%" + b"x" * max(size - 2, 0) + b"\n")

    kids_list = " ".join(f"{number} 0 R" for number in kids)
    objects[2] = f"<< /Type /Pages /Kids [{kids_list}] /Count {len(kids)} >>".encode()

    out = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    offsets = {}
    for number in range(1, next_number):
        offsets[number] = len(out)
        out += f"{number} 0 obj\n".encode() + objects[number] + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {next_number}\n".encode()
    out += b"0000000000 65535 f \n"
    for number in range(1, next_number):
        out += f"{offsets[number]:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {next_number} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


def _stream(body: bytes) -> bytes:
    return f"<< /Length {len(body)} >>\nstream\n".encode() + body + b"\nendstream"


def pdf_markers(data: bytes) -> list[int]:
    """Page markers of a PDF, in page order."""
    reader = PdfReader(io.BytesIO(data))
    return [int(page["/Marker"]) for page in reader.pages]


def random_bytes(size: int, seed: int = 0) -> bytes:
    return random.Random(seed).randbytes(size)


class _StreamOnly(io.RawIOBase):
    """A write-only, non-seekable sink, which makes zipfile use data descriptors."""

    def __init__(self):
        self.data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self.data += b
        return len(b)


def build_zip(
    entries: list[tuple[str, bytes]],
    compression: int = zipfile.ZIP_STORED,
    comment: bytes = b"",
    streamed: bool = False,
) -> bytes:
    """Write a zip archive holding ``entries`` in order."""
    sink: Optional[_StreamOnly] = _StreamOnly() if streamed else None
    buffer = sink if sink is not None else io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for name, payload in entries:
            zf.writestr(name, payload)
        zf.comment = comment
    return bytes(sink.data) if sink is not None else buffer.getvalue()
