"""Tests for format detection."""
import pytest

from helpers import build_pdf, build_zip
from splitpack.models import FormatKind
from splitpack.utils.detection import (
    GENERIC_WARNING,
    OFFICE_WARNING,
    detect_format,
    format_warning,
)


class TestDetectFormat:
    def test_pdf_signature(self):
        assert detect_format("report.pdf", build_pdf([100])) is FormatKind.PDF

    def test_pdf_signature_wins_over_extension(self):
        assert detect_format("report.bin", b"%PDF-1.7\n...") is FormatKind.PDF

    def test_pdf_after_padding(self):
        assert detect_format("scan.pdf", b"\x00\x00\r\n %PDF-1.4\n") is FormatKind.PDF

    def test_signature_after_other_bytes_is_not_a_pdf(self):
        assert detect_format("scan.pdf", b"\x00\x00junk\n%PDF-1.4\n") is FormatKind.GENERIC

    def test_text_mentioning_the_signature(self):
        head = b"Header note: files start with %PDF-1.7 magic\n"
        assert detect_format("readme.txt", head) is FormatKind.GENERIC

    def test_zip_signature(self):
        data = build_zip([("a.txt", b"hello")])
        assert detect_format("bundle.zip", data) is FormatKind.ARCHIVE

    def test_zip_holding_a_stored_pdf_is_still_an_archive(self):
        data = build_zip([("inner.pdf", build_pdf([100]))])
        assert detect_format("bundle.zip", data[:1024]) is FormatKind.ARCHIVE

    def test_zip_signature_without_zip_extension(self):
        data = build_zip([("a.txt", b"hello")])
        assert detect_format("download", data) is FormatKind.ARCHIVE

    @pytest.mark.parametrize("name", ["letter.docx", "budget.XLSX", "deck.pptx"])
    def test_office_containers_are_generic(self, name):
        data = build_zip([("word/document.xml", b"<w/>")])
        assert detect_format(name, data) is FormatKind.GENERIC

    def test_unknown_bytes_are_generic(self):
        assert detect_format("movie.mp4", b"\x00\x00\x00\x18ftypmp42") is FormatKind.GENERIC

    def test_empty_head_is_generic(self):
        assert detect_format("empty.pdf", b"") is FormatKind.GENERIC

    def test_pdf_extension_alone_is_not_enough(self):
        assert detect_format("fake.pdf", b"not a pdf at all") is FormatKind.GENERIC

    def test_detection_is_idempotent(self):
        data = build_pdf([500, 500])
        kinds = {detect_format("a.pdf", data) for _ in range(5)}
        assert kinds == {FormatKind.PDF}


class TestFormatWarning:
    @pytest.mark.parametrize("name", ["a.doc", "a.docx", "a.xls", "a.xlsx"])
    def test_word_excel_warning(self, name):
        assert format_warning(name, FormatKind.GENERIC) == OFFICE_WARNING

    def test_generic_warning(self):
        assert format_warning("video.mkv", FormatKind.GENERIC) == GENERIC_WARNING

    @pytest.mark.parametrize("kind", [FormatKind.PDF, FormatKind.ARCHIVE])
    def test_structured_formats_have_no_warning(self, kind):
        assert format_warning("file.pdf", kind) is None
