"""
Tests for pdf_merger

Test Coverage:
- merge_documents(): order, validation, progress, abort on bad files
- restructure_document(): sheet count, empty document
- merge_and_restructure(): minimum of one file, split progress, order
"""
import fitz  # PyMuPDF
import pytest
from PyPDF2 import PdfWriter

import pdf_merger
from pdf_errors import CorruptPdfError, EncryptedPdfError, ValidationError
from pdf_layout import GridSpec, VERTICAL
from pdf_merger import collect_pages, merge_and_restructure, merge_documents, restructure_document
from pdf_output import document_to_bytes

from conftest import page_texts


def sheet_quadrants(pdf_bytes, width=200, height=300):
    """Word -> (top|bottom, left|right) for each rendered sheet."""
    sheets = []
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for page in doc:
            sheets.append({
                w[4]: ("top" if w[1] < height / 2 else "bottom", "left" if w[0] < width / 2 else "right")
                for w in page.get_text("words")
            })
    return sheets


@pytest.fixture
def three_docs(make_source):
    return [
        make_source("one.pdf", ["d1p1", "d1p2"]),
        make_source("two.pdf", ["d2p1", "d2p2", "d2p3"]),
        make_source("three.pdf", ["d3p1"]),
    ]


@pytest.fixture
def forbid_loading(monkeypatch):
    """Fail the test if anything tries to open a document."""
    def fail(*args, **kwargs):
        raise AssertionError("document was opened")

    monkeypatch.setattr(pdf_merger, "load_document", fail)


class TestMergeDocuments:
    def test_concatenates_in_file_order(self, three_docs):
        writer = merge_documents(three_docs)
        texts = page_texts(document_to_bytes(writer))
        assert texts == ["d1p1", "d1p2", "d2p1", "d2p2", "d2p3", "d3p1"]

    def test_reordered_list_changes_output(self, three_docs):
        writer = merge_documents([three_docs[2], three_docs[0]])
        assert page_texts(document_to_bytes(writer)) == ["d3p1", "d1p1", "d1p2"]

    def test_progress_after_each_file(self, three_docs):
        seen = []
        merge_documents(three_docs, progress=seen.append)
        assert seen == pytest.approx([1 / 3, 2 / 3, 1.0])

    @pytest.mark.parametrize("count", [0, 1])
    def test_requires_two_files(self, three_docs, forbid_loading, count):
        with pytest.raises(ValidationError):
            merge_documents(three_docs[:count])

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_encrypted_file_aborts_anywhere(self, three_docs, encrypted_source, position):
        sources = list(three_docs)
        sources.insert(position, encrypted_source)
        seen = []
        with pytest.raises(EncryptedPdfError) as exc_info:
            merge_documents(sources, progress=seen.append)
        assert exc_info.value.filename == "locked.pdf"
        assert len(seen) == position

    def test_aes_encrypted_file_aborts(self, three_docs, aes_encrypted_source):
        with pytest.raises(EncryptedPdfError) as exc_info:
            merge_documents([three_docs[0], aes_encrypted_source])
        assert exc_info.value.filename == "aes.pdf"

    def test_corrupt_file_named_in_error(self, three_docs, corrupt_source):
        with pytest.raises(CorruptPdfError) as exc_info:
            merge_documents([three_docs[0], corrupt_source])
        assert "broken.pdf" in exc_info.value.user_message


class TestRestructureDocument:
    def test_sheet_count(self, make_source):
        source = make_source("six.pdf", [f"p{i}" for i in range(6)])
        writer = restructure_document(source, GridSpec(2, 2))
        assert len(writer.pages) == 2

    def test_single_page_grid_keeps_page_count(self, make_source):
        source = make_source("three.pdf", ["a", "b", "c"])
        writer = restructure_document(source, GridSpec(1, 1))
        assert page_texts(document_to_bytes(writer)) == ["a", "b", "c"]

    def test_vertical_fill_order(self, make_source):
        source = make_source("four.pdf", ["p0", "p1", "p2", "p3"])
        (sheet,) = sheet_quadrants(document_to_bytes(restructure_document(source, GridSpec(2, 2, VERTICAL))))
        assert sheet == {
            "p0": ("top", "left"),
            "p1": ("bottom", "left"),
            "p2": ("top", "right"),
            "p3": ("bottom", "right"),
        }

    def test_empty_document_rejected(self, empty_source):
        with pytest.raises(ValidationError):
            restructure_document(empty_source, GridSpec(2, 2))

    def test_missing_file_rejected(self):
        with pytest.raises(ValidationError):
            restructure_document(None, GridSpec(2, 2))

    def test_invalid_grid_rejected_before_loading(self, make_source, forbid_loading):
        grid = GridSpec(2, 2)
        grid.rows = 0
        with pytest.raises(ValidationError):
            restructure_document(make_source("a.pdf", ["a"]), grid)

    def test_encrypted_rejected(self, encrypted_source):
        with pytest.raises(EncryptedPdfError):
            restructure_document(encrypted_source, GridSpec(2, 2))


class TestMergeAndRestructure:
    def test_single_file_allowed(self, make_source):
        writer = merge_and_restructure([make_source("a.pdf", ["a1", "a2", "a3"])], GridSpec(1, 2))
        assert len(writer.pages) == 2

    def test_sheet_count_across_files(self, three_docs):
        writer = merge_and_restructure(three_docs, GridSpec(2, 2, VERTICAL))
        assert len(writer.pages) == 2

    def test_vertical_order_across_files(self, three_docs):
        writer = merge_and_restructure(three_docs, GridSpec(2, 2, VERTICAL))
        first, second = sheet_quadrants(document_to_bytes(writer))
        assert first == {
            "d1p1": ("top", "left"),
            "d1p2": ("bottom", "left"),
            "d2p1": ("top", "right"),
            "d2p2": ("bottom", "right"),
        }
        assert second == {"d2p3": ("top", "left"), "d3p1": ("bottom", "left")}

    def test_requires_one_file(self, forbid_loading):
        with pytest.raises(ValidationError):
            merge_and_restructure([], GridSpec(2, 2))

    def test_invalid_grid_rejected_before_loading(self, three_docs, forbid_loading):
        grid = GridSpec(2, 2)
        grid.columns = 0
        with pytest.raises(ValidationError):
            merge_and_restructure(three_docs, grid)

    def test_progress_split_in_halves(self, three_docs):
        seen = []
        merge_and_restructure(three_docs, GridSpec(2, 2), progress=seen.append)
        # 3 files then 2 sheets (4 of 6 pages, 6 of 6 pages)
        assert seen == pytest.approx([1 / 6, 2 / 6, 0.5, 0.5 + 0.5 * 4 / 6, 1.0])

    def test_empty_merge_rejected(self, empty_source):
        with pytest.raises(ValidationError):
            merge_and_restructure([empty_source], GridSpec(2, 2))

    def test_encrypted_aborts(self, three_docs, encrypted_source):
        with pytest.raises(EncryptedPdfError):
            merge_and_restructure(three_docs + [encrypted_source], GridSpec(2, 2))


def test_collect_pages_keeps_order(three_docs):
    writer = PdfWriter()
    for page in collect_pages(three_docs):
        writer.add_page(page)
    assert page_texts(document_to_bytes(writer)) == ["d1p1", "d1p2", "d2p1", "d2p2", "d2p3", "d3p1"]
