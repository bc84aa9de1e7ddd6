import io
import sys
from pathlib import Path

import fitz  # PyMuPDF
import pytest
from PyPDF2 import PdfReader, PdfWriter

# Add src to sys.path so the tool modules import the same way as in the app
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from source_files import SourceFile  # noqa: E402


def build_pdf(labels, size=(200, 300), sizes=None):
    """Create a PDF with one page per label; each label is drawn near the top-left corner."""
    doc = fitz.open()
    for index, label in enumerate(labels):
        width, height = sizes[index] if sizes else size
        page = doc.new_page(width=width, height=height)
        page.insert_text((10, 30), label, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def encrypt_pdf(data, password="secret"):
    reader = PdfReader(io.BytesIO(data))
    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.encrypt(password)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def encrypt_pdf_aes(data, user_pw="user", owner_pw="owner"):
    """AES-256 encryption through PyMuPDF; PyPDF2 needs a cipher backend to read it."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, user_pw=user_pw, owner_pw=owner_pw)


def empty_pdf():
    buffer = io.BytesIO()
    PdfWriter().write(buffer)
    return buffer.getvalue()


def page_texts(pdf_bytes):
    """Text of every page, stripped."""
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


@pytest.fixture
def make_source():
    """Factory: make_source("a.pdf", ["A1", "A2"]) -> SourceFile."""
    def _make(name, labels, size=(200, 300), sizes=None):
        return SourceFile(name, build_pdf(labels, size=size, sizes=sizes))
    return _make


@pytest.fixture
def encrypted_source():
    return SourceFile("locked.pdf", encrypt_pdf(build_pdf(["L1"])))


@pytest.fixture
def aes_encrypted_source():
    return SourceFile("aes.pdf", encrypt_pdf_aes(build_pdf(["A1"])))


@pytest.fixture
def corrupt_source():
    return SourceFile("broken.pdf", b"this is not a pdf file at all")


@pytest.fixture
def empty_source():
    return SourceFile("empty.pdf", empty_pdf())
