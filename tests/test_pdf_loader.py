"""
Tests for pdf_loader

Test Coverage:
- classify_load_error(): encrypted / corrupt / unclassified messages
- load_document(): valid, encrypted, corrupt, empty input
- Errors name the offending file
"""
import pytest
from PyPDF2.errors import DependencyError

import pdf_loader
from pdf_errors import CorruptPdfError, EncryptedPdfError, PdfLoadError, PdfProcessingError
from pdf_loader import classify_load_error, load_document, page_size

from conftest import build_pdf, encrypt_pdf, encrypt_pdf_aes


@pytest.mark.parametrize("message", [
    "File has not been decrypted",
    "PDF is ENCRYPTED",
    "Wrong password",
])
def test_classifies_encryption_messages(message):
    assert classify_load_error(message) == 'encrypted'


@pytest.mark.parametrize("message", [
    "EOF marker not found",
    "startxref not found",
    "Invalid PDF structure",
    "Expected object number",
    "Could not read malformed PDF file",
    "Stream has ended unexpectedly",
])
def test_classifies_corruption_messages(message):
    assert classify_load_error(message) == 'corrupt'


def test_unknown_message_is_unclassified():
    assert classify_load_error("out of memory") is None
    assert classify_load_error("") is None


def test_loads_valid_document():
    reader = load_document(build_pdf(["A", "B", "C"], size=(300, 400)), "abc.pdf")
    assert len(reader.pages) == 3
    assert page_size(reader.pages[0]) == pytest.approx((300, 400))


def test_encrypted_document_rejected():
    data = encrypt_pdf(build_pdf(["secret page"]))
    with pytest.raises(EncryptedPdfError) as exc_info:
        load_document(data, "locked.pdf")
    assert exc_info.value.filename == "locked.pdf"
    assert '"locked.pdf"' in exc_info.value.user_message
    assert "encrypted" in exc_info.value.user_message


def test_garbage_is_corrupt():
    with pytest.raises(CorruptPdfError) as exc_info:
        load_document(b"this is not a pdf file at all", "junk.pdf")
    assert "junk.pdf" in str(exc_info.value)
    assert isinstance(exc_info.value, PdfLoadError)


def test_empty_bytes_are_corrupt():
    with pytest.raises(CorruptPdfError):
        load_document(b"", "nothing.pdf")


def test_unclassified_failure_keeps_library_message(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(pdf_loader, "PdfReader", explode)
    with pytest.raises(PdfProcessingError) as exc_info:
        load_document(b"%PDF-1.7", "odd.pdf")
    assert exc_info.value.detail == "disk on fire"
    assert "odd.pdf" in exc_info.value.user_message


def test_load_time_encryption_error_is_classified(monkeypatch):
    def locked(*args, **kwargs):
        raise ValueError("File has not been decrypted")

    monkeypatch.setattr(pdf_loader, "PdfReader", locked)
    with pytest.raises(EncryptedPdfError):
        load_document(b"%PDF-1.7", "locked.pdf")


def test_aes_encrypted_document_rejected():
    with pytest.raises(EncryptedPdfError) as exc_info:
        load_document(encrypt_pdf_aes(build_pdf(["secret page"])), "aes.pdf")
    assert exc_info.value.filename == "aes.pdf"


def test_missing_cipher_backend_counts_as_encrypted(monkeypatch):
    def needs_crypto(*args, **kwargs):
        raise DependencyError("PyCryptodome is required for AES algorithm")

    monkeypatch.setattr(pdf_loader, "PdfReader", needs_crypto)
    with pytest.raises(EncryptedPdfError):
        load_document(b"%PDF-1.7", "aes.pdf")
