"""
PDF Document Loader

Turns raw bytes into a PyPDF2 reader and classifies load failures into
encrypted, corrupted or generic processing errors.

Copyright 2025-2026 Andre Lorbach

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import io
import logging
from pathlib import Path

from PyPDF2 import PdfReader
from PyPDF2.errors import DependencyError

from pdf_errors import CorruptPdfError, EncryptedPdfError, PdfProcessingError

logger = logging.getLogger(__name__)

ENCRYPTED_MARKERS = ('encrypt', 'decrypt', 'password')
CORRUPT_MARKERS = (
    'invalid pdf structure',
    'expected',
    'offset',
    'eof marker',
    'startxref',
    'xref',
    'malformed',
    'empty file',
    'stream has ended',
    'trailer',
)


def classify_load_error(message):
    """Classify a library error message.

    Returns:
        "encrypted", "corrupt" or None when the message matches neither.
    """
    text = (message or '').lower()
    if any(marker in text for marker in ENCRYPTED_MARKERS):
        return 'encrypted'
    if any(marker in text for marker in CORRUPT_MARKERS):
        return 'corrupt'
    return None


def load_document(data, name):
    """Load a PDF from bytes.

    Args:
        data: Raw file contents
        name: Display name used in error messages

    Returns:
        PdfReader with its page tree already resolved

    Raises:
        EncryptedPdfError, CorruptPdfError or PdfProcessingError
    """
    if not data:
        raise CorruptPdfError(name)

    try:
        reader = PdfReader(io.BytesIO(data), strict=False)
        encrypted = reader.is_encrypted
        if not encrypted:
            # Resolve the page tree now so broken files fail here, not mid-merge
            page_count = len(reader.pages)
    except DependencyError as err:
        # Raised by the security handler when the cipher backend is missing
        logger.debug(f"Load of {name} needs a crypto backend: {err}")
        raise EncryptedPdfError(name) from err
    except Exception as err:
        kind = classify_load_error(str(err))
        logger.debug(f"Load of {name} failed ({kind or 'unclassified'}): {err}")
        if kind == 'encrypted':
            raise EncryptedPdfError(name) from err
        if kind == 'corrupt':
            raise CorruptPdfError(name) from err
        raise PdfProcessingError(name, str(err)) from err

    if encrypted:
        raise EncryptedPdfError(name)

    logger.debug(f"Loaded {name}: {page_count} pages")
    return reader


def read_pdf_bytes(path):
    """Read a PDF file from disk."""
    with open(path, 'rb') as f:
        return f.read()


def page_size(page):
    """Return the (width, height) of a page's MediaBox in points."""
    box = page.mediabox
    return float(box.width), float(box.height)


def page_origin(page):
    """Return the lower-left corner of a page's MediaBox."""
    box = page.mediabox
    return float(box.left), float(box.bottom)


def display_name(path):
    return Path(path).name
