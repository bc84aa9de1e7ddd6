"""
PDF Preview

Renders the first sheet of a restructure run as a thumbnail so the grid and
fill order can be checked before processing the whole document.

Copyright 2025-2026 Andre Lorbach
Licensed under Apache License 2.0
"""

import logging

import fitz  # PyMuPDF
from PIL import Image

from pdf_errors import ValidationError
from pdf_layout import tile_pages
from pdf_loader import load_document
from pdf_output import document_to_bytes

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_SIZE = (320, 420)


def render_preview(pdf_bytes, page_index=0, max_size=DEFAULT_PREVIEW_SIZE, zoom=1.0):
    """Render one page of a PDF to a PIL image fitting inside `max_size`."""
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        if not 0 <= page_index < len(doc):
            raise ValidationError(f"Page {page_index + 1} does not exist (document has {len(doc)} pages).")
        page = doc[page_index]
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        img = Image.frombytes("RGB", [pix.width, pix.height], pix.samples)
    finally:
        doc.close()

    img.thumbnail(max_size, Image.Resampling.LANCZOS)
    return img


def preview_layout(source, grid, max_size=DEFAULT_PREVIEW_SIZE):
    """Tile only the first chunk of `source` and render it.

    Returns:
        (PIL image, total number of sheets the full run would produce)
    """
    reader = load_document(source.data, source.name)
    pages = list(reader.pages)
    if not pages:
        raise ValidationError(f'The file "{source.name}" has no pages.', source.name)

    first_sheet = tile_pages(pages[:grid.pages_per_sheet], grid)
    image = render_preview(document_to_bytes(first_sheet), max_size=max_size)
    sheets = grid.sheet_count(len(pages))
    logger.debug(f"Preview of {source.name}: sheet 1 of {sheets}")
    return image, sheets
