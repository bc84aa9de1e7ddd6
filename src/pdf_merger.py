"""
PDF Merge Pipelines

Merge several PDFs in order, restructure one PDF onto a grid, or do both in
one run. All functions take SourceFile objects and return a PyPDF2 writer;
nothing is written to disk here.

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

import logging

from PyPDF2 import PdfWriter

from pdf_errors import ValidationError
from pdf_layout import tile_pages
from pdf_loader import load_document

logger = logging.getLogger(__name__)

MIN_MERGE_FILES = 2
MIN_MERGE_RESTRUCTURE_FILES = 1


def scaled_progress(progress, start, span):
    """Map a 0..1 callback onto the range [start, start + span]."""
    if progress is None:
        return None
    return lambda fraction: progress(start + fraction * span)


def iter_documents(sources):
    """Load sources one at a time, in order. The first failure stops iteration."""
    for source in sources:
        logger.info(f"Loading {source.name}")
        yield source, load_document(source.data, source.name)


def collect_pages(sources, progress=None):
    """Concatenate the pages of every source, keeping each file's page order.

    Progress is reported after each file as files done / total files.
    """
    sources = list(sources)
    total = len(sources)
    pages = []
    for done, (source, reader) in enumerate(iter_documents(sources), 1):
        file_pages = list(reader.pages)
        pages.extend(file_pages)
        logger.debug(f"Collected {len(file_pages)} pages from {source.name}")
        if progress:
            progress(done / total)
    return pages


def merge_documents(sources, progress=None):
    """Merge two or more PDFs into one document.

    Raises:
        ValidationError: fewer than two sources
        PdfLoadError / PdfProcessingError: a source could not be read
    """
    sources = list(sources)
    if len(sources) < MIN_MERGE_FILES:
        raise ValidationError("Please select at least two PDF files to merge.")

    writer = PdfWriter()
    total = len(sources)
    for done, (source, reader) in enumerate(iter_documents(sources), 1):
        for page in reader.pages:
            writer.add_page(page)
        logger.debug(f"Copied {len(reader.pages)} pages from {source.name}")
        if progress:
            progress(done / total)

    logger.info(f"Merged {total} files into {len(writer.pages)} pages")
    return writer


def restructure_document(source, grid, progress=None):
    """Tile the pages of a single PDF onto a grid."""
    if source is None:
        raise ValidationError("Please select a PDF file to restructure.")
    grid.validate()

    reader = load_document(source.data, source.name)
    if len(reader.pages) == 0:
        raise ValidationError(f'The file "{source.name}" has no pages.', source.name)
    return tile_pages(reader.pages, grid, progress)


def merge_and_restructure(sources, grid, progress=None):
    """Merge one or more PDFs, then tile the merged pages onto a grid.

    The merge phase reports progress in the first half of the range and the
    tiling phase in the second half. No intermediate file is produced.
    """
    sources = list(sources)
    if len(sources) < MIN_MERGE_RESTRUCTURE_FILES:
        raise ValidationError("Please select at least one PDF file to merge and restructure.")
    grid.validate()

    pages = collect_pages(sources, scaled_progress(progress, 0.0, 0.5))
    if not pages:
        raise ValidationError("The merged PDF has no pages.")

    logger.info(f"Merged {len(sources)} files ({len(pages)} pages), restructuring as {grid}")
    return tile_pages(pages, grid, scaled_progress(progress, 0.5, 0.5))
