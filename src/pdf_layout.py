"""
PDF Tiling Layout

Places consecutive source pages onto denser sheets arranged in a
rows x columns grid ("N-up"). The placement arithmetic is pure and works on
plain (width, height) tuples; `tile_pages()` applies it to PyPDF2 pages.

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
import math

from PyPDF2 import PageObject, PdfWriter, Transformation
from PyPDF2.generic import RectangleObject

from pdf_errors import ValidationError
from pdf_loader import page_origin, page_size

logger = logging.getLogger(__name__)

HORIZONTAL = 'horizontal'
VERTICAL = 'vertical'
ORIENTATIONS = (HORIZONTAL, VERTICAL)


class GridSpec:
    """Grid shape of one output sheet and the order it is filled in.

    horizontal: left to right within a row, top row first.
    vertical: top to bottom within a column, left column first.
    """

    def __init__(self, rows, columns, orientation=HORIZONTAL):
        self.rows = rows
        self.columns = columns
        self.orientation = orientation
        self.validate()

    def validate(self):
        for label, value in (('rows', self.rows), ('columns', self.columns)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Number of {label} must be a whole number, got {value!r}.")
        if self.rows < 1 or self.columns < 1 or self.rows * self.columns < 1:
            raise ValidationError("Number of rows and columns must be at least 1.")
        if self.orientation not in ORIENTATIONS:
            raise ValidationError(
                f"Unknown orientation {self.orientation!r}; expected one of {', '.join(ORIENTATIONS)}."
            )

    @property
    def pages_per_sheet(self):
        return self.rows * self.columns

    def sheet_count(self, page_count):
        return math.ceil(page_count / self.pages_per_sheet)

    def __eq__(self, other):
        if not isinstance(other, GridSpec):
            return NotImplemented
        return (self.rows, self.columns, self.orientation) == (other.rows, other.columns, other.orientation)

    def __repr__(self):
        return f"GridSpec({self.rows}x{self.columns}, {self.orientation})"


class TilePlacement:
    """Where one source page lands on its sheet (bottom-left origin, points)."""

    def __init__(self, index, x, y, width, height, scale):
        self.index = index
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.scale = scale

    def __repr__(self):
        return (f"TilePlacement(index={self.index}, x={self.x:.2f}, y={self.y:.2f}, "
                f"width={self.width:.2f}, height={self.height:.2f})")


class SheetLayout:
    """Reference size of one output sheet plus the placements drawn on it."""

    def __init__(self, width, height, placements):
        self.width = width
        self.height = height
        self.placements = placements

    def __len__(self):
        return len(self.placements)


def chunk_pages(items, per_sheet):
    """Split a sequence into consecutive chunks of `per_sheet` (last may be shorter)."""
    if per_sheet < 1:
        raise ValidationError("Number of rows and columns must be at least 1.")
    items = list(items)
    return [items[i:i + per_sheet] for i in range(0, len(items), per_sheet)]


def place_tile(index, page_width, page_height, ref_width, ref_height, grid):
    """Compute the placement of the `index`-th page of a chunk."""
    if page_width <= 0 or page_height <= 0:
        raise ValidationError(f"Page {index + 1} of the sheet has no usable size ({page_width}x{page_height}).")
    tile_width = ref_width / grid.columns
    tile_height = ref_height / grid.rows

    # Row/column indexing does not depend on orientation
    row_index = index // grid.columns
    col_index = index % grid.columns

    if grid.orientation == HORIZONTAL:
        x = col_index * tile_width
        y = ref_height - (row_index + 1) * tile_height
    else:
        # Vertical swaps the roles of row and column
        x = row_index * tile_width
        y = ref_height - (col_index + 1) * tile_height

    scale = min(tile_width / page_width, tile_height / page_height)
    scaled_width = page_width * scale
    scaled_height = page_height * scale
    x += (tile_width - scaled_width) / 2
    y += (tile_height - scaled_height) / 2

    return TilePlacement(index, x, y, scaled_width, scaled_height, scale)


def layout_sheet(sizes, grid):
    """Lay out one chunk of (width, height) sizes; the first page sets the sheet size."""
    ref_width, ref_height = sizes[0]
    placements = [
        place_tile(j, width, height, ref_width, ref_height, grid)
        for j, (width, height) in enumerate(sizes)
    ]
    return SheetLayout(ref_width, ref_height, placements)


def plan_layout(sizes, grid):
    """Lay out every sheet for a sequence of page sizes."""
    grid.validate()
    sizes = list(sizes)
    if not sizes:
        raise ValidationError("The document has no pages.")
    return [layout_sheet(chunk, grid) for chunk in chunk_pages(sizes, grid.pages_per_sheet)]


def draw_page(sheet, page, placement):
    """Draw `page` onto `sheet` at `placement`, scaled uniformly.

    The source page is left unmodified. Its content is routed through a blank
    tile whose MediaBox is the placement rectangle, so `merge_page` clips to
    the tile on the sheet.
    """
    left, bottom = page_origin(page)
    width, height = page_size(page)
    scale = placement.scale
    transform = (Transformation()
                 .scale(scale, scale)
                 .translate(placement.x - left * scale, placement.y - bottom * scale))

    tile = PageObject.create_blank_page(width=width, height=height)
    tile.merge_page(page)
    tile.add_transformation(transform)
    tile.mediabox = RectangleObject([placement.x, placement.y,
                                     placement.x + placement.width, placement.y + placement.height])
    sheet.merge_page(tile)


def tile_pages(pages, grid, progress=None):
    """Tile PyPDF2 pages onto new sheets.

    Args:
        pages: Ordered sequence of PageObject
        grid: GridSpec
        progress: Optional callable receiving the fraction of pages placed

    Returns:
        PdfWriter with ceil(len(pages) / grid.pages_per_sheet) pages
    """
    grid.validate()
    pages = list(pages)
    total = len(pages)
    if total == 0:
        raise ValidationError("The document has no pages.")

    writer = PdfWriter()
    placed = 0
    for sheet_number, chunk in enumerate(chunk_pages(pages, grid.pages_per_sheet), 1):
        layout = layout_sheet([page_size(page) for page in chunk], grid)
        sheet = PageObject.create_blank_page(width=layout.width, height=layout.height)
        for page, placement in zip(chunk, layout.placements):
            draw_page(sheet, page, placement)
        writer.add_page(sheet)

        placed += len(chunk)
        logger.debug(f"Sheet {sheet_number}: placed {len(chunk)} pages ({placed}/{total})")
        if progress:
            progress(placed / total)

    logger.info(f"Tiled {total} pages onto {len(writer.pages)} sheets ({grid})")
    return writer
