"""
Source File List

Ordered list of the PDFs a user picked for an operation. The list order is
the processing order; drag and drop in the GUI maps onto `move()`.

Copyright 2025-2026 Andre Lorbach
Licensed under Apache License 2.0
"""

import logging
import os
import uuid

from pdf_loader import read_pdf_bytes

logger = logging.getLogger(__name__)


class SourceFile:
    """One selected PDF held in memory."""

    def __init__(self, name, data, path=None, file_id=None):
        self.id = file_id or uuid.uuid4().hex
        self.name = name
        self.data = data
        self.path = path

    @classmethod
    def from_path(cls, path):
        return cls(os.path.basename(path), read_pdf_bytes(path), path=str(path))

    @property
    def size(self):
        return len(self.data)

    def __repr__(self):
        return f"SourceFile(name={self.name!r}, size={self.size})"


def is_pdf_path(path):
    return str(path).lower().endswith('.pdf')


class SourceFileList:
    """Explicit ordered sequence of SourceFile objects."""

    def __init__(self, files=None):
        self._files = list(files or [])

    def __len__(self):
        return len(self._files)

    def __iter__(self):
        return iter(self._files)

    def __getitem__(self, index):
        return self._files[index]

    def __bool__(self):
        return bool(self._files)

    @property
    def files(self):
        return list(self._files)

    def names(self):
        return [f.name for f in self._files]

    def add(self, source):
        self._files.append(source)
        return source

    def add_paths(self, paths):
        """Read and append every PDF path; other extensions are skipped.

        Returns:
            List of SourceFile objects that were added
        """
        added = []
        for path in paths:
            if not is_pdf_path(path):
                logger.info(f"Skipping non-PDF file: {path}")
                continue
            added.append(self.add(SourceFile.from_path(path)))
        return added

    def replace(self, source):
        """Single-file mode: drop whatever is held and keep only `source`."""
        replaced = bool(self._files)
        self._files = [source]
        return replaced

    def index_of(self, file_id):
        for index, source in enumerate(self._files):
            if source.id == file_id:
                return index
        raise KeyError(file_id)

    def remove(self, file_id):
        return self._files.pop(self.index_of(file_id))

    def remove_at(self, index):
        return self._files.pop(index)

    def move(self, from_index, to_index):
        """Move one entry: remove it, then insert it at `to_index`."""
        if from_index == to_index:
            return
        count = len(self._files)
        if not (0 <= from_index < count and 0 <= to_index < count):
            raise IndexError(f"Cannot move {from_index} -> {to_index} in list of {count}")
        source = self._files.pop(from_index)
        self._files.insert(to_index, source)

    def move_up(self, index):
        if index > 0:
            self.move(index, index - 1)
            return index - 1
        return index

    def move_down(self, index):
        if index < len(self._files) - 1:
            self.move(index, index + 1)
            return index + 1
        return index

    def clear(self):
        self._files = []
