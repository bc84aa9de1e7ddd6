"""
PDF Output

Default output names per operation, serialization and saving.

Copyright 2025-2026 Andre Lorbach
Licensed under Apache License 2.0
"""

import io
import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

MERGE = 'merge'
RESTRUCTURE = 'restructure'
MERGE_RESTRUCTURE = 'merge_restructure'

OPERATIONS = (MERGE, RESTRUCTURE, MERGE_RESTRUCTURE)


def output_filename(operation, original_name=None):
    """Return the default file name for an operation's result."""
    if operation == MERGE:
        return 'merged_document.pdf'
    if operation == MERGE_RESTRUCTURE:
        return 'merged_restructured_document.pdf'
    if operation == RESTRUCTURE:
        name = Path(original_name or 'document').name
        if not name.lower().endswith('.pdf'):
            name += '.pdf'
        return f'restructured_{name}'
    raise ValueError(f"Unknown operation: {operation}")


def document_to_bytes(writer):
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def save_document(writer, path):
    """Serialize `writer` and write it to `path`; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = document_to_bytes(writer)
    with open(path, 'wb') as f:
        f.write(data)
    logger.info(f"Saved {path} ({len(data)} bytes)")
    return path


def open_file(filepath):
    """Open a file with the platform's default viewer."""
    try:
        if sys.platform == 'win32':
            os.startfile(filepath)
        elif sys.platform == 'darwin':
            subprocess.Popen(['open', str(filepath)])
        else:
            subprocess.Popen(['xdg-open', str(filepath)])
        return True
    except OSError as e:
        logger.warning(f"Could not open {filepath}: {e}")
        return False
