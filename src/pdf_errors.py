"""
PDF Fusion Errors

Exception types shared by the loader, the layout engine and the pipelines.
The GUI shows `user_message` to the user and logs the rest.

Copyright 2025-2026 Andre Lorbach
Licensed under Apache License 2.0
"""


class PdfFusionError(Exception):
    """Base class for all errors surfaced to the user."""

    def __init__(self, message, filename=None):
        super().__init__(message)
        self.filename = filename

    @property
    def user_message(self):
        return str(self)


class ValidationError(PdfFusionError):
    """Raised before any processing starts (file count, grid, empty document)."""


class PdfLoadError(PdfFusionError):
    """A source file could not be opened."""


class EncryptedPdfError(PdfLoadError):
    def __init__(self, filename):
        super().__init__(f'File "{filename}" is encrypted and cannot be processed.', filename)


class CorruptPdfError(PdfLoadError):
    def __init__(self, filename):
        super().__init__(f'File "{filename}" is not a valid PDF or is corrupted.', filename)


class PdfProcessingError(PdfFusionError):
    """Any other failure while reading a file; the library message is kept verbatim."""

    def __init__(self, filename, detail):
        super().__init__(f'Error processing "{filename}": {detail}', filename)
        self.detail = detail
