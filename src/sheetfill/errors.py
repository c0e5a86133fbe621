"""Exceptions raised by sheetfill."""


class SheetfillError(Exception):
    """Base class for sheetfill errors."""


class TemplateLoadError(SheetfillError):
    """The template could not be read as a workbook."""

    def __init__(self, message: str):
        super().__init__(f"Failed to render template: {message}")


class InvalidPathError(SheetfillError, ValueError):
    """A key path could not be tokenized."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid path: {path}")
