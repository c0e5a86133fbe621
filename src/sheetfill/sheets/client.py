"""Workbook loading and saving."""

import logging
from io import BytesIO
from pathlib import Path
from typing import Union
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from ..errors import TemplateLoadError
from .worksheet import WorksheetAdapter

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class WorkbookClient:
    """Client for reading and writing .xlsx workbooks."""

    def load(self, path: PathLike) -> Workbook:
        """
        Load a workbook from disk.

        Args:
            path: Path to an .xlsx/.xlsm file

        Returns:
            The loaded workbook, with rich text preserved

        Raises:
            TemplateLoadError: If the file is missing or not a workbook
        """
        try:
            workbook = openpyxl.load_workbook(path, rich_text=True)
        except (OSError, BadZipFile, InvalidFileException, KeyError) as e:
            raise TemplateLoadError(str(e)) from e
        logger.info(f"Loaded workbook {path} ({len(workbook.worksheets)} sheet(s))")
        return workbook

    def load_bytes(self, data: Union[bytes, bytearray, memoryview]) -> Workbook:
        """Load a workbook from an in-memory buffer."""
        try:
            workbook = openpyxl.load_workbook(BytesIO(bytes(data)), rich_text=True)
        except (OSError, BadZipFile, InvalidFileException, KeyError) as e:
            raise TemplateLoadError(str(e)) from e
        logger.info(f"Loaded workbook from buffer ({len(workbook.worksheets)} sheet(s))")
        return workbook

    def save(self, workbook: Workbook, path: PathLike) -> None:
        """Write a workbook to disk, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(path)
        logger.info(f"Saved workbook to {path}")

    def to_bytes(self, workbook: Workbook) -> bytes:
        """Serialize a workbook to bytes."""
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    def worksheets(self, workbook: Workbook) -> list[WorksheetAdapter]:
        """Wrap every worksheet of a workbook."""
        return [WorksheetAdapter(worksheet) for worksheet in workbook.worksheets]
