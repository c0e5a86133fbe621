"""sheetfill - fill .xlsx templates with structured data."""

from pathlib import Path
from typing import Any, Optional, Union

from .engine import RenderOptions, SheetRenderReport, render_workbook
from .errors import InvalidPathError, SheetfillError, TemplateLoadError
from .sheets import Formula, WorkbookClient

__version__ = "0.1.0"


def render_template(
    template_path: Union[str, Path],
    data: Any,
    output_path: Union[str, Path],
    options: Optional[RenderOptions] = None,
) -> list[SheetRenderReport]:
    """
    Render a template file and write the result.

    Args:
        template_path: Path to the .xlsx template
        data: Root data object (mappings, lists, scalars)
        output_path: Where to write the rendered workbook
        options: Render options; defaults come from settings

    Returns:
        One report per worksheet

    Raises:
        TemplateLoadError: If the template cannot be read
    """
    client = WorkbookClient()
    workbook = client.load(template_path)
    reports = render_workbook(workbook, data, options)
    client.save(workbook, output_path)
    return reports


def render_template_bytes(
    template: Union[bytes, bytearray, memoryview],
    data: Any,
    options: Optional[RenderOptions] = None,
) -> bytes:
    """Render a template held in memory and return the rendered workbook bytes."""
    client = WorkbookClient()
    workbook = client.load_bytes(template)
    render_workbook(workbook, data, options)
    return client.to_bytes(workbook)


__all__ = [
    "render_template",
    "render_template_bytes",
    "render_workbook",
    "RenderOptions",
    "SheetRenderReport",
    "Formula",
    "WorkbookClient",
    "SheetfillError",
    "TemplateLoadError",
    "InvalidPathError",
]
