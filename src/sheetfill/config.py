"""Configuration management for sheetfill."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

ERROR_PREFIX = "#ERROR:"


def _env_flag(name: str, default: str = "false") -> bool:
    """Read a boolean flag from the environment."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Application settings."""

    # Convert numeric strings to numbers when rendering {{value}} cells.
    # Off by default: "00501" would silently become 501.
    auto_parse_numbers: bool = _env_flag("SHEETFILL_AUTO_PARSE_NUMBERS")

    # Logging level used by the CLI
    log_level: str = os.getenv("SHEETFILL_LOG_LEVEL", "INFO").upper()

    # Columns scanned for merge spans when a template row reports no cells
    merge_scan_columns: int = int(os.getenv("SHEETFILL_MERGE_SCAN_COLUMNS", "20"))

    # Prefix of in-cell error markers
    error_prefix: str = ERROR_PREFIX


settings = Settings()
