from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from loguru import logger


DEFAULT_EXPORT_NAME = "converted-content.html"


def export_filename(source_name: Optional[str]) -> str:
    """Name the exported file after the upload, with an ``.html`` extension."""
    if not source_name:
        return DEFAULT_EXPORT_NAME
    name = Path(source_name).name
    if not name:
        return DEFAULT_EXPORT_NAME
    return str(Path(name).with_suffix(".html"))


def write_export(html: str, directory: Union[str, Path], source_name: Optional[str]) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(source_name)
    path.write_text(html, encoding="utf-8")
    logger.info("Wrote {} ({} bytes)", path, len(html.encode("utf-8")))
    return path
