from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_STYLESHEET = "styling-test-page-fixed.css"
DEFAULT_EDITOR_STYLESHEET = "/css/styling-test-page-fixed.css"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment (and a local .env file)."""

    google_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    stylesheet: str = DEFAULT_STYLESHEET
    editor_stylesheet: str = DEFAULT_EDITOR_STYLESHEET
    max_upload_mb: int = 10
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            model=os.getenv("DOCX_TEMPLATER_MODEL", DEFAULT_MODEL),
            stylesheet=os.getenv("DOCX_TEMPLATER_STYLESHEET", DEFAULT_STYLESHEET),
            editor_stylesheet=os.getenv(
                "DOCX_TEMPLATER_EDITOR_STYLESHEET", DEFAULT_EDITOR_STYLESHEET
            ),
            max_upload_mb=_int_env("DOCX_TEMPLATER_MAX_UPLOAD_MB", 10),
            log_level=os.getenv("DOCX_TEMPLATER_LOG_LEVEL", "INFO").upper(),
        )
