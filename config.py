# config.py
"""
Runtime configuration for the Firm Analysis Assistant.

Values come from (in order) the process environment, a local `.env` file and
Streamlit secrets. The Gemini key is read once here and handed to the report
client explicitly; nothing else reads it from the environment.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_TIMEOUT_SECONDS = 120.0
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LOGGING_CONFIGURED = False

# Load local .env regardless of launch directory so the Gemini key is consistently available.
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)


def _read_secret(name: str) -> Optional[str]:
    """Look up a value in Streamlit secrets, if a secrets file exists."""
    try:
        import streamlit as st
        value = st.secrets.get(name)
    except Exception:
        # st.secrets is not always available locally.
        return None
    return str(value) if value else None


def _to_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def load_settings() -> Settings:
    """Build settings from the environment, `.env` and Streamlit secrets."""
    api_key = (
        os.getenv("GEMINI_API_KEY")
        or os.getenv("API_KEY")
        or _read_secret("GEMINI_API_KEY")
    )
    return Settings(
        gemini_api_key=api_key.strip() if api_key else None,
        gemini_model=os.getenv("GEMINI_MODEL") or _read_secret("GEMINI_MODEL") or DEFAULT_MODEL,
        timeout_seconds=_to_float(os.getenv("GEMINI_TIMEOUT_SECONDS"), DEFAULT_TIMEOUT_SECONDS),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure process-wide logging once; Streamlit reruns call this repeatedly."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True
