# engine.py
"""
Firm Analysis Engine
====================
Uses Google Gemini with Google Search grounding to fetch statement data and
narrative analysis for one ticker in a single request.

The engine never retries and never caches: one user search is one call.
"""

import logging
import re
from datetime import date
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS
from data_adapter import FinancialReport, ReportError, ReportParseError, parse_report
from prompts import build_generation_config, build_user_message

logger = logging.getLogger(__name__)

MIN_YEAR = 1990
QUOTA_MARKERS = ["resource_exhausted", "quota", "rate limit", "too many requests", "429"]
AUTH_MARKERS = ["api key not valid", "api_key_invalid", "permission_denied", "unauthenticated"]


class EmptyResponseError(ReportError):
    """The model answered without a text body."""


class MissingApiKeyError(ValueError):
    """No Gemini API key was configured."""


def current_year() -> int:
    return date.today().year


def _redact_api_secrets(text: str, known_secret: str = "") -> str:
    if not isinstance(text, str):
        return text
    redacted = re.sub(r"(key=)[^&\s]+", r"\1[REDACTED]", text, flags=re.IGNORECASE)
    secret = (known_secret or "").strip()
    if secret:
        redacted = redacted.replace(secret, "[REDACTED]")
    return redacted


def is_quota_or_rate_limit_error(error_text: str) -> bool:
    text = str(error_text or "").lower()
    return any(marker in text for marker in QUOTA_MARKERS)


def is_auth_error(error_text: str) -> bool:
    text = str(error_text or "").lower()
    return any(marker in text for marker in AUTH_MARKERS)


def validate_search(ticker: str, start_year: int, end_year: int) -> str:
    """Return the normalized ticker or raise ValueError for unusable input."""
    normalized = str(ticker or "").strip().upper()
    if not normalized:
        raise ValueError("Please enter a ticker symbol.")
    latest = current_year()
    for label, year in (("Start year", start_year), ("End year", end_year)):
        if not isinstance(year, int) or not MIN_YEAR <= year <= latest:
            raise ValueError(f"{label} must be between {MIN_YEAR} and {latest}.")
    if start_year > end_year:
        raise ValueError("Start year must not be after end year.")
    return normalized


class ReportClient:
    """Issues the report request and turns the reply into a FinancialReport."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client=None,
    ):
        if client is None:
            if not api_key:
                raise MissingApiKeyError(
                    "API key not found. Add `GEMINI_API_KEY=your_key` to `.env` file and restart."
                )
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self._client = client
        self.model = model

    def analyze(self, ticker: str, start_year: int, end_year: int) -> FinancialReport:
        """
        Fetch and parse the report for `ticker` over [start_year, end_year].

        Raises:
            ValueError: unusable ticker or year range (no request is sent).
            EmptyResponseError: the model returned no text.
            ReportParseError: the text is not valid report JSON.
            google.genai.errors.APIError / httpx errors: transport failures, unchanged.
        """
        symbol = validate_search(ticker, start_year, end_year)
        logger.info("Requesting report for %s (%d-%d) from %s", symbol, start_year, end_year, self.model)

        response = self._client.models.generate_content(
            model=self.model,
            contents=build_user_message(symbol, start_year, end_year),
            config=build_generation_config(start_year, end_year),
        )

        text = response.text
        if not text or not text.strip():
            logger.warning("Gemini returned an empty response for %s", symbol)
            raise EmptyResponseError("No response from Gemini.")

        report = parse_report(text, ticker=symbol)
        logger.info("Parsed report for %s with %d period(s)", symbol, len(report.periods))
        return report


def describe_error(exc: BaseException, known_secret: str = "") -> str:
    """Human-readable message for the search view's error banner."""
    if isinstance(exc, EmptyResponseError):
        return "The analysis service returned an empty response. Please try again."
    if isinstance(exc, ReportParseError):
        return "Failed to parse financial report data. Please try again."
    if isinstance(exc, ValueError):
        return str(exc)

    detail = _redact_api_secrets(str(exc), known_secret)
    code = getattr(exc, "code", None) if isinstance(exc, genai_errors.APIError) else None
    if code == 429 or is_quota_or_rate_limit_error(detail):
        return "The Gemini API quota or rate limit was reached. Please wait a moment and try again."
    if code in (401, 403) or is_auth_error(detail):
        return "The Gemini API rejected the credentials. Check `GEMINI_API_KEY` and restart."
    if isinstance(exc, genai_errors.ServerError):
        return "The Gemini service is temporarily unavailable. Please try again later."
    return f"Analysis failed: {detail}"
