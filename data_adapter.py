"""
DataAdapter: Normalize Gemini report JSON into typed, immutable objects
=======================================================================
The model answers with one JSON document. This module owns the shape of that
document on the Python side.

Key responsibilities:
1. Declare the report models (periods, analysis sections, the report itself)
2. Accept the model's camelCase keys while exposing snake_case attributes
3. Strip stray markdown fences before parsing
4. Turn any JSON / shape problem into a single ReportParseError
"""

import json
import logging
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Base class for report acquisition failures raised by this package."""


class ReportParseError(ReportError):
    """The model returned text that is not valid, conformant report JSON."""


class Granularity(str, Enum):
    """Reporting interval of a financial period."""
    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"


class _ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


def _numeric_text(value: Any) -> Any:
    # The model sometimes answers 2023 instead of "2023".
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


class FinancialPeriod(_ReportModel):
    """One reporting interval, monetary values in the report's reporting unit."""

    period_label: str = Field(alias="periodLabel", description="e.g. '2023', 'Q1 2024', 'Jan 2024'")
    granularity: Granularity = Field(alias="type")
    year: str = Field(description="The year this period belongs to, used for grouping")
    revenue: float
    cost_of_revenue: Optional[float] = Field(default=None, alias="costOfRevenue")
    gross_profit: float = Field(alias="grossProfit")
    operating_expenses: Optional[float] = Field(default=None, alias="operatingExpenses")
    operating_income: Optional[float] = Field(default=None, alias="operatingIncome")
    net_income: float = Field(alias="netIncome")
    total_assets: Optional[float] = Field(default=None, alias="totalAssets")
    total_equity: Optional[float] = Field(default=None, alias="totalEquity")

    @field_validator("period_label", "year", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _numeric_text(value)


class AnalysisSection(_ReportModel):
    """Narrative summary (markdown) plus ordered key takeaways."""

    summary: str = ""
    key_points: Tuple[str, ...] = Field(default=(), alias="keyPoints")


class FinancialReport(_ReportModel):
    """Aggregate root returned by one successful search."""

    company_name: str = Field(alias="companyName")
    ticker: str = ""
    currency: str = ""
    reporting_unit: str = Field(alias="reportingUnit")
    periods: Tuple[FinancialPeriod, ...]
    vertical_analysis: AnalysisSection = Field(alias="verticalAnalysis")
    horizontal_analysis: AnalysisSection = Field(alias="horizontalAnalysis")
    executive_summary: str = Field(alias="executiveSummary")
    risks: Tuple[str, ...] = ()
    opportunities: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()

    def latest_period(self) -> Optional[FinancialPeriod]:
        """Last period in the order the model returned them."""
        return self.periods[-1] if self.periods else None


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    return text.strip()


def parse_report(text: str, ticker: Optional[str] = None) -> FinancialReport:
    """
    Parse the model's text body into a FinancialReport.

    `ticker` fills in the report ticker when the model leaves it out.
    Raises ReportParseError for invalid JSON or a document that does not
    match the report shape.
    """
    try:
        payload = json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as exc:
        logger.warning("Report body is not valid JSON: %s", exc)
        raise ReportParseError("Failed to parse financial report data.") from exc

    if not isinstance(payload, dict):
        raise ReportParseError(
            f"Failed to parse financial report data: expected a JSON object, got {type(payload).__name__}."
        )

    if ticker and not payload.get("ticker"):
        payload["ticker"] = ticker

    try:
        return FinancialReport.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Report JSON does not match the expected shape: %d error(s)", exc.error_count())
        raise ReportParseError("Financial report data is incomplete or malformed.") from exc
