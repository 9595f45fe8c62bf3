"""
Report UI Adapter: Turn a FinancialReport into chart- and table-ready frames
===========================================================================
This adapter:
1. Decides which granularities can be charted (quarters are table-only)
2. Falls back to an available granularity when the selection disappears
3. Orders periods chronologically for charts and the history table
4. Derives margin and return ratios at display time
5. Formats numbers for the table and header (no silent zeros for missing data)
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from data_adapter import FinancialPeriod, Granularity

# Quarter periods stay in the data table but are never charted.
CHART_GRANULARITIES = [Granularity.YEAR, Granularity.MONTH]
GRANULARITY_ORDER = {Granularity.YEAR: 0, Granularity.QUARTER: 1, Granularity.MONTH: 2}
MONTH_LABEL_FORMATS = ["%b %Y", "%B %Y", "%Y-%m", "%m/%Y", "%Y/%m", "%b-%Y", "%m-%Y"]
MISSING = "-"

HISTORY_COLUMNS = [
    "Period",
    "Type",
    "Revenue",
    "Gross Profit",
    "Op. Income",
    "Net Income",
    "Total Assets",
    "Total Equity",
]


def available_granularities(periods: Iterable[FinancialPeriod]) -> List[Granularity]:
    """Chartable granularities present in the data, year before month."""
    present = {p.granularity for p in periods}
    return [g for g in CHART_GRANULARITIES if g in present]


def resolve_granularity(
    selected: Optional[Granularity], available: Sequence[Granularity]
) -> Optional[Granularity]:
    if selected in available:
        return selected
    return available[0] if available else None


def _year_key(period: FinancialPeriod):
    try:
        return (0, int(str(period.year).strip()))
    except ValueError:
        return (1, str(period.year))


def _month_index(label: str) -> int:
    text = str(label).strip()
    for fmt in MONTH_LABEL_FORMATS:
        try:
            return datetime.strptime(text, fmt).month
        except ValueError:
            continue
    return 0


def chronological_key(period: FinancialPeriod):
    return (_year_key(period), _month_index(period.period_label), period.period_label)


def chart_periods(
    periods: Iterable[FinancialPeriod], granularity: Optional[Granularity]
) -> List[FinancialPeriod]:
    """Periods of one granularity, sorted chronologically by label."""
    if granularity is None or granularity is Granularity.QUARTER:
        return []
    return sorted((p for p in periods if p.granularity is granularity), key=chronological_key)


def _pct(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    if numerator is None or not denominator:
        return None
    return numerator / denominator * 100


def _ratio_pct(numerator: float, denominator: Optional[float]) -> float:
    # Missing totals count as zero here, not at storage time.
    if not denominator:
        return 0.0
    return numerator / denominator * 100


def revenue_profit_frame(periods: Sequence[FinancialPeriod]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "period": p.period_label,
                "revenue": p.revenue,
                "net_income": p.net_income,
                "gross_profit": p.gross_profit,
            }
            for p in periods
        ],
        columns=["period", "revenue", "net_income", "gross_profit"],
    )


def margin_frame(periods: Sequence[FinancialPeriod]) -> pd.DataFrame:
    """Gross, operating and net margin (%) per period."""
    return pd.DataFrame(
        [
            {
                "period": p.period_label,
                "gross_margin": _pct(p.gross_profit, p.revenue),
                "operating_margin": _pct(p.operating_income, p.revenue),
                "net_margin": _pct(p.net_income, p.revenue),
            }
            for p in periods
        ],
        columns=["period", "gross_margin", "operating_margin", "net_margin"],
    )


def ratio_frame(periods: Sequence[FinancialPeriod]) -> pd.DataFrame:
    """Return on assets and equity (%) per period."""
    return pd.DataFrame(
        [
            {
                "period": p.period_label,
                "roa": _ratio_pct(p.net_income, p.total_assets),
                "roe": _ratio_pct(p.net_income, p.total_equity),
            }
            for p in periods
        ],
        columns=["period", "roa", "roe"],
    )


def format_amount(value: Optional[float]) -> str:
    if value is None:
        return MISSING
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def history_periods(periods: Sequence[FinancialPeriod]) -> List[FinancialPeriod]:
    """All periods, grouping years ascending, model order kept within a year."""
    return sorted(periods, key=_year_key)


def history_frame(periods: Sequence[FinancialPeriod]) -> pd.DataFrame:
    rows = []
    for p in history_periods(periods):
        rows.append({
            "Period": p.period_label,
            "Type": p.granularity.value,
            "Revenue": format_amount(p.revenue),
            "Gross Profit": format_amount(p.gross_profit),
            "Op. Income": format_amount(p.operating_income),
            "Net Income": format_amount(p.net_income),
            "Total Assets": format_amount(p.total_assets) if p.total_assets else MISSING,
            "Total Equity": format_amount(p.total_equity) if p.total_equity else MISSING,
        })
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)
