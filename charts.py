# charts.py
"""Altair charts for the three report panels."""

import altair as alt
import pandas as pd

REVENUE_COLOR = "#3b82f6"
NET_INCOME_COLOR = "#10b981"
GROSS_PROFIT_COLOR = "#f59e0b"

MARGIN_SERIES = {
    "gross_margin": ("Gross Margin %", "#f59e0b"),
    "operating_margin": ("Operating Margin %", "#3b82f6"),
    "net_margin": ("Net Margin %", "#10b981"),
}
RATIO_SERIES = {
    "roa": ("ROA %", "#8b5cf6"),
    "roe": ("ROE %", "#ec4899"),
}


def _period_axis(order: list) -> alt.X:
    return alt.X(
        "period:N",
        sort=order,
        axis=alt.Axis(title=None, labelAngle=-45, labelOverlap=False),
    )


def _legend() -> alt.Legend:
    return alt.Legend(title=None, orient="bottom")


def revenue_profit_chart(frame: pd.DataFrame, unit: str) -> alt.LayerChart:
    """Grouped revenue / net income bars with a gross profit line on top."""
    order = frame["period"].tolist()
    domain = ["Revenue", "Net Income", "Gross Profit"]
    color_scale = alt.Scale(domain=domain, range=[REVENUE_COLOR, NET_INCOME_COLOR, GROSS_PROFIT_COLOR])

    bar_data = frame.rename(columns={"revenue": "Revenue", "net_income": "Net Income"}).melt(
        id_vars="period",
        value_vars=["Revenue", "Net Income"],
        var_name="metric",
        value_name="value",
    )
    bars = (
        alt.Chart(bar_data)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=_period_axis(order),
            xOffset=alt.XOffset("metric:N", sort=domain[:2]),
            y=alt.Y("value:Q", title=unit),
            color=alt.Color("metric:N", scale=color_scale, legend=_legend()),
            tooltip=[
                alt.Tooltip("period:N", title="Period"),
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("value:Q", title=unit, format=",.2f"),
            ],
        )
    )
    line = (
        alt.Chart(frame[["period", "gross_profit"]])
        .transform_calculate(metric="'Gross Profit'")
        .mark_line(point=True, strokeWidth=2)
        .encode(
            x=_period_axis(order),
            y=alt.Y("gross_profit:Q", title=unit),
            color=alt.Color("metric:N", scale=color_scale, legend=_legend()),
            tooltip=[
                alt.Tooltip("period:N", title="Period"),
                alt.Tooltip("gross_profit:Q", title="Gross Profit", format=",.2f"),
            ],
        )
    )
    return alt.layer(bars, line)


def _percent_lines(frame: pd.DataFrame, series: dict) -> alt.Chart:
    order = frame["period"].tolist()
    labels = {column: label for column, (label, _) in series.items()}
    long_data = frame.rename(columns=labels).melt(
        id_vars="period",
        value_vars=list(labels.values()),
        var_name="metric",
        value_name="value",
    )
    color_scale = alt.Scale(
        domain=list(labels.values()),
        range=[color for _, color in series.values()],
    )
    return (
        alt.Chart(long_data)
        .mark_line(point=True, strokeWidth=2)
        .encode(
            x=_period_axis(order),
            y=alt.Y("value:Q", title="%"),
            color=alt.Color("metric:N", scale=color_scale, legend=_legend()),
            tooltip=[
                alt.Tooltip("period:N", title="Period"),
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("value:Q", title="%", format=",.2f"),
            ],
        )
    )


def margin_chart(frame: pd.DataFrame) -> alt.Chart:
    return _percent_lines(frame, MARGIN_SERIES)


def ratio_chart(frame: pd.DataFrame) -> alt.Chart:
    return _percent_lines(frame, RATIO_SERIES)
