# app.py
"""
Firm Analysis Assistant
=======================
Quick overview of a listed firm's financial status in three views:
1. Search (ticker + year range, trending tickers)
2. Loading (while Gemini searches and analyzes)
3. Report (charts, analysis, historical data, sources)
"""

import streamlit as st

import charts
from config import configure_logging, load_settings
from data_adapter import FinancialReport
from engine import MIN_YEAR, ReportClient, current_year
from report_ui_adapter import (available_granularities, chart_periods, format_amount,
                               history_frame, margin_frame, ratio_frame,
                               resolve_granularity, revenue_profit_frame)
from sources import source_links
from view_state import Phase, SearchState, ViewStateController

st.set_page_config(
    page_title="Firm Analysis Assistant",
    page_icon="📊",
    layout="wide",
)

TRENDING_TICKERS = ["AAPL", "GOOGL", "MSFT", "TSLA", "NVDA", "VNM", "AMZN"]
DEFAULT_YEAR_SPAN = 4
NO_CHART_DATA = "No data available for this view."

settings = load_settings()
configure_logging(settings.log_level)
controller = ViewStateController(st.session_state)
this_year = current_year()


# --- Callbacks (run before the script on the next rerun) ---
def _on_analyze():
    controller.submit(
        st.session_state.get("ticker_input", ""),
        int(st.session_state.start_year_input),
        int(st.session_state.end_year_input),
    )


def _on_trending(ticker: str):
    st.session_state.ticker_input = ticker
    controller.submit(
        ticker,
        int(st.session_state.start_year_input),
        int(st.session_state.end_year_input),
    )


def _init_search_inputs(state: SearchState):
    # Widget state is dropped while the report view is shown; restore it from the last search.
    if "ticker_input" not in st.session_state:
        st.session_state.ticker_input = state.query
    if "start_year_input" not in st.session_state:
        st.session_state.start_year_input = state.start_year or this_year - DEFAULT_YEAR_SPAN
    if "end_year_input" not in st.session_state:
        st.session_state.end_year_input = state.end_year or this_year


# --- Views ---
def render_search_view(state: SearchState):
    _init_search_inputs(state)
    busy = state.phase is Phase.LOADING

    st.markdown("# Firm Analysis Assistant")
    st.caption(
        "Provide quick overall information on a listed firm's financial status "
        "with automated analysis and visualizations."
    )
    if not settings.has_api_key:
        st.warning("API key not found. Add `GEMINI_API_KEY=your_key` to `.env` file and restart.")

    col_ticker, col_start, col_end, col_go = st.columns([4, 1, 1, 1], vertical_alignment="bottom")
    with col_ticker:
        st.text_input(
            "Ticker Symbol",
            key="ticker_input",
            placeholder="Enter Ticker Symbol (e.g., AAPL, VNM)",
            disabled=busy,
        )
    with col_start:
        st.number_input("From", min_value=MIN_YEAR, max_value=this_year, step=1, key="start_year_input", disabled=busy)
    with col_end:
        st.number_input("To", min_value=MIN_YEAR, max_value=this_year, step=1, key="end_year_input", disabled=busy)
    with col_go:
        st.button(
            "Analyze",
            type="primary",
            key="analyze_button",
            on_click=_on_analyze,
            disabled=busy,
            use_container_width=True,
        )

    if state.phase is Phase.ERROR and state.error:
        st.error(state.error)

    st.caption("Trending:")
    trend_cols = st.columns(len(TRENDING_TICKERS))
    for col, ticker in zip(trend_cols, TRENDING_TICKERS):
        with col:
            st.button(ticker, key=f"trending_{ticker}", on_click=_on_trending, args=(ticker,), disabled=busy)

    st.markdown("---")
    feat1, feat2, feat3 = st.columns(3)
    with feat1:
        st.markdown("**Search Grounding**")
        st.caption("Acquire data and information from financial statements and real-time news.")
    with feat2:
        st.markdown("**Automated Analysis**")
        st.caption("Performs vertical and horizontal analysis automatically on retrieved financial data.")
    with feat3:
        st.markdown("**Visual Insights**")
        st.caption("Interactive charts and margin trends visualization to spot opportunities instantly.")


def render_loading_view(state: SearchState):
    st.markdown("### Analyzing Financial Statements")
    st.caption(
        f"Gemini is searching for the latest filings for {state.query} ({state.start_year}-{state.end_year}), "
        "performing vertical & horizontal analysis, and generating your report..."
    )


def _bullet_list(items):
    if not items:
        st.caption("None reported.")
        return
    st.markdown("\n".join(f"- {item}" for item in items))


def _render_analysis(title: str, section):
    with st.container(border=True):
        st.markdown(f"#### {title}")
        st.markdown(section.summary or "_No summary provided._")
        st.markdown("**Key Takeaways**")
        _bullet_list(section.key_points)


def _render_chart_panels(report: FinancialReport):
    available = available_granularities(report.periods)
    granularity = resolve_granularity(st.session_state.get("chart_granularity"), available)
    if len(available) > 1:
        st.session_state.chart_granularity = granularity
        granularity = st.radio(
            "View",
            options=available,
            key="chart_granularity",
            format_func=lambda g: g.value.title(),
            horizontal=True,
        )

    periods = chart_periods(report.periods, granularity)
    col_rev, col_margin, col_ratio = st.columns(3)
    with col_rev:
        with st.container(border=True):
            st.markdown("**Revenue & Net Income Trend**")
            if periods:
                st.altair_chart(
                    charts.revenue_profit_chart(revenue_profit_frame(periods), report.reporting_unit),
                    use_container_width=True,
                )
            else:
                st.caption(NO_CHART_DATA)
    with col_margin:
        with st.container(border=True):
            st.markdown("**Margin Analysis (%)**")
            if periods:
                st.altair_chart(charts.margin_chart(margin_frame(periods)), use_container_width=True)
            else:
                st.caption(NO_CHART_DATA)
    with col_ratio:
        with st.container(border=True):
            st.markdown("**Return on Assets & Equity (%)**")
            if periods:
                st.altair_chart(charts.ratio_chart(ratio_frame(periods)), use_container_width=True)
            else:
                st.caption(NO_CHART_DATA)


def render_report_view(report: FinancialReport):
    st.button("← Back to Search", key="back_button", on_click=controller.back_to_search)

    col_title, col_latest = st.columns([3, 1])
    with col_title:
        st.markdown(f"# {report.company_name} `{report.ticker}`")
        st.caption(f"Currency: {report.currency or '-'} • Units: {report.reporting_unit}")
    with col_latest:
        latest = report.latest_period()
        if latest is not None:
            st.metric("Latest Revenue", f"{format_amount(latest.revenue)} {report.reporting_unit}")

    col_summary, col_lists = st.columns([2, 1])
    with col_summary:
        with st.container(border=True):
            st.markdown("#### Executive Summary")
            st.markdown(report.executive_summary)
    with col_lists:
        with st.container(border=True):
            st.markdown("#### Key Opportunities")
            _bullet_list(report.opportunities)
        with st.container(border=True):
            st.markdown("#### Risk Factors")
            _bullet_list(report.risks)

    st.markdown(f"### Financial Visualization (Unit: {report.reporting_unit})")
    _render_chart_panels(report)

    st.markdown("### Detailed Analysis")
    col_vertical, col_horizontal = st.columns(2)
    with col_vertical:
        _render_analysis("Vertical Analysis", report.vertical_analysis)
    with col_horizontal:
        _render_analysis("Horizontal Analysis", report.horizontal_analysis)

    st.markdown(f"### Historical Data (Unit: {report.reporting_unit})")
    st.dataframe(history_frame(report.periods), use_container_width=True, hide_index=True)

    links = source_links(report.sources)
    if links:
        st.markdown("---")
        st.markdown("**Sources & References**")
        st.markdown("  ·  ".join(f"[{label}]({url})" for label, url in links))


# --- Main ---
state = controller.state
if state.phase is Phase.LOADING:
    loading_slot = st.empty()
    with loading_slot.container():
        render_loading_view(state)
        with st.spinner(f"Analyzing {state.query}..."):
            try:
                client = ReportClient(
                    settings.gemini_api_key,
                    settings.gemini_model,
                    timeout_seconds=settings.timeout_seconds,
                )
            except ValueError as exc:
                controller.fail(exc)
            else:
                controller.run_pending(client)
    loading_slot.empty()
    state = controller.state

if state.phase is Phase.SUCCESS and state.report is not None:
    render_report_view(state.report)
else:
    render_search_view(state)
