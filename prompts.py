# prompts.py
"""
Prompt and response schema for the financial report request.

Everything here is pure string / schema construction so it can be checked
without touching the network.
"""

from google.genai import types

REPORT_REQUIRED_FIELDS = [
    "companyName",
    "periods",
    "reportingUnit",
    "verticalAnalysis",
    "horizontalAnalysis",
    "executiveSummary",
]
PERIOD_REQUIRED_FIELDS = ["periodLabel", "type", "year", "revenue", "grossProfit", "netIncome"]
PERIOD_NUMERIC_FIELDS = [
    "revenue",
    "costOfRevenue",
    "grossProfit",
    "operatingExpenses",
    "operatingIncome",
    "netIncome",
    "totalAssets",
    "totalEquity",
]
GRANULARITY_VALUES = ["year", "quarter", "month"]


def build_system_instruction(start_year: int, end_year: int) -> str:
    """Analyst role, data hierarchy and output rules for the requested span."""
    num_years = end_year - start_year + 1
    return f"""
You are an expert financial analyst ("Firm Analysis Assistant").
Your task is to perform a comprehensive financial analysis of the company provided by the user.

1.  **Search & Retrieval**: Use the Google Search tool to find the most recent financial statements.
    *   **Data Hierarchy**: Try to find data at three levels:
        *   **Annual**: From {start_year} to {end_year} ({num_years} years).
        *   **Quarterly**: Last 8-12 quarters.
        *   **Monthly**: *Only if available* (e.g., monthly revenue reports common in some Asian markets).
    *   **Metrics**: Revenue, Cost of Revenue, Operating Expenses, Net Income, Total Assets, Total Equity.
    *   **Units**: Identify the specific reporting unit (e.g., "Billion VND", "Million USD", "Billion JPY").

2.  **Analysis**:
    *   **Vertical Analysis**: Analyze the latest period's expenses as a percentage of revenue.
    *   **Horizontal Analysis**: Compare the growth/decline of key metrics over the retrieved periods.

3.  **Output**: Return the data in a strict JSON format matching the schema provided.

The response MUST be valid JSON.
Ensure specific numbers are found. If exact numbers are not available, estimate based on the search results but prioritize accuracy.
**CRITICAL**: You MUST classify each period as 'year', 'quarter', or 'month' in the 'type' field and provide the 'year' field (e.g., "{end_year}") for grouping.
Include a list of source URLs in the 'sources' field.

Structure the JSON as follows:
{{
  "companyName": "Full Company Name",
  "ticker": "TICKER",
  "currency": "VND",
  "reportingUnit": "Billion VND",
  "periods": [
    {{
      "periodLabel": "{end_year}",
      "type": "year",
      "year": "{end_year}",
      "revenue": 1000,
      "costOfRevenue": 600,
      "grossProfit": 400,
      "operatingExpenses": 200,
      "operatingIncome": 200,
      "netIncome": 150,
      "totalAssets": 5000,
      "totalEquity": 2000
    }},
    {{
      "periodLabel": "Q1 {end_year}",
      "type": "quarter",
      "year": "{end_year}",
      ...
    }}
  ],
  ... analysis fields ...
}}
""".strip()


def build_user_message(ticker: str, start_year: int, end_year: int) -> str:
    return (
        f"Analyze the financial performance of {ticker} for the period {start_year} to {end_year}, "
        "with annual, quarterly, and monthly breakdown if possible."
    )


def _string(description: str = None) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


def _string_list() -> types.Schema:
    return types.Schema(type=types.Type.ARRAY, items=_string())


def _analysis_section() -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "summary": _string(),
            "keyPoints": _string_list(),
        },
    )


def _period() -> types.Schema:
    properties = {
        "periodLabel": _string(),
        "type": types.Schema(type=types.Type.STRING, enum=GRANULARITY_VALUES),
        "year": _string("The year this period belongs to (e.g. '2023')"),
    }
    for field_name in PERIOD_NUMERIC_FIELDS:
        properties[field_name] = types.Schema(type=types.Type.NUMBER)
    return types.Schema(
        type=types.Type.OBJECT,
        properties=properties,
        required=PERIOD_REQUIRED_FIELDS,
    )


def build_response_schema() -> types.Schema:
    """Strict JSON schema covering every FinancialReport field."""
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "companyName": _string(),
            "ticker": _string(),
            "currency": _string(),
            "reportingUnit": _string("The unit of the numbers, e.g., 'Billion VND' or 'Million USD'"),
            "periods": types.Schema(type=types.Type.ARRAY, items=_period()),
            "verticalAnalysis": _analysis_section(),
            "horizontalAnalysis": _analysis_section(),
            "executiveSummary": _string(),
            "risks": _string_list(),
            "opportunities": _string_list(),
            "sources": _string_list(),
        },
        required=REPORT_REQUIRED_FIELDS,
    )


def build_generation_config(start_year: int, end_year: int) -> types.GenerateContentConfig:
    """Request config: instruction, search grounding and the JSON schema."""
    return types.GenerateContentConfig(
        system_instruction=build_system_instruction(start_year, end_year),
        tools=[types.Tool(google_search=types.GoogleSearch())],
        response_mime_type="application/json",
        response_schema=build_response_schema(),
    )
