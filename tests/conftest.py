"""
Shared fixtures: report payloads and a fake google-genai client.
"""

import json

import pytest

from data_adapter import FinancialReport


def make_period(label, kind="year", year=None, **values):
    period = {
        "periodLabel": label,
        "type": kind,
        "year": year or label[-4:],
        "revenue": 1000,
        "costOfRevenue": 600,
        "grossProfit": 400,
        "operatingExpenses": 200,
        "operatingIncome": 200,
        "netIncome": 150,
        "totalAssets": 5000,
        "totalEquity": 2000,
    }
    period.update(values)
    return period


def make_payload(periods=None, **overrides):
    payload = {
        "companyName": "Apple Inc.",
        "ticker": "AAPL",
        "currency": "USD",
        "reportingUnit": "Million USD",
        "periods": periods if periods is not None else [make_period("2024")],
        "verticalAnalysis": {
            "summary": "Cost of revenue is **54%** of sales.",
            "keyPoints": ["Gross margin stable", "Opex well controlled"],
        },
        "horizontalAnalysis": {
            "summary": "Revenue grew steadily.",
            "keyPoints": ["Services growth"],
        },
        "executiveSummary": "Apple remains highly profitable.",
        "risks": ["Regulation"],
        "opportunities": ["AI devices"],
        "sources": ["https://www.sec.gov/apple-10k", "https://investor.apple.com/"],
    }
    payload.update(overrides)
    return payload


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    """Stands in for `genai.Client().models`; records every call."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.reply)


class FakeGenaiClient:
    def __init__(self, reply=None, error=None):
        self.models = FakeModels(reply=reply, error=error)


class FakeReportClient:
    """Stands in for engine.ReportClient in controller and app tests."""

    def __init__(self, report=None, error=None):
        self.report = report
        self.error = error
        self.calls = []

    def analyze(self, ticker, start_year, end_year):
        self.calls.append((ticker, start_year, end_year))
        if self.error is not None:
            raise self.error
        return self.report


@pytest.fixture
def period_factory():
    return make_period


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def five_year_payload():
    # Deliberately out of order, with quarters mixed in.
    periods = [
        make_period("2022"),
        make_period("2020"),
        make_period("2024", revenue=1500),
        make_period("Q1 2024", kind="quarter", year="2024"),
        make_period("2021"),
        make_period("2023"),
    ]
    return make_payload(periods=periods)


@pytest.fixture
def sample_report(five_year_payload):
    return FinancialReport.model_validate(five_year_payload)


@pytest.fixture
def fake_genai_factory():
    def _build(payload=None, text=None, error=None):
        reply = text if text is not None or payload is None else json.dumps(payload)
        return FakeGenaiClient(reply=reply, error=error)
    return _build


@pytest.fixture
def fake_report_client_factory():
    return FakeReportClient
