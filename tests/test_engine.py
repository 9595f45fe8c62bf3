"""
Unit tests for the report client and error messages
"""

import pytest
from google.genai import errors as genai_errors

from data_adapter import ReportError, ReportParseError
from engine import (EmptyResponseError, MissingApiKeyError, ReportClient,
                    current_year, describe_error, validate_search)


class TestReportClientAnalyze:
    """One request per search; the reply becomes a FinancialReport."""

    def test_success_returns_report(self, fake_genai_factory, five_year_payload):
        genai_client = fake_genai_factory(payload=five_year_payload)
        client = ReportClient("test-key", model="gemini-test", client=genai_client)

        report = client.analyze("AAPL", 2020, 2024)

        assert report.ticker == "AAPL"
        assert len(report.periods) == len(five_year_payload["periods"])
        assert len(genai_client.models.calls) == 1
        call = genai_client.models.calls[0]
        assert call["model"] == "gemini-test"
        assert "AAPL" in call["contents"]
        assert "2020 to 2024" in call["contents"]
        assert call["config"].response_mime_type == "application/json"
        assert call["config"].tools[0].google_search is not None

    def test_ticker_is_trimmed_and_uppercased(self, fake_genai_factory, payload_factory):
        payload = payload_factory()
        del payload["ticker"]
        genai_client = fake_genai_factory(payload=payload)
        client = ReportClient("test-key", client=genai_client)

        report = client.analyze("  aapl ", 2022, 2024)

        assert report.ticker == "AAPL"
        assert "AAPL" in genai_client.models.calls[0]["contents"]

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_body(self, fake_genai_factory, text):
        client = ReportClient("test-key", client=fake_genai_factory(text=text))
        with pytest.raises(EmptyResponseError):
            client.analyze("AAPL", 2020, 2024)

    def test_non_json_body_is_parse_error(self, fake_genai_factory):
        client = ReportClient("test-key", client=fake_genai_factory(text="Here is the analysis: revenue grew."))
        with pytest.raises(ReportParseError) as excinfo:
            client.analyze("AAPL", 2020, 2024)
        assert not isinstance(excinfo.value, EmptyResponseError)

    def test_empty_and_parse_errors_share_base(self):
        assert issubclass(EmptyResponseError, ReportError)
        assert issubclass(ReportParseError, ReportError)

    def test_transport_error_propagates_unchanged(self, fake_genai_factory):
        failure = ConnectionError("connection reset by peer")
        client = ReportClient("test-key", client=fake_genai_factory(error=failure))
        with pytest.raises(ConnectionError) as excinfo:
            client.analyze("AAPL", 2020, 2024)
        assert excinfo.value is failure

    def test_invalid_range_sends_nothing(self, fake_genai_factory, payload_factory):
        genai_client = fake_genai_factory(payload=payload_factory())
        client = ReportClient("test-key", client=genai_client)
        with pytest.raises(ValueError):
            client.analyze("AAPL", 2024, 2020)
        assert genai_client.models.calls == []

    def test_missing_api_key(self):
        with pytest.raises(MissingApiKeyError):
            ReportClient(None)
        with pytest.raises(ValueError):
            ReportClient("")


class TestValidateSearch:

    def test_valid(self):
        assert validate_search(" msft ", 1990, current_year()) == "MSFT"

    def test_blank_ticker(self):
        with pytest.raises(ValueError, match="ticker"):
            validate_search("   ", 2020, 2024)

    @pytest.mark.parametrize("start, end", [(1989, 2020), (2020, current_year() + 1)])
    def test_years_out_of_bounds(self, start, end):
        with pytest.raises(ValueError, match="between 1990"):
            validate_search("AAPL", start, end)

    def test_start_after_end(self):
        with pytest.raises(ValueError, match="Start year"):
            validate_search("AAPL", 2024, 2023)


class TestDescribeError:
    """Every failure kind maps to one user-facing message."""

    def test_empty_response(self):
        assert "empty response" in describe_error(EmptyResponseError("No response from Gemini."))

    def test_parse_error(self):
        assert "parse" in describe_error(ReportParseError("bad json")).lower()

    def test_value_error_passes_message(self):
        assert describe_error(ValueError("Start year must not be after end year.")) == (
            "Start year must not be after end year."
        )

    def test_quota_markers(self):
        message = describe_error(RuntimeError("429 RESOURCE_EXHAUSTED. Quota exceeded."))
        assert "quota" in message.lower()

    def test_api_error_permission_denied(self):
        exc = genai_errors.ClientError(
            403,
            {"error": {"code": 403, "message": "The caller does not have permission", "status": "PERMISSION_DENIED"}},
        )
        assert "credentials" in describe_error(exc)

    def test_generic_error_redacts_secret(self):
        message = describe_error(RuntimeError("request to ?key=abc123 failed"), known_secret="abc123")
        assert "abc123" not in message
        assert message.startswith("Analysis failed:")
