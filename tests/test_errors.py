"""
Tests for error handling: structured error responses, HTTP status codes,
the custom exception classes and the entry-point boundary.
"""
from datetime import date

import pytest

from standupsync.core.errors import (
    HighlightsNotFoundError,
    InvalidDateRangeError,
    InvalidMonthError,
    QueryProcessingError,
    StandupSyncException,
    ValidationError,
    entry_point,
)
from standupsync.main import app
from standupsync.routers.deps import get_gateway


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_invalid_month_error(self):
        err = InvalidMonthError("2024-13")
        assert err.http_status == 400
        assert err.code == "INVALID_MONTH"
        assert isinstance(err, ValidationError)
        d = err.to_dict()
        assert d == {
            "success": False,
            "code": "INVALID_MONTH",
            "message": "Invalid month format. Use YYYY-MM",
            "details": {"month": "2024-13"},
        }

    def test_invalid_date_range_error(self):
        err = InvalidDateRangeError("bad range", start_date="2024-02-02", end_date="2024-02-01")
        assert err.http_status == 400
        assert err.details == {"start_date": "2024-02-02", "end_date": "2024-02-01"}

    def test_highlights_not_found(self):
        err = HighlightsNotFoundError()
        assert err.http_status == 404
        assert err.code == "NO_HIGHLIGHTS"

    def test_query_processing_error_carries_cause(self):
        err = QueryProcessingError("Failed to process query", error="db down")
        d = err.to_dict()
        assert err.http_status == 500
        assert d["error"] == "db down"
        assert "details" not in d

    def test_base_defaults(self):
        err = StandupSyncException("boom")
        assert err.http_status == 500
        assert err.code == "INTERNAL_ERROR"
        assert str(err) == "boom"


class TestEntryPoint:
    def test_application_errors_pass_through(self):
        with pytest.raises(InvalidMonthError):
            with entry_point("Failed"):
                raise InvalidMonthError("x")

    def test_other_errors_are_wrapped(self):
        with pytest.raises(QueryProcessingError) as exc:
            with entry_point("Failed to generate weekly summary"):
                raise RuntimeError("connection reset")
        assert exc.value.message == "Failed to generate weekly summary"
        assert exc.value.error == "connection reset"
        assert isinstance(exc.value.__cause__, RuntimeError)


# ---------------------------------------------------------------------------
# Integration: error envelopes over HTTP
# ---------------------------------------------------------------------------

class BrokenGateway:
    """Gateway stand-in whose analyses raise."""

    def analyze_blockers(self, blockers):
        raise RuntimeError("gateway exploded")

    def summarize_standups(self, records):
        raise RuntimeError("gateway exploded")


class TestErrorResponses:
    def test_validation_error_shape(self, client):
        r = client.post("/query", json={"query": ""})
        assert r.status_code == 400
        body = r.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "query"

    def test_invalid_month_shape(self, client):
        r = client.get("/query/month/2024-13")
        body = r.json()
        assert r.status_code == 400
        assert body["details"] == {"month": "2024-13"}

    def test_unexpected_failure_is_500_with_message(self, client, add_standup):
        add_standup(date.today(), yesterday="Work")
        app.dependency_overrides[get_gateway] = lambda: BrokenGateway()
        r = client.get("/query/analyze")
        assert r.status_code == 500
        body = r.json()
        assert body["success"] is False
        assert body["code"] == "QUERY_FAILED"
        assert body["message"] == "Failed to analyze standups"
        assert body["error"] == "gateway exploded"
