"""Unit tests for transport error classifiers."""

from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_error,
    classify_http_status,
)


@pytest.mark.unit
class TestClassifyHttpStatus:
    @pytest.mark.parametrize(
        "status_code,expected_status,expected_code",
        [
            (429, OperationStatus.TRANSIENT_ERROR, "RATE_LIMITED"),
            (401, OperationStatus.UNAUTHORIZED, "UNAUTHORIZED"),
            (403, OperationStatus.UNAUTHORIZED, "UNAUTHORIZED"),
            (404, OperationStatus.NOT_FOUND, "NOT_FOUND"),
            (500, OperationStatus.TRANSIENT_ERROR, "HTTP_500"),
            (503, OperationStatus.TRANSIENT_ERROR, "HTTP_503"),
            (400, OperationStatus.PERMANENT_ERROR, "HTTP_400"),
            (422, OperationStatus.PERMANENT_ERROR, "HTTP_422"),
        ],
    )
    def test_mapping(self, status_code, expected_status, expected_code):
        result = classify_http_status(status_code, "twilio")

        assert result.status == expected_status
        assert result.error_code == expected_code
        assert "twilio" in result.message

    def test_retry_after_header(self):
        assert classify_http_status(429, "resend", retry_after="12").retry_after == 12

    def test_unparseable_retry_after_defaults(self):
        assert classify_http_status(429, "resend", retry_after="soon").retry_after == 60

    def test_detail_in_message(self):
        result = classify_http_status(400, "twilio", detail="Invalid 'To' Phone Number")

        assert result.message.endswith("Invalid 'To' Phone Number")


@pytest.mark.unit
class TestClassifyHttpError:
    def test_timeout(self):
        result = classify_http_error(requests.Timeout("slow"), provider="resend")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "TIMEOUT"

    def test_http_error_uses_status(self):
        response = MagicMock()
        response.status_code = 401
        response.headers = {}
        error = requests.HTTPError("401 Client Error", response=response)

        result = classify_http_error(error, provider="resend")

        assert result.status == OperationStatus.UNAUTHORIZED

    def test_connection_error(self):
        result = classify_http_error(requests.ConnectionError("refused"), provider="twilio")

        assert result.error_code == "CONNECTION_ERROR"


@pytest.mark.unit
class TestOperationResult:
    def test_only_transient_is_retryable(self):
        assert OperationResult.transient_error("slow").is_retryable
        assert not OperationResult.permanent_error("bad number").is_retryable
        assert not OperationResult.error(OperationStatus.UNAUTHORIZED, "key").is_retryable
        assert not OperationResult.success().is_retryable

    def test_to_dict(self):
        result = OperationResult.transient_error("slow", error_code="TIMEOUT", retry_after=5)

        assert result.to_dict() == {
            "status": "transient_error",
            "message": "slow",
            "data": None,
            "error_code": "TIMEOUT",
            "retry_after": 5,
        }
