"""
Tests for translating upstream failures into canonical errors.

Covers each classification branch and its precedence.
No HTTP layer required.
"""

import time

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from authserver.shared.errors import Errno, translate
from authserver.shared.errors import taxonomy
from authserver.shared.errors.translate import describe


def _raised(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as caught:
        return caught


class TestPassThrough:
    """Canonical errors and payload-less inputs."""

    def test_canonical_error_returned_unchanged(self) -> None:
        error = taxonomy.account_exists("a@x.com")
        assert translate(error) is error
        assert translate(translate(error)) is error

    @pytest.mark.parametrize("upstream", [None, object(), "boom", 42])
    def test_no_payload_is_unexpected(self, upstream) -> None:
        error = translate(upstream)
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert error.status_code == 500

    def test_plain_exception_keeps_trace_for_logging(self) -> None:
        error = translate(_raised(RuntimeError("db exploded")))
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert "RuntimeError: db exploded" in error.diagnostic_trace
        assert error.message == "Unspecified error"
        assert "db exploded" not in str(error.payload)

    def test_classification_failure_degrades(self) -> None:
        class Hostile:
            @property
            def status_code(self) -> int:
                raise RuntimeError("unreadable")

        error = translate(Hostile())
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert error.status_code == 500


class TestAuthenticationFailures:
    """401 failures are sub-classified by exact upstream wording."""

    @pytest.mark.parametrize("phrase", ["Unknown credentials", "Invalid credentials"])
    def test_credentials(self, phrase) -> None:
        error = translate(HTTPException(status_code=401, detail=phrase))
        assert error.errno == Errno.INVALID_TOKEN
        assert error.message == f"Invalid authentication token: {phrase}"

    def test_stale_timestamp(self) -> None:
        error = translate(HTTPException(status_code=401, detail="Stale timestamp"))
        assert error.errno == Errno.INVALID_TIMESTAMP
        assert isinstance(error.extra["serverTime"], int)
        assert abs(error.extra["serverTime"] - time.time()) <= 2

    def test_invalid_nonce(self) -> None:
        error = translate(HTTPException(status_code=401, detail="Invalid nonce"))
        assert error.errno == Errno.INVALID_NONCE

    @pytest.mark.parametrize(
        "phrase",
        ["Bad mac", "Unknown algorithm", "Missing required payload hash", "Payload is invalid"],
    )
    def test_bad_signature(self, phrase) -> None:
        error = translate(HTTPException(status_code=401, detail=phrase))
        assert error.errno == Errno.INVALID_REQUEST_SIGNATURE
        assert error.status_code == 401
        assert error.message == phrase

    def test_matching_is_case_sensitive(self) -> None:
        error = translate(HTTPException(status_code=401, detail="bad mac"))
        assert error.errno == Errno.INVALID_TOKEN
        assert error.message == "Invalid authentication token: bad mac"

    def test_matching_is_not_substring(self) -> None:
        error = translate(HTTPException(status_code=401, detail="Stale timestamp detected"))
        assert error.errno == Errno.INVALID_TOKEN

    def test_unrecognized_phrase(self) -> None:
        error = translate({"status_code": 401, "message": "Token expired"})
        assert error.errno == Errno.INVALID_TOKEN
        assert error.message == "Invalid authentication token: Token expired"

    def test_status_wins_over_validation_detail(self) -> None:
        error = translate(
            {"status_code": 401, "message": "Bad mac", "validation": {"keys": ["email"]}}
        )
        assert error.errno == Errno.INVALID_REQUEST_SIGNATURE


class TestValidationFailures:
    """Validation failures become missing or invalid parameter errors."""

    def test_required_field_reports_missing_parameter(self) -> None:
        error = translate(
            {
                "status_code": 400,
                "message": "email: Field required",
                "validation": {"source": "body", "keys": ["email", "password"]},
            }
        )
        assert error.errno == Errno.MISSING_PARAMETER
        assert error.extra["param"] == "email"

    def test_other_failure_reports_invalid_parameter(self) -> None:
        detail = {"source": "body", "keys": ["email"]}
        error = translate(
            {"status_code": 400, "message": "Input should be a valid string", "validation": detail}
        )
        assert error.errno == Errno.INVALID_PARAMETER
        assert error.extra["validation"] == detail

    def test_request_validation_error_missing_field(self) -> None:
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("body", "email"), "msg": "Field required", "input": None}]
        )
        error = translate(exc)
        assert error.errno == Errno.MISSING_PARAMETER
        assert error.extra["param"] == "email"
        assert error.message == "Missing parameter in request body: email"

    def test_request_validation_error_bad_value(self) -> None:
        exc = RequestValidationError(
            [
                {
                    "type": "string_type",
                    "loc": ("query", "region"),
                    "msg": "Input should be a valid string",
                    "input": 5,
                }
            ]
        )
        error = translate(exc)
        assert error.errno == Errno.INVALID_PARAMETER
        validation = error.extra["validation"]
        assert validation["source"] == "query"
        assert validation["keys"] == ["region"]
        assert validation["errors"][0]["type"] == "string_type"

    def test_describe_validation_keys(self) -> None:
        exc = RequestValidationError(
            [
                {"type": "missing", "loc": ("body", "device", "name"), "msg": "Field required"},
                {"type": "missing", "loc": ("body",), "msg": "Field required"},
            ]
        )
        payload = describe(exc)
        assert payload.status_code == 400
        assert payload.validation["keys"] == ["device.name", "body"]

    def test_missing_field_named_even_after_other_failures(self) -> None:
        """The missing field is reported, not the first failing one."""
        exc = RequestValidationError(
            [
                {
                    "type": "string_type",
                    "loc": ("body", "password"),
                    "msg": "Input should be a valid string",
                    "input": 5,
                },
                {"type": "missing", "loc": ("body", "email"), "msg": "Field required", "input": {}},
            ]
        )
        error = translate(exc)
        assert error.errno == Errno.MISSING_PARAMETER
        assert error.extra["param"] == "email"
        assert error.message == "Missing parameter in request body: email"

    def test_missing_field_falls_back_to_first_key(self) -> None:
        error = translate(
            {
                "status_code": 400,
                "message": "Field required",
                "validation": {"source": "body", "keys": ["uid"]},
            }
        )
        assert error.extra["param"] == "uid"


class TestPayloadTooLarge:
    """Oversized payload wording at 400 becomes request-too-large."""

    @pytest.mark.parametrize(
        "message",
        [
            "Payload content length greater than maximum allowed: 100",
            "Payload size greater than maximum allowed: 100",
        ],
    )
    def test_known_phrasings(self, message) -> None:
        error = translate(HTTPException(status_code=400, detail=message))
        assert error.errno == Errno.REQUEST_TOO_LARGE
        assert error.status_code == 413

    def test_other_status_falls_through(self) -> None:
        message = "Payload content length greater than maximum allowed: 100"
        error = translate({"status_code": 500, "message": message})
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert error.message == message

    def test_changed_wording_falls_through(self) -> None:
        error = translate(HTTPException(status_code=400, detail="Body exceeds 100 bytes"))
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert error.status_code == 400
        assert error.message == "Body exceeds 100 bytes"


class TestDefaultBranch:
    """Unrecognized failures keep their upstream details."""

    def test_http_exception_copied(self) -> None:
        error = translate(_raised(HTTPException(status_code=404, detail="Not Found")))
        assert error.status_code == 404
        assert error.title == "Not Found"
        assert error.message == "Not Found"
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert "HTTPException" in error.stack

    def test_mapping_fields_copied(self) -> None:
        error = translate(
            {
                "status_code": 409,
                "error": "Conflict",
                "message": "Already linked",
                "errno": 140,
                "info": "https://example.com/errors#140",
                "stack": "Traceback ...",
            }
        )
        assert error.payload == {
            "code": 409,
            "errno": 140,
            "error": "Conflict",
            "message": "Already linked",
            "info": "https://example.com/errors#140",
        }
        assert error.stack == "Traceback ..."

    def test_mapping_detail_on_http_exception(self) -> None:
        error = translate(
            HTTPException(status_code=403, detail={"message": "Forbidden region", "errno": 150})
        )
        assert error.status_code == 403
        assert error.title == "Forbidden"
        assert error.errno == 150
        assert error.message == "Forbidden region"

    def test_empty_mapping_is_unexpected(self) -> None:
        error = translate({})
        assert error.errno == Errno.UNEXPECTED_ERROR
        assert error.status_code == 500

    def test_upstream_headers_kept(self) -> None:
        error = translate(HTTPException(status_code=405, headers={"Allow": "GET"}))
        assert error.status_code == 405
        assert error.message == "Method Not Allowed"
        assert error.headers["Allow"] == "GET"
