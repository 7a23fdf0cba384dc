"""
Translation of upstream failures into canonical errors.

Framework and library errors (authentication failures, request
validation failures, payload size failures, anything unexpected) are
classified into exactly one AppError so every response shares one
envelope. ``translate`` never raises.

The phrase sets below mirror the exact wording of the request
authentication layer. They are compared by equality, so they must be
revisited whenever that wording changes.
"""

import logging
import re
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError

from authserver.shared.errors import taxonomy
from authserver.shared.errors.app_error import AppError

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401

INVALID_CREDENTIALS_MESSAGES = frozenset({"Unknown credentials", "Invalid credentials"})
STALE_TIMESTAMP_MESSAGE = "Stale timestamp"
INVALID_NONCE_MESSAGE = "Invalid nonce"
BAD_SIGNATURE_MESSAGES = frozenset(
    {
        "Bad mac",
        "Unknown algorithm",
        "Missing required payload hash",
        "Payload is invalid",
    }
)

# pydantic v2 message for a missing field
REQUIRED_MARKER = "Field required"

TOO_LARGE = re.compile(r"^Payload (?:content length|size) greater than maximum allowed")


@dataclass(frozen=True)
class UpstreamPayload:
    """Normalized view of an upstream failure.

    Attributes:
        status_code: HTTP status reported upstream.
        message: Upstream message text.
        error: Upstream reason phrase.
        errno: Upstream errno, when the failure already carries one.
        info: Upstream documentation URL.
        validation: Structured validation failure detail.
        stack: Traceback text of the upstream failure.
        headers: Response headers set upstream.
    """

    status_code: int | None = None
    message: str | None = None
    error: str | None = None
    errno: int | None = None
    info: str | None = None
    validation: Any = None
    stack: str | None = None
    headers: Mapping[str, str] | None = None


def translate(error: Any) -> AppError:
    """Classify any caught failure into a canonical AppError.

    AppError instances are returned unchanged. Anything that cannot be
    classified, including a failure inside classification itself,
    becomes the catch-all unexpected error.

    Args:
        error: An AppError, an exception, a Boom-style payload mapping,
            or any other object.

    Returns:
        The canonical error to send to the client.
    """
    if isinstance(error, AppError):
        return error
    try:
        return _classify(error)
    except Exception:
        logger.exception("Could not classify %s", type(error).__name__)
        return taxonomy.unexpected_error()


def _classify(error: Any) -> AppError:
    payload = describe(error)
    if payload is None:
        unexpected = taxonomy.unexpected_error()
        stack = _format_stack(error)
        if stack:
            unexpected.backtrace(stack)
        return unexpected

    if payload.status_code == HTTP_401:
        return _classify_authentication(payload.message)

    if payload.validation:
        if payload.message and REQUIRED_MARKER in payload.message:
            return taxonomy.missing_request_parameter(_missing_key(payload.validation))
        return taxonomy.invalid_request_parameter(payload.validation)

    if payload.status_code == HTTP_400 and payload.message and TOO_LARGE.match(payload.message):
        return taxonomy.request_body_too_large()

    return AppError(
        status_code=payload.status_code,
        title=payload.error,
        errno=payload.errno,
        message=payload.message,
        info=payload.info,
        stack=payload.stack,
        headers=payload.headers,
    )


def _classify_authentication(message: str | None) -> AppError:
    if message in INVALID_CREDENTIALS_MESSAGES:
        return taxonomy.invalid_token(f"Invalid authentication token: {message}")
    if message == STALE_TIMESTAMP_MESSAGE:
        return taxonomy.invalid_timestamp()
    if message == INVALID_NONCE_MESSAGE:
        return taxonomy.invalid_nonce()
    if message in BAD_SIGNATURE_MESSAGES:
        return taxonomy.invalid_signature(message)
    if not message:
        return taxonomy.invalid_token()
    return taxonomy.invalid_token(f"Invalid authentication token: {message}")


def describe(error: Any) -> UpstreamPayload | None:
    """Extract the structured payload of an upstream failure.

    Returns None when the object carries no recognizable payload.
    """
    if isinstance(error, RequestValidationError):
        return _describe_validation(error)
    if isinstance(error, Mapping):
        return _describe_fields(error, stack=_as_str(error.get("stack")))
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        return _describe_http(error, status_code)
    return None


def _describe_validation(exc: RequestValidationError) -> UpstreamPayload:
    errors = jsonable_encoder(exc.errors())
    source = None
    keys = []
    for err in errors:
        loc = err.get("loc") or ()
        key = _loc_key(loc)
        if key is None:
            continue
        if source is None:
            source = str(loc[0])
        keys.append(key)
    return UpstreamPayload(
        status_code=HTTP_400,
        error=_reason_phrase(HTTP_400),
        message="; ".join(str(err.get("msg", "")) for err in errors),
        validation={"source": source, "keys": keys, "errors": errors},
        stack=_format_stack(exc),
    )


def _describe_http(error: Any, status_code: int) -> UpstreamPayload:
    detail = getattr(error, "detail", None)
    if isinstance(detail, Mapping):
        fields = dict(detail)
    else:
        fields = {"message": detail}
    fields["status_code"] = status_code
    fields.setdefault("error", _reason_phrase(status_code))
    return _describe_fields(
        fields, stack=_format_stack(error), headers=getattr(error, "headers", None)
    )


def _describe_fields(
    fields: Mapping[str, Any],
    stack: str | None,
    headers: Mapping[str, str] | None = None,
) -> UpstreamPayload:
    status_code = fields.get("status_code")
    errno = fields.get("errno")
    return UpstreamPayload(
        status_code=status_code if isinstance(status_code, int) else None,
        message=_as_str(fields.get("message")),
        error=_as_str(fields.get("error")),
        errno=errno if isinstance(errno, int) else None,
        info=_as_str(fields.get("info")),
        validation=fields.get("validation"),
        stack=stack,
        headers=headers if isinstance(headers, Mapping) else None,
    )


def _missing_key(validation: Any) -> str | None:
    """Key of the first missing field, falling back to the first offending key."""
    if not isinstance(validation, Mapping):
        return None
    for err in validation.get("errors") or ():
        if isinstance(err, Mapping) and REQUIRED_MARKER in str(err.get("msg", "")):
            key = _loc_key(err.get("loc") or ())
            if key:
                return key
    keys = validation.get("keys")
    if keys:
        return str(keys[0])
    return None


def _loc_key(loc: Any) -> str | None:
    # ("body", "device", "name") -> "device.name"; ("body",) -> "body"
    parts = [str(part) for part in loc]
    if not parts:
        return None
    return ".".join(parts[1:]) or parts[0]


def _reason_phrase(status_code: int) -> str | None:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return None


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _format_stack(error: Any) -> str | None:
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return None
