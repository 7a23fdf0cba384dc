"""
Constructors for every canonical error condition.

One function per condition. Each returns a fully populated AppError and
never raises. Numeric parameters left out by the caller fall back to
fixed defaults. The only side effect is the clock read in
``invalid_timestamp``.
"""

import time
from collections.abc import Mapping
from typing import Any

from authserver.shared.errors.app_error import AppError
from authserver.shared.errors.errno import Errno
from authserver.shared.errors.schemas import ENVELOPE_FIELDS

DEFAULT_RETRY_AFTER = 30

BAD_REQUEST = "Bad Request"
UNAUTHORIZED = "Unauthorized"

# Clients branch on the presence of these keys, not on their values.
UNBLOCK_VERIFICATION = {
    "verificationMethod": "email-captcha",
    "verificationReason": "login",
}


def _safe_extra(details: Mapping[str, Any] | None) -> dict[str, Any]:
    """Caller-supplied details without keys reserved by the envelope."""
    return {key: value for key, value in (details or {}).items() if key not in ENVELOPE_FIELDS}


def db_incorrect_patch_level(level: Any, level_required: Any) -> AppError:
    return AppError(
        status_code=400,
        title="Server Startup",
        errno=Errno.SERVER_CONFIG_ERROR,
        message="Incorrect Database Patch Level",
        extra={"level": level, "levelRequired": level_required},
    )


def account_exists(email: str | None) -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.ACCOUNT_EXISTS,
        message="Account already exists",
        extra={"email": email},
    )


def unknown_account(email: str | None) -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.ACCOUNT_UNKNOWN,
        message="Unknown account",
        extra={"email": email},
    )


def incorrect_password(db_email: str, request_email: str) -> AppError:
    """Report a failed password check.

    When the stored email and the submitted one differ only by letter
    case the caller most likely typed the right account in the wrong
    case, so ``INCORRECT_EMAIL_CASE`` is reported instead.

    Args:
        db_email: Email on record for the account.
        request_email: Email supplied with the request.
    """
    if db_email != request_email and db_email.lower() == request_email.lower():
        return AppError(
            status_code=400,
            title=BAD_REQUEST,
            errno=Errno.INCORRECT_EMAIL_CASE,
            message="Incorrect email case",
            extra={"email": db_email},
        )
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INCORRECT_PASSWORD,
        message="Incorrect password",
        extra={"email": db_email},
    )


def unverified_account() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.ACCOUNT_UNVERIFIED,
        message="Unverified account",
    )


def invalid_verification_code(details: Mapping[str, Any] | None = None) -> AppError:
    """Report a wrong verification code.

    ``details`` are merged into the envelope; keys naming an envelope
    field (``code``, ``errno``, ...) are dropped.
    """
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_VERIFICATION_CODE,
        message="Invalid verification code",
        extra=_safe_extra(details),
    )


def invalid_request_body() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_JSON,
        message="Invalid JSON in request body",
    )


def invalid_request_parameter(validation: Any) -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_PARAMETER,
        message="Invalid parameter in request body",
        extra={"validation": validation},
    )


def missing_request_parameter(param: str | None = None) -> AppError:
    message = "Missing parameter in request body"
    if param:
        message += f": {param}"
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.MISSING_PARAMETER,
        message=message,
        extra={"param": param},
    )


def invalid_signature(message: str | None = None) -> AppError:
    return AppError(
        status_code=401,
        title=UNAUTHORIZED,
        errno=Errno.INVALID_REQUEST_SIGNATURE,
        message=message or "Invalid request signature",
    )


def invalid_token(message: str | None = None) -> AppError:
    return AppError(
        status_code=401,
        title=UNAUTHORIZED,
        errno=Errno.INVALID_TOKEN,
        message=message or "Invalid authentication token in request signature",
    )


def invalid_timestamp() -> AppError:
    """Report a stale request signature along with the server clock (epoch seconds)."""
    return AppError(
        status_code=401,
        title=UNAUTHORIZED,
        errno=Errno.INVALID_TIMESTAMP,
        message="Invalid timestamp in request signature",
        extra={"serverTime": int(time.time())},
    )


def invalid_nonce() -> AppError:
    return AppError(
        status_code=401,
        title=UNAUTHORIZED,
        errno=Errno.INVALID_NONCE,
        message="Invalid nonce in request signature",
    )


def missing_content_length() -> AppError:
    return AppError(
        status_code=411,
        title="Length Required",
        errno=Errno.MISSING_CONTENT_LENGTH_HEADER,
        message="Missing content-length header",
    )


def request_body_too_large() -> AppError:
    return AppError(
        status_code=413,
        title="Request Entity Too Large",
        errno=Errno.REQUEST_TOO_LARGE,
        message="Request body too large",
    )


def too_many_requests(
    retry_after: int | None = None,
    retry_after_localized: str | None = None,
    can_unblock: bool = False,
) -> AppError:
    """Report throttling.

    Args:
        retry_after: Seconds until the client may retry. Defaults to 30.
        retry_after_localized: Human-readable form of ``retry_after``.
        can_unblock: Whether the caller may lift the block by verifying
            via email captcha. Adds the verification keys when set.
    """
    if not retry_after:
        retry_after = DEFAULT_RETRY_AFTER

    extra: dict[str, Any] = {"retryAfter": retry_after}
    if retry_after_localized:
        extra["retryAfterLocalized"] = retry_after_localized
    if can_unblock:
        extra.update(UNBLOCK_VERIFICATION)

    return AppError(
        status_code=429,
        title="Too Many Requests",
        errno=Errno.THROTTLED,
        message="Client has sent too many requests",
        extra=extra,
        headers={"retry-after": retry_after},
    )


def request_blocked(can_unblock: bool = False) -> AppError:
    return AppError(
        status_code=400,
        title="Request blocked",
        errno=Errno.REQUEST_BLOCKED,
        message="The request was blocked for security reasons",
        extra=UNBLOCK_VERIFICATION if can_unblock else None,
    )


def service_unavailable(retry_after: int | None = None) -> AppError:
    if not retry_after:
        retry_after = DEFAULT_RETRY_AFTER
    return AppError(
        status_code=503,
        title="Service Unavailable",
        errno=Errno.SERVER_BUSY,
        message="Service unavailable",
        extra={"retryAfter": retry_after},
        headers={"retry-after": retry_after},
    )


def feature_not_enabled(retry_after: int | None = None) -> AppError:
    if not retry_after:
        retry_after = DEFAULT_RETRY_AFTER
    return AppError(
        status_code=503,
        title="Feature not enabled",
        errno=Errno.FEATURE_NOT_ENABLED,
        message="Service unavailable",
        extra={"retryAfter": retry_after},
        headers={"retry-after": retry_after},
    )


def gone() -> AppError:
    return AppError(
        status_code=410,
        title="Gone",
        errno=Errno.ENDPOINT_NOT_SUPPORTED,
        message="This endpoint is no longer supported",
    )


def must_reset_account(email: str | None) -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.ACCOUNT_RESET,
        message="Account must be reset",
        extra={"email": email},
    )


def unknown_device() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.DEVICE_UNKNOWN,
        message="Unknown device",
    )


def device_session_conflict() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.DEVICE_CONFLICT,
        message="Session already registered by another device",
    )


def invalid_unblock_code() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_UNBLOCK_CODE,
        message="Invalid unblock code",
    )


def invalid_phone_number() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_PHONE_NUMBER,
        message="Invalid phone number",
    )


def invalid_region(region: str | None) -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_REGION,
        message="Invalid region",
        extra={"region": region},
    )


def invalid_message_id() -> AppError:
    return AppError(
        status_code=400,
        title=BAD_REQUEST,
        errno=Errno.INVALID_MESSAGE_ID,
        message="Invalid message id",
    )


def message_rejected(reason: str | None, reason_code: Any) -> AppError:
    return AppError(
        status_code=500,
        title=BAD_REQUEST,
        errno=Errno.MESSAGE_REJECTED,
        message="Message rejected",
        extra={"reason": reason, "reasonCode": reason_code},
    )


def unexpected_error() -> AppError:
    return AppError()
