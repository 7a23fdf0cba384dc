"""
Stable numeric error codes.

Clients branch on ``errno``, never on message text, so these values are
append-only: a retired category keeps its number reserved and the slot
is never reassigned.

Bands:
    - 100-199: configuration, request and protocol errors.
    - 200-299: throttling and availability.
    - 999: catch-all for anything unclassified.
"""

from enum import IntEnum


class Errno(IntEnum):
    """Numeric error codes reported in the ``errno`` envelope field."""

    SERVER_CONFIG_ERROR = 100
    ACCOUNT_EXISTS = 101
    ACCOUNT_UNKNOWN = 102
    INCORRECT_PASSWORD = 103
    ACCOUNT_UNVERIFIED = 104
    INVALID_VERIFICATION_CODE = 105
    INVALID_JSON = 106
    INVALID_PARAMETER = 107
    MISSING_PARAMETER = 108
    INVALID_REQUEST_SIGNATURE = 109
    INVALID_TOKEN = 110
    INVALID_TIMESTAMP = 111
    MISSING_CONTENT_LENGTH_HEADER = 112
    REQUEST_TOO_LARGE = 113
    THROTTLED = 114
    INVALID_NONCE = 115
    ENDPOINT_NOT_SUPPORTED = 116
    INCORRECT_EMAIL_CASE = 120
    # ACCOUNT_LOCKED = 121 (retired)
    # ACCOUNT_NOT_LOCKED = 122 (retired)
    DEVICE_UNKNOWN = 123
    DEVICE_CONFLICT = 124
    REQUEST_BLOCKED = 125
    ACCOUNT_RESET = 126
    INVALID_UNBLOCK_CODE = 127
    # MISSING_TOKEN = 128 (retired)
    INVALID_PHONE_NUMBER = 129
    INVALID_REGION = 130
    INVALID_MESSAGE_ID = 131
    MESSAGE_REJECTED = 132
    SERVER_BUSY = 201
    FEATURE_NOT_ENABLED = 202
    UNEXPECTED_ERROR = 999


RETIRED_ERRNOS = frozenset({121, 122, 128})
