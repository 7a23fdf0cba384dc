"""
Pydantic schema for the error envelope.

Every error response body has this shape. Condition-specific fields
(``email``, ``retryAfter``, ``validation``, ...) are merged in flat
next to the fixed fields.
"""

from pydantic import BaseModel, ConfigDict


class ErrorEnvelope(BaseModel):
    """Error response body returned for every failure.

    Attributes:
        code: HTTP status code of the response.
        errno: Stable numeric error code clients branch on.
        error: HTTP reason phrase.
        message: Human-readable description. Not a stable contract.
        info: Documentation URL describing the response format.
    """

    model_config = ConfigDict(extra="allow")

    code: int
    errno: int
    error: str
    message: str
    info: str


ENVELOPE_FIELDS = frozenset(ErrorEnvelope.model_fields)
