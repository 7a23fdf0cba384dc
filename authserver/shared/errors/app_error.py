"""
The canonical application error.

An AppError carries everything needed to answer a failed request:
HTTP status, reason phrase, message, errno, extra envelope fields and
response headers. Once built it only changes through ``header()`` and
``backtrace()``, and only before the response is serialized.
No framework imports allowed.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from authserver.shared.errors.errno import Errno
from authserver.shared.errors.schemas import ENVELOPE_FIELDS, ErrorEnvelope

DEFAULT_CODE = 500
DEFAULT_TITLE = "Internal Server Error"
DEFAULT_MESSAGE = "Unspecified error"
DEFAULT_INFO = (
    "https://github.com/mozilla/fxa-auth-server/blob/master/docs/api.md"
    "#response-format"
)


class AppError(Exception):
    """Canonical error raised by routes and produced by the translator.

    Attributes:
        status_code: HTTP status code of the response.
        title: HTTP reason phrase, reported as ``error``.
        errno: Stable numeric error code.
        message: Human-readable description.
        info: Documentation URL.
        stack: Traceback text of the originating failure, if any.
        diagnostic_trace: Server-side log reference attached via ``backtrace()``.
    """

    def __init__(
        self,
        status_code: int | None = None,
        title: str | None = None,
        errno: int | None = None,
        message: str | None = None,
        info: str | None = None,
        extra: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        stack: str | None = None,
    ) -> None:
        self.status_code = status_code or DEFAULT_CODE
        self.title = title or DEFAULT_TITLE
        self.errno = errno or Errno.UNEXPECTED_ERROR
        self.message = message or DEFAULT_MESSAGE
        self.info = info or DEFAULT_INFO
        self.stack = stack
        self.diagnostic_trace: Any = None

        extra = dict(extra or {})
        clashing = ENVELOPE_FIELDS.intersection(extra)
        if clashing:
            raise ValueError(
                f"extra keys collide with envelope fields: {sorted(clashing)}"
            )
        self._extra = extra
        self._headers = {name: str(value) for name, value in (headers or {}).items()}
        super().__init__(self.message)

    @property
    def extra(self) -> Mapping[str, Any]:
        """Condition-specific fields merged into the envelope."""
        return MappingProxyType(self._extra)

    @property
    def headers(self) -> Mapping[str, str]:
        """Response headers to send with the envelope."""
        return MappingProxyType(self._headers)

    def header(self, name: str, value: Any) -> "AppError":
        """Attach a response header. Returns the same error."""
        self._headers[name] = str(value)
        return self

    def backtrace(self, traced: Any) -> "AppError":
        """Attach a diagnostic trace for server-side logging only."""
        self.diagnostic_trace = traced
        return self

    @property
    def payload(self) -> dict[str, Any]:
        """The envelope as a plain dict, ready for JSON serialization."""
        return self.to_envelope().model_dump()

    def to_envelope(self) -> ErrorEnvelope:
        """Build the outgoing envelope. Never includes the diagnostic trace."""
        return ErrorEnvelope(
            code=self.status_code,
            errno=int(self.errno),
            error=self.title,
            message=self.message,
            info=self.info,
            **self._extra,
        )

    def __str__(self) -> str:
        return f"Error: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"errno={int(self.errno)}, message={self.message!r})"
        )
