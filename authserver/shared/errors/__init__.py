"""
Shared error handling package.

Defines the canonical error taxonomy and translates every failure,
wherever it originated, into one documented response envelope.
"""

from authserver.shared.errors.app_error import DEFAULT_INFO, AppError
from authserver.shared.errors.errno import RETIRED_ERRNOS, Errno
from authserver.shared.errors.translate import translate

__all__ = ["AppError", "DEFAULT_INFO", "Errno", "RETIRED_ERRNOS", "translate"]
