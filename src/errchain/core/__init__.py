"""errchain core -- chained errors and the outcome wrapper.

Architecture::

    errors.py      ChainedError, err(), cause classification
    result.py      Outcome, attempt(), attempt_with(), normalize_error()
    logging.py     structlog configuration and log_error()
    settings.py    ErrchainSettings (pydantic-settings, ERRCHAIN_* env vars)
"""

from errchain.core.errors import (
    SEPARATOR,
    UNKNOWN_ERROR,
    CauseKind,
    ChainedError,
    classify_cause,
    err,
    error_message,
    is_chained,
)
from errchain.core.result import (
    Outcome,
    attempt,
    attempt_async,
    attempt_with,
    normalize_error,
)

__all__ = [
    "SEPARATOR",
    "UNKNOWN_ERROR",
    "CauseKind",
    "ChainedError",
    "classify_cause",
    "err",
    "error_message",
    "is_chained",
    "Outcome",
    "attempt",
    "attempt_async",
    "attempt_with",
    "normalize_error",
]
