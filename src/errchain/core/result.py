"""
Outcome wrapper: run an operation and turn any failure into data.

Provides ``attempt()``, the bridge between exception-raising code and code that
prefers to inspect a ``(value, error)`` pair. Whatever the operation raises
(an exception of any type, or a ChainedError that already carries a trail) is
normalized to a single ChainedError, so callers handle exactly one shape.

Manifesto:
    - **Bridge pattern:** Convert exception world to Outcome world
    - **One error shape:** Every failure arrives as a ChainedError
    - **Sync stays sync:** Only awaitable results produce a coroutine
    - **No policy:** No retries, timeouts, or logging

Architecture:
    ::

        attempt(fn)
            │
            ├─ fn() raises ──────────────▶ Outcome(None, normalize_error(exc))
            ├─ fn() returns value ───────▶ Outcome(value, None)
            └─ fn() returns awaitable ───▶ coroutine
                                              ├─ resolves ─▶ Outcome(value, None)
                                              └─ raises ───▶ Outcome(None, error)

Examples:
    Unpacking like a tuple:

    >>> value, error = attempt(lambda: int("42"))
    >>> value, error
    (42, None)
    >>> value, error = attempt(lambda: int("forty-two"))
    >>> error.fmt_err()
    "invalid literal for int() with base 10: 'forty-two'"

    Awaiting coroutine functions:

    >>> async def fetch():
    ...     return "payload"
    >>> value, error = await attempt(fetch)  # doctest: +SKIP

Guardrails:
    ❌ DON'T: Pass functions with arguments directly
    ✅ DO: Wrap in lambda: attempt(lambda: fetch(url))

    ❌ DON'T: Forget to check ``error`` before using ``value``
    ✅ DO: ``if error: return err("context", error)``

Tags:
    outcome, exception-bridge, async, errchain
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, Generic, NamedTuple, TypeVar, overload

from errchain.core.errors import ChainedError, err, error_message

T = TypeVar("T")


class Outcome(NamedTuple, Generic[T]):
    """
    Two-slot result of running an operation.

    Exactly one slot is meaningful: ``error is None`` marks success, in which
    case ``value`` holds the operation's return value (which may itself be
    ``None``). Being a tuple, it unpacks as ``value, error = outcome``.
    """

    value: T | None
    error: ChainedError | None

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"ok": False, "error": self.error.to_dict()}
        return {"ok": True, "value": self.value}


def normalize_error(failure: Any) -> ChainedError:
    """
    Convert any raised value into a ChainedError.

    - A ChainedError is returned unchanged (no double wrapping).
    - Another exception keeps its message, its own ``__cause__`` and its
      traceback.
    - Anything else becomes a ChainedError of its string form.
    """
    if isinstance(failure, ChainedError):
        return failure
    if isinstance(failure, BaseException):
        normalized = ChainedError(error_message(failure), failure.__cause__)
        normalized.__traceback__ = failure.__traceback__
        return normalized
    return ChainedError(str(failure))


def _failed(exc: BaseException, message: str | None) -> Outcome[Any]:
    error = normalize_error(exc) if message is None else err(message, exc)
    return Outcome(None, error)


async def _settle(pending: Awaitable[T], message: str | None) -> Outcome[T]:
    try:
        value = await pending
    except Exception as e:
        return _failed(e, message)
    return Outcome(value, None)


@overload
def attempt(fn: Callable[[], Awaitable[T]]) -> Coroutine[Any, Any, Outcome[T]]: ...


@overload
def attempt(fn: Callable[[], T]) -> Outcome[T]: ...


def attempt(fn: Callable[[], Any]) -> Any:
    """
    Run ``fn`` once and return its Outcome.

    If ``fn()`` returns an awaitable, a coroutine is returned instead; awaiting
    it waits for the awaitable to settle and yields the Outcome. ``fn`` is
    never retried, and ``BaseException`` subclasses that are not ``Exception``
    (cancellation, ``KeyboardInterrupt``) are not caught.

    Args:
        fn: Zero-argument callable, sync or async

    Returns:
        Outcome, or a coroutine resolving to an Outcome
    """
    return _run(fn, None)


def attempt_with(fn: Callable[[], Any], message: str) -> Any:
    """
    Like ``attempt()``, but wrap any failure as ``err(message, failure)``.

    >>> _, error = attempt_with(lambda: 1 / 0, "could not compute ratio")
    >>> error.fmt_err()
    'could not compute ratio -> ZeroDivisionError: division by zero'

    Note the ZeroDivisionError here is rendered as a cause, with its class name,
    whereas a bare ``attempt()`` would only keep its message.
    """
    return _run(fn, message)


async def attempt_async(fn: Callable[[], Any]) -> Outcome[Any]:
    """
    Awaitable form of ``attempt()`` for call sites inside coroutines.

    ``fn`` may be sync or async; a synchronous failure (e.g. a coroutine
    function replaced by a mock that raises) is still reported through the
    returned Outcome rather than needing a separate code path.
    """
    outcome = attempt(fn)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome


def _run(fn: Callable[[], Any], message: str | None) -> Any:
    try:
        result = fn()
    except Exception as e:
        return _failed(e, message)
    if inspect.isawaitable(result):
        return _settle(result, message)
    return Outcome(result, None)


__all__ = [
    "Outcome",
    "attempt",
    "attempt_async",
    "attempt_with",
    "normalize_error",
]
