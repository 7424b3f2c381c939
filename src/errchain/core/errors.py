"""
Chained error type with a human-readable cause trail and chain-wide context.

Provides ChainedError, a single error type that wraps whatever actually failed
(another ChainedError, any Python exception, or a bare string) behind a short
message of its own, and carries a free-form annotation store that can be
queried across the whole cause chain.

Manifesto:
    - **One boundary type:** Callers only ever handle ChainedError
    - **Readable trails:** ``fmt_err()`` renders "outer -> inner -> root"
    - **Out-of-band context:** Annotations travel with the error, not the message
    - **Deepest wins:** Re-wrapping never shadows root-cause context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │ ChainedError("failed to get meetings")   context {...}   │
        │   cause ──┐                                              │
        │           ▼                                              │
        │ ChainedError("failed to connect")        context {...}   │
        │   cause ──┐                                              │
        │           ▼                                              │
        │ OSError("invalid dbId")     __cause__ ──▶ ... │ str │ None│
        └──────────────────────────────────────────────────────────┘

        fmt_err()  walks top ─▶ bottom, joins non-blank segments
        get(key)   walks top ─▶ bottom, last (deepest) match wins

Examples:
    >>> base = err("failed to connect", OSError("invalid dbId"))
    >>> base.with_context(tag="db-connect").fmt_err("request failed")
    'request failed -> failed to connect -> OSError: invalid dbId'
    >>> err("failed to get meetings", base).get("tag")
    'db-connect'

Guardrails:
    ❌ DON'T: Format the cause into the message ("failed: %s" % exc)
    ✅ DO: Pass it as the cause: err("failed", exc)

    ❌ DON'T: Point a cause at one of its own ancestors
    ✅ DO: Only chain errors created earlier in the call stack

Tags:
    error-handling, error-chaining, error-context, errchain
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")

SEPARATOR = " -> "
UNKNOWN_ERROR = "Unknown error"
# Class name of a plain exception; never rendered as a prefix.
GENERIC_ERROR_NAME = "Exception"

_MISSING: Any = object()


class CauseKind(str, Enum):
    """
    Tag for the value held in a cause slot.

    Formatting and traversal dispatch on this tag instead of on ad-hoc
    isinstance checks scattered through the code.

    - **CHAINED:** a ChainedError; bare message, continues via ``.cause``
    - **EXCEPTION:** any other exception; name-prefixed, continues via ``__cause__``
    - **TEXT:** a string (or other opaque value); terminal
    - **NONE:** absent or falsy; terminal, contributes nothing
    """

    CHAINED = "chained"
    EXCEPTION = "exception"
    TEXT = "text"
    NONE = "none"


def classify_cause(value: Any) -> CauseKind:
    """Map any cause value to its CauseKind.

    Exceptions and strings are recognized by type; only an empty string counts
    as falsy among them. Other values are absent when ``None`` or falsy, and a
    value whose truth test itself fails is kept as an opaque TEXT cause.
    """
    if value is None:
        return CauseKind.NONE
    if isinstance(value, ChainedError):
        return CauseKind.CHAINED
    if isinstance(value, BaseException):
        return CauseKind.EXCEPTION
    if isinstance(value, str):
        return CauseKind.TEXT if value else CauseKind.NONE
    try:
        present = bool(value)
    except Exception:
        present = True
    return CauseKind.TEXT if present else CauseKind.NONE


def is_chained(value: Any) -> bool:
    """Check if a value is a ChainedError."""
    return isinstance(value, ChainedError)


def error_message(exc: BaseException) -> str:
    """Return the message carried by an exception.

    A single string argument is the message as given (``KeyError("user")``
    gives ``user``, not ``'user'``); anything else falls back to ``str(exc)``.
    """
    if isinstance(exc, ChainedError):
        return exc.message
    if len(exc.args) == 1 and isinstance(exc.args[0], str):
        return exc.args[0]
    return str(exc)


def _is_blank(text: str | None) -> bool:
    return not text or not text.strip()


def _next_cause(kind: CauseKind, node: Any) -> Any:
    if kind is CauseKind.CHAINED:
        return node.cause
    if kind is CauseKind.EXCEPTION:
        return node.__cause__
    return None


def _segment(kind: CauseKind, node: Any) -> str | None:
    if kind is CauseKind.CHAINED:
        message = node.message
    elif kind is CauseKind.EXCEPTION:
        message = error_message(node)
        name = type(node).__name__
        if not _is_blank(message) and name != GENERIC_ERROR_NAME:
            message = f"{name}: {message}"
    elif kind is CauseKind.TEXT:
        message = str(node)
    else:
        return None
    return None if _is_blank(message) else message


class ChainedError(Exception):
    """
    Error value with a message, an optional cause, and an annotation store.

    ChainedError is the only error shape callers see at the boundary. It is
    created once (usually via ``err()``), may be annotated any number of times
    with ``with_context()``, and is rendered or queried with ``fmt_err()`` and
    ``get()``.

    Manifesto:
        - **Message is a layer:** Each wrap adds one short segment
        - **Cause is anything:** ChainedError, exception, string, or nothing
        - **Context is per node:** ``with_context`` only touches this error
        - **Lookups span the chain:** ``get`` sees every ChainedError below

    Architecture:
        ::

            ChainedError
            ├── message   : str                     (may be empty)
            ├── cause     : ChainedError | BaseException | str | None
            ├── _context  : dict | None             (created on first write)
            └── name      : "ChainedError"          (never used as a prefix)

    Examples:
        >>> e = err("Base", ValueError("bad input")).with_context(user_id=7)
        >>> e.fmt_err()
        'Base -> ValueError: bad input'
        >>> e.get("user_id")
        7

    Guardrails:
        ❌ DON'T: Mutate ``cause`` after construction
        ✅ DO: Wrap again with ``err(new_message, existing)``

    Tags:
        chained-error, error-context, fluent-api, errchain
    """

    name = "ChainedError"

    def __init__(self, message: str = "", cause: Any = None):
        super().__init__(message)
        self.message = message
        self.cause = None if classify_cause(cause) is CauseKind.NONE else cause
        self._context: dict[str, Any] | None = None

        # Keep Python's own traceback chain in step with ours
        if isinstance(self.cause, BaseException):
            self.__cause__ = self.cause

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def with_context(
        self, mapping: Mapping[str, Any] | None = None, /, **values: Any
    ) -> ChainedError:
        """
        Merge annotations into this error's own store (fluent API).

        Usage:
            raise err("query failed", exc).with_context(
                {"sql": sql}, tag="db-query"
            )
        """
        if self._context is None:
            self._context = {}
        if mapping:
            self._context.update(mapping)
        self._context.update(values)
        return self

    @property
    def context(self) -> dict[str, Any]:
        """Copy of this error's own annotations (ancestors excluded)."""
        return dict(self._context) if self._context else {}

    def get(self, key: str, default: T | None = None) -> Any | T | None:
        """
        Look up an annotation anywhere in the cause chain.

        The deepest ChainedError holding ``key`` wins, so context recorded at
        the original failure is not shadowed by later re-wrapping. Returns
        ``default`` when no store in the chain has the key.
        """
        found = _MISSING
        for kind, node in self.iter_chain():
            if kind is CauseKind.CHAINED and node._context and key in node._context:
                found = node._context[key]
        return default if found is _MISSING else found

    def has(self, key: str) -> bool:
        """Check if any store in the chain holds ``key``."""
        return self.get(key, _MISSING) is not _MISSING

    def chain_context(self) -> dict[str, Any]:
        """All annotations in the chain, deeper values overriding shallower ones."""
        merged: dict[str, Any] = {}
        for kind, node in self.iter_chain():
            if kind is CauseKind.CHAINED and node._context:
                merged.update(node._context)
        return merged

    # ------------------------------------------------------------------
    # Chain traversal and formatting
    # ------------------------------------------------------------------

    def iter_chain(self) -> Iterator[tuple[CauseKind, Any]]:
        """Yield ``(kind, node)`` from this error down to the deepest cause."""
        seen: set[int] = set()
        node: Any = self
        kind = CauseKind.CHAINED
        while kind is not CauseKind.NONE and id(node) not in seen:
            seen.add(id(node))
            yield kind, node
            node = _next_cause(kind, node)
            kind = classify_cause(node)

    def root_cause(self) -> Any:
        """Return the deepest node of the chain."""
        deepest: Any = self
        for _, node in self.iter_chain():
            deepest = node
        return deepest

    def fmt_err(self, prepend: str | None = None) -> str:
        """
        Render the whole cause chain as ``"outer -> inner -> root"``.

        Blank messages are skipped. Exceptions other than ChainedError and
        plain ``Exception`` are prefixed with their class name. Returns
        ``"Unknown error"`` when nothing non-blank remains.
        """
        segments = [] if _is_blank(prepend) else [prepend]
        for kind, node in self.iter_chain():
            segment = _segment(kind, node)
            if segment is not None:
                segments.append(segment)
        return SEPARATOR.join(segments) or UNKNOWN_ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "chain": self.fmt_err(),
        }
        context = self.chain_context()
        if context:
            result["context"] = context
        return result

    def __str__(self) -> str:
        return self.fmt_err()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


def err(message: str = "", cause: Any = None) -> ChainedError:
    """
    Create a ChainedError, optionally wrapping a cause.

    Used both to originate a failure and to add a message layer on top of an
    existing one. Never raises; any falsy cause means "no cause".

    Examples:
        >>> err("Base message").fmt_err()
        'Base message'
        >>> err("Base", "string cause").fmt_err()
        'Base -> string cause'
    """
    return ChainedError(message, cause)


__all__ = [
    "SEPARATOR",
    "UNKNOWN_ERROR",
    "GENERIC_ERROR_NAME",
    "CauseKind",
    "ChainedError",
    "classify_cause",
    "is_chained",
    "error_message",
    "err",
]
