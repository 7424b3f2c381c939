"""Demonstration collaborators: a fake meetings database and a tag-aware log line.

Used by ``examples/01_chained_errors.py`` and the integration tests to show
errors being wrapped layer by layer and then rendered with their context.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from errchain.core.errors import ChainedError, err
from errchain.core.result import Outcome, attempt, attempt_async

MEETINGS_SQL = "SELECT * FROM meetings WHERE scheduled_time < actual_end_time"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2025-02-28T16:51:01.378Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FakeDatabase:
    """In-memory stand-in for a database client."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self.rows = list(rows or [])
        self.connected_to: str | None = None

    def connect(self, db_id: str) -> FakeDatabase:
        if not db_id:
            raise ValueError("invalid dbId")
        self.connected_to = db_id
        return self

    async def query(self, sql: str) -> list[dict[str, Any]]:
        if self.connected_to is None:
            raise ConnectionError("not connected")
        return list(self.rows)


async def get_meetings(
    db: FakeDatabase,
    db_id: str = "meetings",
    clock: Callable[[], str] = utc_timestamp,
) -> Outcome[list[dict[str, Any]]]:
    """Load overrunning meetings, wrapping each failure with its own layer."""
    _, error = attempt(lambda: db.connect(db_id))
    if error:
        failure = err("failed to connect to database", error).with_context(
            tag="db-connect", timestamp=clock()
        )
        return Outcome(None, err("failed to get meetings", failure))

    rows, error = await attempt_async(lambda: db.query(MEETINGS_SQL))
    if error:
        # SQL is folded into a plain string cause, so it is the end of the trail
        failure = err(
            "failed to query db", f"{error.fmt_err()}: for {MEETINGS_SQL!r}"
        ).with_context(tag="db-query", sql=MEETINGS_SQL)
        return Outcome(None, err("failed to get meetings", failure))

    return Outcome(rows, None)


def render_log_line(message: str, error: ChainedError) -> str:
    """Render ``"<timestamp> [<tag>] <message>"``, dropping parts the chain lacks."""
    parts = []
    timestamp = error.get("timestamp")
    if timestamp:
        parts.append(str(timestamp))
    tag = error.get("tag")
    if tag:
        parts.append(f"[{tag}]")
    parts.append(message)
    return " ".join(parts)
