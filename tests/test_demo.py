"""Integration tests: the demo meetings flow end to end."""

import re
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from errchain import err
from errchain.core.logging import get_logger, log_error
from errchain.demo import (
    MEETINGS_SQL,
    FakeDatabase,
    get_meetings,
    render_log_line,
    utc_timestamp,
)

ROWS = [{"id": 1, "title": "standup"}]


class TestGetMeetings:
    @pytest.mark.asyncio
    async def test_success(self):
        db = FakeDatabase(ROWS)
        rows, error = await get_meetings(db)
        assert rows == ROWS
        assert error is None
        assert db.connected_to == "meetings"

    @pytest.mark.asyncio
    async def test_connect_failure(self, fixed_clock):
        db = FakeDatabase(ROWS)
        with patch.object(db, "connect", side_effect=Exception("invalid dbId")):
            rows, error = await get_meetings(db, clock=fixed_clock)

        assert rows is None
        message = error.fmt_err("something went wrong")
        assert render_log_line(message, error) == (
            "2025-02-28T16:51:01.378Z [db-connect] something went wrong"
            " -> failed to get meetings -> failed to connect to database -> invalid dbId"
        )

    @pytest.mark.asyncio
    async def test_query_failure(self):
        db = FakeDatabase(ROWS)
        with patch.object(db, "query", side_effect=Exception("invalid query")):
            rows, error = await get_meetings(db)

        assert rows is None
        message = error.fmt_err("something went wrong")
        assert render_log_line(message, error) == (
            "[db-query] something went wrong -> failed to get meetings -> failed to query db"
            " -> invalid query: for 'SELECT * FROM meetings WHERE scheduled_time < actual_end_time'"
        )
        assert error.get("sql") == MEETINGS_SQL

    @pytest.mark.asyncio
    async def test_query_failure_raised_synchronously(self):
        db = FakeDatabase(ROWS)

        def fail(sql):
            raise RuntimeError("boom")

        with patch.object(db, "query", new=fail):
            _, error = await get_meetings(db)

        assert error.fmt_err() == (
            f"failed to get meetings -> failed to query db -> boom: for {MEETINGS_SQL!r}"
        )

    @pytest.mark.asyncio
    async def test_real_connect_validation(self, fixed_clock):
        _, error = await get_meetings(FakeDatabase(), db_id="", clock=fixed_clock)
        assert error.fmt_err() == "failed to get meetings -> failed to connect to database -> invalid dbId"
        assert error.get("timestamp") == "2025-02-28T16:51:01.378Z"

    @pytest.mark.asyncio
    async def test_log_error_carries_demo_context(self, fixed_clock):
        _, error = await get_meetings(FakeDatabase(), db_id="", clock=fixed_clock)
        with capture_logs() as logs:
            log_error(get_logger(), error, "something went wrong")

        assert logs[0]["tag"] == "db-connect"
        assert logs[0]["event"].startswith("something went wrong -> failed to get meetings")


class TestRenderLogLine:
    def test_message_only_without_context(self):
        assert render_log_line("boom", err("boom")) == "boom"


def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())
