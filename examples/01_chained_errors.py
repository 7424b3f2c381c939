#!/usr/bin/env python3
"""Chained Errors — attempt(), err() and context that survives re-wrapping.

================================================================================
WHY CHAIN ERRORS?
================================================================================

A bare exception tells you *what* broke at the bottom of the stack, but not
*what the program was trying to do* at each level above it::

    ValueError: invalid dbId

Wrapping each layer with one short message gives the whole story::

    something went wrong -> failed to get meetings
        -> failed to connect to database -> invalid dbId


================================================================================
THE TWO PRIMITIVES
================================================================================

::

    attempt(fn)             ──▶  Outcome(value, error)   (error is a ChainedError)
    err(message, cause)     ──▶  ChainedError            (adds one layer)

    error.with_context(...)      annotate this layer
    error.get(key)               look up any layer, deepest wins
    error.fmt_err(prepend)       "prepend -> outer -> ... -> root"


================================================================================
EXAMPLE USAGE
================================================================================

Run this example:
    python examples/01_chained_errors.py

See Also:
    - :mod:`errchain.core.errors` — ChainedError, err()
    - :mod:`errchain.core.result` — Outcome, attempt()
    - :mod:`errchain.demo` — FakeDatabase, get_meetings()
"""

import asyncio

from errchain import attempt, err
from errchain.core.logging import configure_logging, get_logger, log_error
from errchain.demo import FakeDatabase, get_meetings, render_log_line


class QuotaExceeded(Exception):
    pass


async def main():
    configure_logging(level="INFO", json_format=False)
    logger = get_logger("examples.chained_errors")

    print("=" * 70)
    print("1. attempt() turns failures into data")
    print("=" * 70)

    value, error = attempt(lambda: int("42"))
    print(f"  ok:     value={value!r} error={error!r}")
    value, error = attempt(lambda: int("forty-two"))
    print(f"  failed: value={value!r} error={error.fmt_err()!r}")

    print("\n" + "=" * 70)
    print("2. err() adds layers; names other than Exception are kept")
    print("=" * 70)

    quota = err("upload rejected", QuotaExceeded("12 GB of 10 GB used"))
    print(f"  {quota.fmt_err('sync failed')}")

    print("\n" + "=" * 70)
    print("3. Context: deepest layer wins")
    print("=" * 70)

    deep = err("disk full").with_context(device="/dev/sda1", attempt=1)
    top = err("backup failed", deep).with_context(attempt=3)
    print(f"  device={top.get('device')!r} attempt={top.get('attempt')!r}")

    print("\n" + "=" * 70)
    print("4. A full request: database failures, wrapped and logged")
    print("=" * 70)

    rows, error = await get_meetings(FakeDatabase(), db_id="")
    if error:
        message = error.fmt_err("something went wrong")
        print(f"  {render_log_line(message, error)}")
        log_error(logger, error, "something went wrong")

    rows, error = await get_meetings(FakeDatabase([{"id": 1, "title": "standup"}]))
    print(f"  rows={rows!r} error={error!r}")


if __name__ == "__main__":
    asyncio.run(main())
