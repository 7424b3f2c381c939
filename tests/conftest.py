"""
Shared pytest fixtures for errchain tests.

This module provides:
- A clean structlog configuration and context per test
- A fresh settings cache per test
- A fixed clock for the demo's timestamps
"""

import sys
from pathlib import Path

import pytest
import structlog

# Ensure errchain package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from errchain.core.settings import reset_settings

FIXED_TIMESTAMP = "2025-02-28T16:51:01.378Z"


@pytest.fixture(autouse=True)
def _isolate_logging_and_settings():
    """Reset global structlog state and cached settings around every test."""
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    reset_settings()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    reset_settings()


@pytest.fixture
def fixed_clock():
    """Clock returning a constant ISO timestamp."""
    return lambda: FIXED_TIMESTAMP
