"""
errchain - chained errors with context, and a (value, error) outcome wrapper.

    from errchain import attempt, err

    value, error = attempt(lambda: load_meetings(db))
    if error:
        return None, err("failed to get meetings", error).with_context(tag="db")
"""

__version__ = "0.1.0"

from errchain.core import *  # noqa: F401,F403
from errchain.core import __all__ as _core_all

__all__ = ["__version__", *_core_all]
