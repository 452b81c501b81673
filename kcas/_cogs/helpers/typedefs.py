"""
Rudimentary type [re-]definitions for cross-versioned Python & mypy.

The new mypy versions often bring type-sheds with StdLib types defined
as generics, while the old Python runtime does not support the usual syntax
(e.g. ``logging.LoggerAdapter[Any]``).

This modules defines them in a most suitable and reusable way.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# As publicly exposed: we only promise that it is based on one of the built-in loggable classes.
Logger = Union[logging.Logger, LoggerAdapter]
