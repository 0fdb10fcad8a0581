"""Public package surface for the ``lib_cmd_entry`` entry-point adapter.

``run_command`` is the ready-made entry point bound to the default library
function; ``make_command`` wraps any other function with the same validation,
option grammar, and exit-code rules.
"""

from __future__ import annotations

from .application.dispatch import make_command
from .core import process, run_command
from .domain.errors import CommandError, InvocationError, InvocationRangeError, InvocationTypeError
from .domain.options import CallOptions, ParsedOptions
from .observability import get_logger
from .testing import i_should_fail

__all__ = [
    "CallOptions",
    "CommandError",
    "InvocationError",
    "InvocationRangeError",
    "InvocationTypeError",
    "ParsedOptions",
    "get_logger",
    "i_should_fail",
    "make_command",
    "process",
    "run_command",
]
