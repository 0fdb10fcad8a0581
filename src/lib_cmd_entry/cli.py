"""Process wrapper turning ``sys.argv`` into an exit code.

Purpose
-------
Bind the process streams, run the entry point on a fresh event loop, and
report whatever it completes with. This is the only module that reads the
process-wide standard streams.

Contents
--------
* :func:`main` – entry point used by ``console_scripts`` and ``python -m``.
* :func:`report_error` – writes a failed invocation's buffers and error line.

System Role
-----------
Errors delivered through the entry point's completion are rendered as
``Name: message`` with the error's exit code; a library function raising
synchronously rejects the awaitable and is rendered the same way. Anything
that still escapes the entry point is funnelled through
``lib_cli_exit_tools`` like every other bitranox CLI.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import IO, Final, Optional, Sequence

import lib_cli_exit_tools

from .core import PROG_NAME, run_command
from .domain.errors import error_name, exit_code_for
from .observability import attach_stream_handler, detach_handler

_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

TRACEBACK_ENV: Final[str] = "LIB_CMD_ENTRY_TRACEBACK"
LOG_LEVEL_ENV: Final[str] = "LIB_CMD_ENTRY_LOG_LEVEL"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def report_error(error: BaseException, *, out: IO[str], err: IO[str]) -> int:
    """Write *error*'s buffered output and error line, returning its exit code.

    Examples
    --------
    >>> import io
    >>> from lib_cmd_entry.domain.errors import CommandError
    >>> out, err = io.StringIO(), io.StringIO()
    >>> report_error(CommandError("bad input", stderr="line 3\\n", exit_code=2), out=out, err=err)
    2
    >>> err.getvalue()
    'line 3\\nCommandError: bad input\\n'
    """

    stdout = getattr(error, "stdout", None)
    stderr = getattr(error, "stderr", None)
    if stdout:
        out.write(stdout)
    if stderr:
        err.write(stderr)
    err.write(f"{error_name(error)}: {error}\n")
    return exit_code_for(error)


def _is_level_name(name: str) -> bool:
    return bool(name) and isinstance(logging.getLevelName(name), int)


async def _run(args: Sequence[str]) -> int:
    streams = {"in": sys.stdin, "out": sys.stdout, "err": sys.stderr}
    pending = run_command(args, streams)
    if pending is None:
        raise RuntimeError("entry point returned no awaitable")
    try:
        exit_code = await pending
    except Exception as exc:
        return report_error(exc, out=streams["out"], err=streams["err"])
    return 0 if exit_code is None else int(exit_code)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Run the entry point for *argv* (defaults to ``sys.argv[1:]``) and return the exit code."""

    arguments = list(sys.argv[1:] if argv is None else argv)
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    if os.environ.get(TRACEBACK_ENV, "").strip().lower() in _TRUTHY:
        lib_cli_exit_tools.config.traceback = True
        lib_cli_exit_tools.config.traceback_force_color = True

    log_level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    handler = attach_stream_handler(sys.stderr, log_level) if _is_level_name(log_level) else None
    try:
        try:
            return asyncio.run(_run([sys.executable, PROG_NAME, *arguments]))
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if handler is not None:
            detach_handler(handler)
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
