"""Composition root for ``lib_cmd_entry``.

Purpose
-------
Wire the default library function into the dispatcher and expose the
resulting entry point. Applications that wrap their own function call
:func:`lib_cmd_entry.application.dispatch.make_command` directly.

Contents
--------
* :data:`PROG_NAME` – program name shown in usage and version text.
* :func:`process` – default library function behind the console script.
* :data:`run_command` – entry point bound to :func:`process`.

System Role
-----------
The CLI wrapper imports :data:`run_command` from here and never builds the
dispatcher itself.
"""

from __future__ import annotations

from importlib import metadata
from typing import Final

from .application.dispatch import make_command
from .application.ports import Completion
from .domain.options import CallOptions
from .observability import log_info, make_event

PROG_NAME: Final[str] = "lib_cmd_entry"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version(PROG_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def process(options: CallOptions, callback: Completion) -> None:
    """Default library function: record the request and report success.

    Why
    ----
    The entry point is the product here; the domain work belongs to whichever
    library function is wrapped. This placeholder keeps the console script
    runnable end to end.

    What
    -----
    Logs the requested files and verbosity, then calls ``callback(None, 0)``.
    """

    log_info("process", **make_event("call", {"files": list(options.files), "verbosity": options.verbosity}))
    callback(None, 0)


VERSION_TEXT: Final[str] = f"{PROG_NAME} {_resolve_version()}"

run_command = make_command(process, prog_name=PROG_NAME, version_text=VERSION_TEXT)
