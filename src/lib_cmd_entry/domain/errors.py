"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by the dispatcher, the wrapped library
function, and the process wrapper. Every error that reaches the process
boundary is turned into text on the error stream plus an exit code, so the
hierarchy carries the data needed for that translation.

Contents
--------
* :class:`CommandError` – base class carrying buffered ``stdout``/``stderr``
  text and an optional explicit ``exit_code``.
* :class:`InvocationError` – the entry point was called with malformed
  arguments or options.
* :class:`InvocationTypeError` / :class:`InvocationRangeError` – the concrete
  usage errors, also catchable as :class:`TypeError` / :class:`ValueError`.
* :func:`error_name` / :func:`exit_code_for` – helpers used when rendering.

System Role
-----------
The dispatcher raises usage errors into its completion signal; the wrapped
function reports domain failures as :class:`CommandError` instances. The CLI
wrapper consumes them exactly once.
"""

from __future__ import annotations

from typing import Final

DEFAULT_EXIT_CODE: Final[int] = 1
"""Exit code applied when an error does not carry an explicit ``exit_code``."""


class CommandError(Exception):
    """Base type for failures that end a command invocation.

    Why
    ----
    The process wrapper needs one shape for all failures: a message, optional
    output captured before the failure, and the exit code to report.

    Parameters
    ----------
    message:
        Human readable description written after the error name.
    stdout / stderr:
        Output buffered by the failing operation; replayed verbatim before the
        error line.
    exit_code:
        Explicit process exit code. ``None`` means :data:`DEFAULT_EXIT_CODE`.

    Examples
    --------
    >>> err = CommandError("boom", stderr="partial\\n", exit_code=3)
    >>> (str(err), err.stderr, err.exit_code)
    ('boom', 'partial\\n', 3)
    """

    def __init__(
        self,
        message: str = "",
        *,
        stdout: str | None = None,
        stderr: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code


class InvocationError(CommandError):
    """Raised when the entry point itself is called incorrectly."""


class InvocationTypeError(InvocationError, TypeError):
    """An argument or option has the wrong type or lacks a required capability."""


class InvocationRangeError(InvocationError, ValueError):
    """The argument sequence is too short to hold the execution-context entries."""


def error_name(error: BaseException) -> str:
    """Return the name shown in ``Name: message`` lines.

    >>> error_name(InvocationTypeError("x"))
    'InvocationTypeError'
    """

    return type(error).__name__


def exit_code_for(error: BaseException) -> int:
    """Return the explicit ``exit_code`` of *error* or :data:`DEFAULT_EXIT_CODE`.

    Booleans are rejected so ``exit_code=True`` does not leak through as ``1``
    by accident of ``bool`` subclassing ``int``.

    >>> exit_code_for(CommandError("x", exit_code=4))
    4
    >>> exit_code_for(RuntimeError("x"))
    1
    """

    code = getattr(error, "exit_code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return DEFAULT_EXIT_CODE
