"""Test doubles for the wrapped library function.

Purpose
    Provide library functions with predictable outcomes so the dispatcher's
    success, domain-failure, and propagation paths can be exercised without a
    real library behind the entry point.

Contents
    - ``FAILURE_MESSAGE``: stable message used when forcing a failure.
    - ``i_should_fail``: library function that raises ``RuntimeError``
      synchronously instead of calling its callback.
    - ``RecordingFunction``: records each call and completes with a configured
      result or error, optionally on a later event-loop turn.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Final

from .application.ports import Completion
from .domain.options import CallOptions

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message raised by :func:`i_should_fail`."""


def i_should_fail(options: CallOptions, callback: Completion) -> None:
    """Raise a deterministic :class:`RuntimeError` without completing.

    Examples
    --------
    >>> i_should_fail(CallOptions(files=("a",)), print)
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)


@dataclass
class RecordingFunction:
    """Library function double that remembers the options it was called with.

    Attributes
    ----------
    result:
        Exit code reported on success.
    error:
        Error reported instead of *result* when set.
    defer:
        Complete on the next turn of the running event loop instead of inline.
    """

    result: int | None = 0
    error: BaseException | None = None
    defer: bool = False
    calls: list[CallOptions] = field(default_factory=list)

    def __call__(self, options: CallOptions, callback: Completion) -> None:
        self.calls.append(options)
        if self.defer:
            asyncio.get_running_loop().call_soon(callback, self.error, None if self.error else self.result)
            return
        callback(self.error, None if self.error else self.result)
