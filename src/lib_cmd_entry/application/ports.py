"""Application-layer ports describing the dispatcher's collaborators.

Purpose
-------
Define the structural contracts the dispatcher relies on so it can validate
injected streams and call any library function without importing concrete
implementations.

Contents
--------
* :class:`ReadableStream` – input stream capability (``read``).
* :class:`WritableStream` – output/error stream capability (``write``).
* :class:`LibraryFunction` – the wrapped function's call contract.
* :data:`Completion` / :data:`ParseCompletion` – callback signatures.

System Role
-----------
The protocols are ``runtime_checkable`` so the dispatcher can test stream
capabilities with ``isinstance`` instead of probing attributes ad hoc.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..domain.options import CallOptions, ParsedOptions

Completion = Callable[[Optional[BaseException], Optional[int]], Any]
"""Callback receiving ``(error, exit_code)`` exactly once."""

ParseCompletion = Callable[[Optional[BaseException], Optional[ParsedOptions], Optional[str]], Any]
"""Callback receiving ``(error, parsed, rendered_text)`` from the parser adapter."""


@runtime_checkable
class ReadableStream(Protocol):
    """Stream the wrapped function may read input from."""

    def read(self, *args: Any) -> Any:
        """Return data from the stream."""


@runtime_checkable
class WritableStream(Protocol):
    """Stream receiving output, status, or error text."""

    def write(self, data: str) -> Any:
        """Write *data* to the stream."""


class LibraryFunction(Protocol):
    """Library entry point invoked once per successful dispatch.

    Why
    ----
    The dispatcher treats the domain work as opaque. Any callable accepting
    :class:`CallOptions` and a :data:`Completion` can be wrapped.
    """

    def __call__(self, options: CallOptions, callback: Completion) -> Any:
        """Perform the work and report ``(error, result_code)`` through *callback*."""
