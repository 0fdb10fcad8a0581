"""Shared fixtures for dispatcher and CLI tests.

The dispatcher writes to injected streams, so tests hand it ``StringIO``
objects and inspect what landed where.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any, Callable

import pytest


class Streams:
    """In-memory ``in``/``out``/``err`` trio passed as dispatcher options."""

    def __init__(self) -> None:
        self.in_ = io.StringIO()
        self.out = io.StringIO()
        self.err = io.StringIO()

    def as_options(self) -> dict[str, Any]:
        return {"in": self.in_, "out": self.out, "err": self.err}


@pytest.fixture()
def streams() -> Streams:
    """Provide fresh in-memory streams for one invocation."""

    return Streams()


@pytest.fixture()
def await_command() -> Callable[..., Any]:
    """Run an entry point in awaitable form on a fresh event loop and return its result."""

    def _run(entry_point: Callable[..., Any], *args: Any) -> Any:
        async def _invoke() -> Any:
            return await entry_point(*args)

        return asyncio.run(_invoke())

    return _run
