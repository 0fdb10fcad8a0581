"""Entry-point dispatcher turning an invocation into one library call.

Purpose
-------
Validate a process-style invocation, parse its options, and either stop early
(help, version, usage problems) or call the wrapped library function, reducing
every outcome to a single ``(error, exit_code)`` completion.

Contents
--------
* :class:`CommandStreams` – the validated ``in``/``out``/``err`` handles.
* :func:`make_command` – build an entry point around a library function.
* :func:`resolve_streams` / :func:`normalize_args` – validation helpers.

System Role
-----------
The callback form is the single implementation; the awaitable form returned
when no callback is given wraps it. Completions are always delivered on a
later event-loop turn so callers never observe re-entrant callbacks.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any, Callable, NamedTuple, Optional

from ..adapters.parser.default import build_command, parse_arguments
from ..domain.errors import InvocationError, InvocationRangeError, InvocationTypeError, error_name
from ..domain.options import CallOptions, ParsedOptions
from ..observability import log_debug, log_error, make_event
from .ports import Completion, LibraryFunction, ReadableStream, WritableStream

ARGUMENT_COUNT_MESSAGE = "Error: Exactly one argument is required."

EntryPoint = Callable[..., Optional["asyncio.Future[int]"]]


class CommandStreams(NamedTuple):
    """Streams bound to one invocation; never reassigned after validation."""

    in_: Any
    out: Any
    err: Any


def make_command(function: LibraryFunction, *, prog_name: str, version_text: str) -> EntryPoint:
    """Return an entry point that dispatches invocations to *function*.

    Why
    ----
    The process wrapper, tests, and embedding applications all need the same
    validation and exit-code rules no matter which library function does the
    work.

    What
    -----
    The returned ``run_command(args, options=None, callback=None)`` accepts
    ``args`` in ``sys.argv`` shape with an extra leading interpreter entry (the
    first two items are dropped), optional stream overrides under ``in``,
    ``out`` and ``err``, and an optional ``callback(error, exit_code)``. Without a
    callback it returns an :class:`asyncio.Future` resolving to the exit code.

    Raises
    ------
    TypeError
        *callback* is given but not callable.
    RuntimeError
        No event loop is running, so the completion cannot be scheduled. This
        applies to the callback form as well: a callback does not make the entry
        point usable from synchronous code.

    Without a callback, an exception raised synchronously by *function*
    rejects the returned future. With a callback, it propagates to the caller
    and the callback is not invoked with it.
    """

    def run_command(
        args: Sequence[Any] | None,
        options: Mapping[str, Any] | Completion | None = None,
        callback: Completion | None = None,
    ) -> "asyncio.Future[int] | None":
        if callback is None and callable(options):
            callback, options = options, None

        if callback is not None and not callable(callback):
            raise TypeError("callback must be callable")

        loop = asyncio.get_running_loop()
        if callback is None:
            future: asyncio.Future[int] = loop.create_future()
            try:
                run_command(args, options, partial(_settle, future))
            except Exception as exc:
                if future.done():
                    raise
                future.set_exception(exc)
            return future

        completion = _deferred_once(loop, callback)
        try:
            tokens = normalize_args(args)
            streams = resolve_streams(options)
        except InvocationError as exc:
            log_error("invocation-rejected", **make_event("validate", {"error": error_name(exc), "message": str(exc)}))
            completion(exc, None)
            return None

        command = build_command(version_text=version_text)
        parse_arguments(
            command,
            tokens,
            partial(_on_parsed, function, streams, completion),
            prog_name=prog_name,
        )
        return None

    return run_command


def normalize_args(args: Sequence[Any] | None) -> tuple[str, ...]:
    """Drop the two execution-context entries and stringify the rest.

    ``None`` becomes an empty invocation, which later fails the positional
    count check; a short sequence is rejected outright.

    >>> normalize_args(["python", "prog", "a.txt", 3])
    ('a.txt', '3')
    >>> normalize_args(None)
    ()
    """

    if args is None:
        return ()
    if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
        raise InvocationTypeError("args must be a sequence")
    if len(args) < 2:
        raise InvocationRangeError("args must have at least 2 elements")
    return tuple(str(arg) for arg in args[2:])


def resolve_streams(options: Mapping[str, Any] | None) -> CommandStreams:
    """Merge stream overrides over the process streams and check capabilities."""

    if options is None:
        options = {}
    elif not isinstance(options, Mapping):
        raise InvocationTypeError("options must be a mapping")

    merged = {"in": sys.stdin, "out": sys.stdout, "err": sys.stderr}
    merged.update(options)

    if not _exposes(merged["in"], ReadableStream, "read"):
        raise InvocationTypeError("options['in'] must be a readable stream")
    if not _exposes(merged["out"], WritableStream, "write"):
        raise InvocationTypeError("options['out'] must be a writable stream")
    if not _exposes(merged["err"], WritableStream, "write"):
        raise InvocationTypeError("options['err'] must be a writable stream")
    return CommandStreams(merged["in"], merged["out"], merged["err"])


def _exposes(stream: Any, protocol: type, method: str) -> bool:
    return stream is not None and isinstance(stream, protocol) and callable(getattr(stream, method, None))


def _on_parsed(
    function: LibraryFunction,
    streams: CommandStreams,
    completion: Completion,
    error: BaseException | None,
    parsed: ParsedOptions | None,
    rendered: str | None,
) -> None:
    """Interpret the parse outcome and call *function* when appropriate."""

    if error is not None or parsed is None:
        log_debug("parse-failed", **make_event("parse", {"error": error_name(error)}))
        streams.err.write(f"{rendered}\n" if rendered else f"{error_name(error)}: {error}\n")
        completion(None, 1)
        return

    if rendered:
        streams.out.write(f"{rendered}\n")

    if parsed.terminal:
        completion(None, 0)
        return

    if len(parsed.files) != 1:
        log_debug("argument-count", **make_event("parse", {"files": len(parsed.files)}))
        streams.err.write(f"{ARGUMENT_COUNT_MESSAGE}\n")
        completion(None, 1)
        return

    call_options = CallOptions.from_parsed(parsed)
    log_debug("call", **make_event("call", {"files": list(call_options.files), "verbosity": call_options.verbosity}))
    function(call_options, completion)


def _deferred_once(loop: asyncio.AbstractEventLoop, callback: Completion) -> Completion:
    """Wrap *callback* so it runs once, on a later turn of *loop*."""

    fired = False

    def completion(error: BaseException | None, exit_code: int | None = None) -> None:
        nonlocal fired
        if fired:
            raise RuntimeError("command completion was signalled more than once")
        fired = True
        loop.call_soon(callback, error, exit_code)

    return completion


def _settle(future: "asyncio.Future[int]", error: BaseException | None, exit_code: int | None) -> None:
    """Resolve *future* from a callback-style completion."""

    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(exit_code)  # type: ignore[arg-type]
