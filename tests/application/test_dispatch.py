"""Behavioural tests for the entry-point dispatcher.

Each test builds an entry point around a :class:`RecordingFunction` and checks
the exit code, what reached the injected streams, and whether the library
function was called.
"""

from __future__ import annotations

import asyncio
import io
import sys
from typing import Any

import pytest

from lib_cmd_entry.application.dispatch import (
    ARGUMENT_COUNT_MESSAGE,
    make_command,
    normalize_args,
    resolve_streams,
)
from lib_cmd_entry.domain.errors import CommandError, InvocationRangeError, InvocationTypeError
from lib_cmd_entry.domain.options import CallOptions
from lib_cmd_entry.testing import RecordingFunction, i_should_fail

PROG = "cmd"
VERSION_TEXT = "cmd 9.9.9"


def _entry(function: Any) -> Any:
    return make_command(function, prog_name=PROG, version_text=VERSION_TEXT)


def test_single_argument_calls_function_once(streams, await_command) -> None:
    function = RecordingFunction(result=0)
    code = await_command(_entry(function), ["python", PROG, "input.txt"], streams.as_options())
    assert code == 0
    assert function.calls == [CallOptions(files=("input.txt",), verbosity=0)]
    assert streams.err.getvalue() == ""
    assert streams.out.getvalue() == ""


def test_exit_code_is_function_result(streams, await_command) -> None:
    function = RecordingFunction(result=5, defer=True)
    code = await_command(_entry(function), ["python", PROG, "input.txt"], streams.as_options())
    assert code == 5


def test_verbosity_is_verbose_minus_quiet(streams, await_command) -> None:
    function = RecordingFunction()
    await_command(_entry(function), ["python", PROG, "-v", "-v", "-q", "input.txt"], streams.as_options())
    assert function.calls[0].verbosity == 1


def test_verbosity_may_be_negative(streams, await_command) -> None:
    function = RecordingFunction()
    await_command(_entry(function), ["python", PROG, "-qq", "input.txt"], streams.as_options())
    assert function.calls[0].verbosity == -2


def test_arguments_are_stringified(streams, await_command) -> None:
    function = RecordingFunction()
    await_command(_entry(function), ["python", PROG, 42], streams.as_options())
    assert function.calls[0].files == ("42",)


@pytest.mark.parametrize("extra", [[], ["a", "b"], ["a", "b", "c"]])
def test_wrong_positional_count_fails_without_call(streams, await_command, extra: list[str]) -> None:
    function = RecordingFunction()
    code = await_command(_entry(function), ["python", PROG, *extra], streams.as_options())
    assert code == 1
    assert function.calls == []
    assert streams.err.getvalue() == f"{ARGUMENT_COUNT_MESSAGE}\n"
    assert streams.err.getvalue().count("Exactly one argument is required.") == 1


@pytest.mark.parametrize("flag", ["--help", "-h", "-?", "--version", "-V"])
def test_terminal_flags_exit_zero_without_call(streams, await_command, flag: str) -> None:
    function = RecordingFunction()
    code = await_command(_entry(function), ["python", PROG, flag], streams.as_options())
    assert code == 0
    assert function.calls == []
    assert streams.out.getvalue().strip() != ""
    assert streams.err.getvalue() == ""


def test_version_text_goes_to_output(streams, await_command) -> None:
    await_command(_entry(RecordingFunction()), ["python", PROG, "-V"], streams.as_options())
    assert streams.out.getvalue() == f"{VERSION_TEXT}\n"


def test_help_wins_over_positional_count(streams, await_command) -> None:
    function = RecordingFunction()
    code = await_command(_entry(function), ["python", PROG, "--help", "a", "b"], streams.as_options())
    assert code == 0
    assert function.calls == []


def test_unknown_flag_is_parse_error(streams, await_command) -> None:
    function = RecordingFunction()
    code = await_command(_entry(function), ["python", PROG, "--bogus", "x"], streams.as_options())
    assert code == 1
    assert function.calls == []
    assert "--bogus" in streams.err.getvalue()
    assert streams.out.getvalue() == ""


def test_domain_error_rejects_future(streams, await_command) -> None:
    failure = CommandError("domain failure", stderr="partial\n", exit_code=3)
    function = RecordingFunction(error=failure)
    with pytest.raises(CommandError) as excinfo:
        await_command(_entry(function), ["python", PROG, "input.txt"], streams.as_options())
    assert excinfo.value is failure
    assert streams.err.getvalue() == ""


def test_none_args_become_missing_argument(streams, await_command) -> None:
    code = await_command(_entry(RecordingFunction()), None, streams.as_options())
    assert code == 1
    assert "Exactly one argument is required." in streams.err.getvalue()


@pytest.mark.parametrize(
    ("args", "error_type"),
    [
        ("python cmd input.txt", InvocationTypeError),
        (42, InvocationTypeError),
        (["python"], InvocationRangeError),
        ([], InvocationRangeError),
    ],
)
def test_malformed_args_are_usage_errors(streams, await_command, args: Any, error_type: type) -> None:
    function = RecordingFunction()
    with pytest.raises(error_type):
        await_command(_entry(function), args, streams.as_options())
    assert function.calls == []
    assert streams.err.getvalue() == ""


def test_options_must_be_a_mapping(await_command) -> None:
    with pytest.raises(InvocationTypeError, match="options must be a mapping"):
        await_command(_entry(RecordingFunction()), ["python", PROG, "x"], ["not", "a", "mapping"])


@pytest.mark.parametrize("key", ["in", "out", "err"])
def test_stream_without_capability_is_rejected(streams, await_command, key: str) -> None:
    options = streams.as_options()
    options[key] = object()
    with pytest.raises(InvocationTypeError, match=key):
        await_command(_entry(RecordingFunction()), ["python", PROG, "x"], options)


def test_none_stream_override_is_rejected(streams, await_command) -> None:
    options = streams.as_options()
    options["out"] = None
    with pytest.raises(InvocationTypeError):
        await_command(_entry(RecordingFunction()), ["python", PROG, "x"], options)


def test_missing_streams_fall_back_to_process_streams(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_err = io.StringIO()
    monkeypatch.setattr(sys, "stderr", fake_err)
    resolved = resolve_streams({"out": io.StringIO()})
    assert resolved.err is fake_err
    assert resolved.in_ is sys.stdin


def test_normalize_args_drops_context_entries() -> None:
    assert normalize_args(("python", "cmd", "a", "b")) == ("a", "b")
    assert normalize_args(["python", "cmd"]) == ()


def test_callback_style_fires_once_on_later_turn(streams) -> None:
    seen: list[tuple[Any, ...]] = []

    async def scenario() -> None:
        result = _entry(RecordingFunction(result=0))(
            ["python", PROG, "input.txt"], streams.as_options(), lambda *args: seen.append(args)
        )
        assert result is None
        assert seen == []
        for _ in range(3):
            await asyncio.sleep(0)

    asyncio.run(scenario())
    assert seen == [(None, 0)]


def test_validation_failure_is_never_inline(streams) -> None:
    seen: list[tuple[Any, ...]] = []

    async def scenario() -> None:
        _entry(RecordingFunction())(["python"], streams.as_options(), lambda *args: seen.append(args))
        assert seen == []
        await asyncio.sleep(0)

    asyncio.run(scenario())
    [(error, code)] = seen
    assert isinstance(error, InvocationRangeError)
    assert code is None


def test_callback_may_be_passed_in_place_of_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "stderr", io.StringIO())
    seen: list[tuple[Any, ...]] = []

    async def scenario() -> None:
        _entry(RecordingFunction())(["python", PROG], lambda *args: seen.append(args))
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert seen == [(None, 1)]
    assert "Exactly one argument is required." in sys.stderr.getvalue()


def test_non_callable_callback_raises_immediately(streams) -> None:
    async def scenario() -> None:
        _entry(RecordingFunction())(["python", PROG, "x"], streams.as_options(), "not callable")

    with pytest.raises(TypeError, match="callback must be callable"):
        asyncio.run(scenario())


def test_requires_running_event_loop(streams) -> None:
    with pytest.raises(RuntimeError):
        _entry(RecordingFunction())(["python", PROG, "x"], streams.as_options(), lambda *_: None)


def test_synchronous_function_failure_propagates_without_completion(streams) -> None:
    seen: list[tuple[Any, ...]] = []

    async def scenario() -> None:
        _entry(i_should_fail)(["python", PROG, "x"], streams.as_options(), lambda *args: seen.append(args))

    with pytest.raises(RuntimeError, match="i should fail"):
        asyncio.run(scenario())
    assert seen == []


def test_synchronous_function_failure_rejects_future(streams, await_command) -> None:
    with pytest.raises(RuntimeError, match="i should fail"):
        await_command(_entry(i_should_fail), ["python", PROG, "x"], streams.as_options())


def test_synchronous_failure_returns_settled_future(streams) -> None:
    async def scenario() -> Any:
        pending = _entry(i_should_fail)(["python", PROG, "x"], streams.as_options())
        assert pending is not None
        assert pending.done()
        return pending.exception()

    error = asyncio.run(scenario())
    assert isinstance(error, RuntimeError)


def test_second_completion_from_function_is_refused(streams) -> None:
    seen: list[tuple[Any, ...]] = []
    refused: list[BaseException] = []

    def twice(options: CallOptions, callback: Any) -> None:
        callback(None, 0)
        try:
            callback(None, 2)
        except RuntimeError as exc:
            refused.append(exc)

    async def scenario() -> None:
        _entry(twice)(["python", PROG, "x"], streams.as_options(), lambda *args: seen.append(args))
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert seen == [(None, 0)]
    assert len(refused) == 1


def test_each_invocation_is_independent(await_command) -> None:
    function = RecordingFunction()
    entry = _entry(function)
    first, second = io.StringIO(), io.StringIO()
    await_command(entry, ["python", PROG, "-v", "a"], {"err": first, "out": io.StringIO()})
    await_command(entry, ["python", PROG, "b"], {"err": second, "out": io.StringIO()})
    assert [call.verbosity for call in function.calls] == [1, 0]
    assert [call.files for call in function.calls] == [("a",), ("b",)]
