"""Option grammar and parse adapter built on ``rich_click``.

Purpose
-------
Declare the one option grammar the entry point understands and run raw tokens
through click's parser, reporting the outcome through a completion callback.

Contents
--------
* :func:`build_command` – declarative grammar: help, version, quiet, verbose,
  and the positional ``FILES``.
* :func:`parse_arguments` – parse *tokens* and call the completion exactly
  once with ``(error, parsed, rendered_text)``.

System Role
-----------
Only the dispatcher calls into this module. Click is used purely as a parsing
engine: help and version are plain flags here so their text can be routed to
the injected output stream instead of click echoing to ``sys.stdout`` and
exiting the interpreter.
"""

from __future__ import annotations

from typing import Any, Final, Sequence

import rich_click as click
from click import UsageError

from ...application.ports import ParseCompletion
from ...domain.options import ParsedOptions

COMMAND_HELP: Final[str] = "Run the library function on exactly one argument."

QUIET_HELP: Final[str] = "Print less output"
VERBOSE_HELP: Final[str] = "Print more output"


def build_command(*, version_text: str) -> click.Command:
    """Return a fresh click command describing the entry-point grammar.

    ``version_text`` is rendered verbatim when ``--version`` is given. Unknown
    options are rejected by click, which keeps the grammar strict.
    """

    @click.command(
        help=COMMAND_HELP,
        add_help_option=False,
        context_settings={"obj": {"version_text": version_text}},
    )
    @click.option("-h", "--help", "-?", "show_help", is_flag=True, help="Show this message and exit.")
    @click.option("-V", "--version", "show_version", is_flag=True, help="Show the version and exit.")
    @click.option("-q", "--quiet", count=True, metavar="", help=QUIET_HELP)
    @click.option("-v", "--verbose", count=True, metavar="", help=VERBOSE_HELP)
    @click.argument("files", nargs=-1)
    def command(**_params: Any) -> None:
        """Placeholder callback; the dispatcher consumes the parsed parameters."""

    return command


def parse_arguments(
    command: click.Command,
    tokens: Sequence[str],
    completion: ParseCompletion,
    *,
    prog_name: str,
) -> Any:
    """Parse *tokens* with *command* and report through *completion*.

    Why
        The completion may itself raise (the dispatcher calls the library
        function from inside it). Such an exception must escape instead of
        being mistaken for a parse failure and delivered a second time.

    What
        Calls ``completion(None, parsed, rendered)`` on success and
        ``completion(error, None, rendered)`` on failure, where ``rendered`` is
        usage/help/version text or ``None``.

    Inputs
        prog_name: Name shown in usage lines. Passed explicitly so click never
        guesses the program name from ``sys.argv`` or ``__main__``.

    Examples
    --------
    >>> seen = []
    >>> cmd = build_command(version_text="demo 1.0")
    >>> _ = parse_arguments(cmd, ["-vv", "a.txt"], lambda *a: seen.append(a), prog_name="demo")
    >>> seen[0][1].verbosity, seen[0][1].files
    (2, ('a.txt',))
    """

    called = False
    try:
        ctx = command.make_context(prog_name, list(tokens))
        parsed = _to_parsed(ctx.params)
        rendered = _render_terminal(ctx, parsed)
        called = True
        return completion(None, parsed, rendered)
    except Exception as exc:
        if called:
            raise
        return completion(exc, None, _render_error(exc))


def _to_parsed(params: dict[str, Any]) -> ParsedOptions:
    """Convert click's parameter mapping into :class:`ParsedOptions`."""

    return ParsedOptions(
        files=tuple(params.get("files") or ()),
        quiet=int(params.get("quiet") or 0),
        verbose=int(params.get("verbose") or 0),
        help=bool(params.get("show_help")),
        version=bool(params.get("show_version")),
    )


def _render_terminal(ctx: click.Context, parsed: ParsedOptions) -> str | None:
    """Return help or version text for terminal flags, help taking precedence."""

    if parsed.help:
        return _tidy(ctx.get_help())
    if parsed.version:
        return ctx.obj["version_text"]
    return None


def _render_error(exc: Exception) -> str | None:
    """Render usage plus the error line for click usage errors.

    Errors without a click context (anything not raised by the parser) have no
    usage to show; the dispatcher then falls back to ``Name: message``.
    """

    if isinstance(exc, UsageError) and exc.ctx is not None:
        return f"{_tidy(exc.ctx.get_usage())}\n\nError: {exc.format_message()}"
    return None


def _tidy(text: str) -> str:
    """Drop the column padding and blank framing lines rich adds to rendered text.

    >>> _tidy("   \\n Usage: demo    \\n\\n body  \\n   ")
    ' Usage: demo\\n\\n body'
    """

    lines = [line.rstrip() for line in text.splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)
