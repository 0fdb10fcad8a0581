"""Value objects passed between the parser adapter, dispatcher, and library.

Contents
--------
* :class:`ParsedOptions` – structured result of a successful parse.
* :class:`CallOptions` – normalised options handed to the wrapped function.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParsedOptions:
    """Flags and positional arguments recognised by the option grammar.

    ``help`` and ``version`` are terminal: when either is set the dispatcher
    stops after writing the rendered text.
    """

    files: tuple[str, ...] = field(default_factory=tuple)
    quiet: int = 0
    verbose: int = 0
    help: bool = False
    version: bool = False

    @property
    def terminal(self) -> bool:
        """Return ``True`` when help or version output ends the invocation."""

        return self.help or self.version

    @property
    def verbosity(self) -> int:
        """Return the verbosity delta ``verbose - quiet`` (may be negative).

        >>> ParsedOptions(verbose=2, quiet=1).verbosity
        1
        """

        return self.verbose - self.quiet


@dataclass(frozen=True)
class CallOptions:
    """Options the dispatcher passes to the wrapped library function."""

    files: tuple[str, ...]
    verbosity: int = 0

    @classmethod
    def from_parsed(cls, parsed: ParsedOptions) -> "CallOptions":
        """Build call options from a successful parse.

        >>> CallOptions.from_parsed(ParsedOptions(files=("a.txt",), quiet=3))
        CallOptions(files=('a.txt',), verbosity=-3)
        """

        return cls(files=tuple(parsed.files), verbosity=parsed.verbosity)
