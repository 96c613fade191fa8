"""
Command Model

The command tree built from one input segment:

    OutputRedirect(path)      optional, outermost
      InputRedirect(path)     optional
        Tokens(words)         program and arguments

Nodes are immutable and compare by value. A redirect node owns its
single inner command.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union


@dataclass(frozen=True)
class Empty:
    """A command that does nothing."""

    def __repr__(self) -> str:
        return "Empty()"


@dataclass(frozen=True)
class Tokens:
    """A program name followed by its arguments."""
    words: Tuple[str, ...]

    def __init__(self, words: Iterable[str]):
        words = tuple(words)
        if not words:
            raise ValueError("Tokens requires at least one word")
        object.__setattr__(self, 'words', words)

    @property
    def program(self) -> str:
        return self.words[0]

    @property
    def args(self) -> Tuple[str, ...]:
        return self.words[1:]


@dataclass(frozen=True)
class InputRedirect:
    """Run ``inner`` with standard input read from ``path``."""
    path: str
    inner: 'Command'


@dataclass(frozen=True)
class OutputRedirect:
    """Run ``inner`` with standard output written to ``path``."""
    path: str
    inner: 'Command'


Command = Union[Empty, Tokens, InputRedirect, OutputRedirect]

EMPTY = Empty()


def is_builtin_leaf(command: Command, names: Iterable[str]) -> bool:
    """True if ``command`` is a bare Tokens node naming one of ``names``."""
    return isinstance(command, Tokens) and command.program in names


def describe(command: Command) -> str:
    """Render a command tree back into shell syntax, for logs."""
    if isinstance(command, Empty):
        return ""
    if isinstance(command, Tokens):
        return " ".join(
            f'"{word}"' if any(c in word for c in ' \t<>|;') else word
            for word in command.words
        )
    if isinstance(command, InputRedirect):
        return f"{describe(command.inner)} < {command.path}"
    if isinstance(command, OutputRedirect):
        return f"{describe(command.inner)} > {command.path}"
    raise TypeError(f"Not a command: {command!r}")
