"""
Command Parser Module

Builds command trees from lexer tokens.

A line is first split on ``;`` into independent segments. Inside a
segment the ``>`` redirection is peeled off first, then ``<``, so the
resulting nesting is always OutputRedirect -> InputRedirect -> Tokens
regardless of the order the operators were written in.

Author: YSNRFD
Version: 1.0.0
"""

from typing import List, Optional, Tuple

from .command import Command, InputRedirect, OutputRedirect, Tokens, EMPTY
from .lexer import Token, TokenType, tokenize
from forksh.exceptions import RedirectionError, UnsupportedOperatorError
from forksh.logger import get_logger


COMMENT = '#'


class CommandParser:
    """
    Turns token sequences into command trees.

    Handles:
    - Sequencing (;)
    - Output redirection (>)
    - Input redirection (<)

    A bare ``|`` is rejected; pipelines are not supported.

    Example:
        >>> parser = CommandParser()
        >>> parser.parse("sort < names.txt > sorted.txt ; wc -l sorted.txt")
        [OutputRedirect(path='sorted.txt', inner=InputRedirect(...)), Tokens(...)]
    """

    def __init__(self):
        self._logger = get_logger('parser')

    def parse(self, line: str) -> List[Command]:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            One command per ``;`` segment; ``[Empty()]`` for a blank
            or comment line

        Raises:
            MalformedInput: If the line cannot be tokenized
            RedirectionError: If a redirection is misused
            UnsupportedOperatorError: If the line contains ``|``
        """
        line = line.strip()

        if not line or line.startswith(COMMENT):
            return [EMPTY]

        commands = self.build(tokenize(line), line=line)
        self._logger.debug(
            f"Parsed {len(commands)} command(s)",
            context={'line': line}
        )
        return commands

    def build(self, tokens: List[Token], line: Optional[str] = None) -> List[Command]:
        """
        Build commands from tokens.

        Args:
            tokens: Output of tokenize()
            line: Source line, only used in error context

        Returns:
            One command per non-empty ``;`` segment, or ``[Empty()]``
        """
        commands = [
            self._build_segment(segment, line)
            for segment in self._split_sequence(tokens)
        ]
        return commands or [EMPTY]

    @staticmethod
    def _split_sequence(tokens: List[Token]) -> List[List[Token]]:
        """Split on ``;``, dropping the separators and empty segments."""
        segments: List[List[Token]] = []
        current: List[Token] = []

        for token in tokens:
            if token.type == TokenType.SEMICOLON:
                if current:
                    segments.append(current)
                current = []
            else:
                current.append(token)

        if current:
            segments.append(current)

        return segments

    def _build_segment(self, tokens: List[Token], line: Optional[str]) -> Command:
        """Build one segment: output redirect, then input redirect, then words."""
        if not tokens:
            return EMPTY

        for token in tokens:
            if token.type == TokenType.PIPE:
                raise UnsupportedOperatorError(token.value, line=line)

        rest, destination = self._split_redirect(
            tokens, TokenType.REDIRECT_OUT, "output", line
        )
        inner = self._build_input(rest, line)

        if destination is None:
            return inner
        return OutputRedirect(destination, inner)

    def _build_input(self, tokens: List[Token], line: Optional[str]) -> Command:
        rest, source = self._split_redirect(
            tokens, TokenType.REDIRECT_IN, "input", line
        )
        inner = self._build_words(rest, line)

        if source is None:
            return inner
        return InputRedirect(source, inner)

    @staticmethod
    def _build_words(tokens: List[Token], line: Optional[str]) -> Command:
        for token in tokens:
            if token.is_operator:
                raise RedirectionError(
                    f"unexpected '{token.value}'",
                    operator=token.value,
                    line=line
                )

        if not tokens:
            return EMPTY
        return Tokens(token.value for token in tokens)

    @staticmethod
    def _split_redirect(
        tokens: List[Token],
        operator: TokenType,
        direction: str,
        line: Optional[str]
    ) -> Tuple[List[Token], Optional[str]]:
        """
        Remove one redirection from a segment.

        The token right after the operator is the file; anything after
        the file is kept as further arguments of the command, so
        ``exe > out -v`` runs ``exe -v``.

        Returns:
            (remaining tokens, path) with path None if there is no
            redirection of this kind
        """
        positions = [i for i, token in enumerate(tokens) if token.type == operator]

        if not positions:
            return tokens, None

        symbol = tokens[positions[0]].value

        if len(positions) > 1:
            raise RedirectionError(
                f"{direction} redirected more than once",
                operator=symbol,
                line=line
            )

        index = positions[0]
        before = tokens[:index]
        after = tokens[index + 1:]

        if not before:
            raise RedirectionError(
                "no command before redirection",
                operator=symbol,
                line=line
            )

        if not after or after[0].type != TokenType.WORD:
            raise RedirectionError(
                "no destination filename",
                operator=symbol,
                line=line
            )

        return before + after[1:], after[0].value


_parser: Optional[CommandParser] = None


def _default_parser() -> CommandParser:
    global _parser
    if _parser is None:
        _parser = CommandParser()
    return _parser


def build(tokens: List[Token]) -> List[Command]:
    """Build commands from tokens with the default parser."""
    return _default_parser().build(tokens)


def parse(line: str) -> List[Command]:
    """Tokenize and build a line with the default parser."""
    return _default_parser().parse(line)
