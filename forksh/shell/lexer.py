"""
Command Lexer Module

Splits an input line into word and operator tokens.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List
from enum import Enum

from forksh.exceptions import MalformedInput


class TokenType(Enum):
    """Token types produced by the lexer."""
    WORD = "word"
    REDIRECT_IN = "redirect_in"
    REDIRECT_OUT = "redirect_out"
    PIPE = "pipe"
    SEMICOLON = "semicolon"


OPERATORS = {
    '<': TokenType.REDIRECT_IN,
    '>': TokenType.REDIRECT_OUT,
    '|': TokenType.PIPE,
    ';': TokenType.SEMICOLON,
}

WHITESPACE = (' ', '\t', '\n')

QUOTE = '"'


@dataclass(frozen=True)
class Token:
    """A lexed token."""
    type: TokenType
    value: str

    @property
    def is_operator(self) -> bool:
        return self.type is not TokenType.WORD

    @classmethod
    def word(cls, value: str) -> 'Token':
        return cls(TokenType.WORD, value)

    @classmethod
    def operator(cls, char: str) -> 'Token':
        return cls(OPERATORS[char], char)


def tokenize(line: str) -> List[Token]:
    """
    Convert a line into tokens.

    Whitespace separates words. Each of ``< > | ;`` is a token of its
    own, even when written without spaces (``a<b`` is three tokens).
    Text between double quotes is one word taken verbatim, operators
    and whitespace included.

    Args:
        line: Input line

    Returns:
        Tokens in input order

    Raises:
        MalformedInput: On an unterminated or empty quoted string

    Example:
        >>> [t.value for t in tokenize('cat "my file" > out')]
        ['cat', 'my file', '>', 'out']
    """
    tokens: List[Token] = []
    current = ""
    i = 0

    while i < len(line):
        char = line[i]

        if char in WHITESPACE:
            if current:
                tokens.append(Token.word(current))
                current = ""
            i += 1
            continue

        if char in OPERATORS:
            if current:
                tokens.append(Token.word(current))
                current = ""
            tokens.append(Token.operator(char))
            i += 1
            continue

        if char == QUOTE:
            if current:
                tokens.append(Token.word(current))
                current = ""

            end = line.find(QUOTE, i + 1)
            if end == -1:
                raise MalformedInput("unterminated quote", line=line, position=i)
            if end == i + 1:
                raise MalformedInput("empty quoted string", line=line, position=i)

            tokens.append(Token.word(line[i + 1:end]))
            i = end + 1
            continue

        current += char
        i += 1

    if current:
        tokens.append(Token.word(current))

    return tokens
