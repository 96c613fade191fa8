"""
Parse Exceptions

Exceptions raised while turning an input line into commands. All of
them reject the current line only; the shell reports them and prompts
again.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class ParseException(ShellError):
    """
    Base exception for lexing and command building errors.

    Attributes:
        line: The offending input line (if known)
    """

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if line is not None:
            ctx["line"] = line
        super().__init__(
            message=message,
            error_code=error_code or 1000,
            recoverable=True,
            context=ctx
        )
        self.line = line


class MalformedInput(ParseException):
    """
    The input line cannot be tokenized.

    Raised for an unterminated double quote and for an empty quoted
    span ("").

    Example:
        >>> raise MalformedInput("unterminated quote", position=4)
    """

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        position: Optional[int] = None
    ) -> None:
        ctx = {}
        if position is not None:
            ctx["position"] = position
        super().__init__(
            message=message,
            line=line,
            error_code=1001,
            context=ctx
        )
        self.position = position


class RedirectionError(ParseException):
    """
    A redirection operator is used incorrectly.

    Common causes:
    - no command before the operator
    - no filename after the operator
    - the same operator used twice in one segment

    Example:
        >>> raise RedirectionError("no destination filename", operator=">")
    """

    def __init__(
        self,
        message: str,
        operator: Optional[str] = None,
        line: Optional[str] = None
    ) -> None:
        ctx = {}
        if operator is not None:
            ctx["operator"] = operator
        super().__init__(
            message=message,
            line=line,
            error_code=1002,
            context=ctx
        )
        self.operator = operator


class UnsupportedOperatorError(ParseException):
    """An operator the lexer knows but the shell cannot execute (``|``)."""

    def __init__(
        self,
        operator: str,
        line: Optional[str] = None
    ) -> None:
        super().__init__(
            message=f"'{operator}': pipelines are not supported",
            line=line,
            error_code=1003,
            context={"operator": operator}
        )
        self.operator = operator
