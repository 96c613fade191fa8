"""
Shell Exceptions

Base exceptions for the forksh shell. Every error raised by the shell
derives from ShellError, which carries an error code, a recoverability
flag and optional context for logging.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ShellError(Exception):
    """
    Base exception for all shell errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        recoverable: Whether the interactive loop may continue
        context: Additional context about the error

    Example:
        >>> raise ShellError("Something went wrong", error_code=1)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        recoverable: bool = True,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 0
        self.recoverable = recoverable
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"recoverable={self.recoverable})"
        )

    def report(self) -> str:
        """Message shown to the user at the prompt."""
        return f"forksh: {self.message}"


class ShellPanic(ShellError):
    """
    Unrecoverable internal failure.

    Raised when an invariant the shell relies on no longer holds, for
    example a wait() call failing for a reason other than a missing
    child. The interactive loop does not catch it; the process exits.

    Example:
        >>> raise ShellPanic("waitpid failed: Bad file descriptor")
    """

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=9999,
            recoverable=False,
            context=context
        )
