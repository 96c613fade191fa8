"""
Execution Exceptions

Exceptions related to running commands: creating child processes,
replacing their image, waiting for them and opening the files they
are redirected to.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class ExecutionException(ShellError):
    """
    Base exception for all command execution errors.

    Attributes:
        pid: Process ID associated with the error (if applicable)
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        recoverable: bool = True,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if pid is not None:
            ctx["pid"] = pid
        super().__init__(
            message=message,
            error_code=error_code or 2000,
            recoverable=recoverable,
            context=ctx
        )
        self.pid = pid


class SpawnError(ExecutionException):
    """
    Error during fork() or exec().

    Raised in the parent when fork() fails. Inside a child it is only
    built to format the report; the child then exits.

    Example:
        >>> raise SpawnError("Resource temporarily unavailable", program="ls")
    """

    def __init__(
        self,
        message: str,
        program: Optional[str] = None,
        pid: Optional[int] = None
    ) -> None:
        ctx = {}
        if program:
            ctx["program"] = program
        super().__init__(
            message=message,
            pid=pid,
            error_code=2001,
            context=ctx
        )
        self.program = program


class ChildWaitError(ExecutionException):
    """
    wait() reported that the child does not exist.

    This concerns the wait call itself; a child's exit status is never
    turned into an exception.
    """

    def __init__(
        self,
        message: str,
        pid: int
    ) -> None:
        super().__init__(
            message=message,
            pid=pid,
            error_code=2002
        )


class ShellIOError(ExecutionException):
    """
    A file could not be opened or read.

    Raised by redirection, ``source`` and ``cd``.

    Example:
        >>> raise ShellIOError("No such file or directory", path="in.txt")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        pid: Optional[int] = None
    ) -> None:
        ctx = {}
        if path:
            ctx["path"] = path
        super().__init__(
            message=message,
            pid=pid,
            error_code=2003,
            context=ctx
        )
        self.path = path
