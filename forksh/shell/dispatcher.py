"""
Command Dispatcher Module

Executes command trees:

    Empty           nothing
    Tokens          built-in in this process, otherwise fork + execvp + wait
    InputRedirect   fork; child binds fd 0 to the file and runs the inner command
    OutputRedirect  fork; child binds fd 1 to the file and runs the inner command

Redirections are applied only in children, so the shell's own stdin
and stdout are never rebound. Nested redirects fork once per layer,
outermost first, which always applies output before input.

Every child leaves through os._exit(); no exception raised in a child
ever unwinds back into the shell's own control flow.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Callable, Iterable, Optional

from .builtins import BuiltinCommands
from .command import Command, Empty, InputRedirect, OutputRedirect, Tokens, describe
from .console import output, flush_standard_streams
from forksh.core.config_loader import ShellConfig, get_config
from forksh.exceptions import (
    ChildWaitError,
    ShellError,
    ShellIOError,
    ShellPanic,
    SpawnError,
)
from forksh.logger import get_logger


STDIN_FILENO = 0
STDOUT_FILENO = 1

INPUT_FLAGS = os.O_RDONLY
OUTPUT_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
CREATE_MODE = 0o666

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 127


class Dispatcher:
    """
    Runs commands, blocking until every process they spawn has exited.

    Example:
        >>> dispatcher = Dispatcher()
        >>> dispatcher.execute(OutputRedirect("out.txt", Tokens(["ls", "-l"])))
    """

    def __init__(self, config: Optional[ShellConfig] = None):
        self._config = config or get_config().shell
        self._logger = get_logger('dispatcher')
        self._builtins = BuiltinCommands(self)

    @property
    def config(self) -> ShellConfig:
        return self._config

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    def execute(self, command: Command) -> None:
        """
        Execute one command.

        Raises:
            SpawnError: If a child process cannot be created
            ChildWaitError: If the child to wait for does not exist
            ShellPanic: If waiting fails for any other reason
        """
        if isinstance(command, Empty):
            return

        if isinstance(command, Tokens):
            self._execute_tokens(command)
        elif isinstance(command, InputRedirect):
            self._spawn(
                lambda: self._run_redirected(STDIN_FILENO, command.path, INPUT_FLAGS, command.inner),
                label=describe(command)
            )
        elif isinstance(command, OutputRedirect):
            self._spawn(
                lambda: self._run_redirected(STDOUT_FILENO, command.path, OUTPUT_FLAGS, command.inner),
                label=describe(command)
            )
        else:
            raise TypeError(f"Not a command: {command!r}")

    def execute_safely(self, command: Command) -> bool:
        """
        Execute one command, reporting recoverable errors.

        Returns:
            False if the command failed with a reported error
        """
        try:
            self.execute(command)
        except ShellError as e:
            if not e.recoverable:
                raise
            self._logger.info(f"Command failed: {e}", context={'command': describe(command)})
            output(e.report())
            return False
        return True

    def execute_all(self, commands: Iterable[Command]) -> None:
        """Execute commands in order; a failure does not stop the rest."""
        for command in commands:
            self.execute_safely(command)

    def _execute_tokens(self, command: Tokens) -> None:
        if self._builtins.is_builtin(command.program):
            self._builtins.execute(command.program, list(command.args))
            return

        self._spawn(lambda: self._exec(command), label=command.program)

    def _spawn(self, child: Callable[[], int], label: str) -> None:
        """Fork, run ``child`` in the new process, and wait for it."""
        flush_standard_streams()

        try:
            pid = os.fork()
        except OSError as e:
            raise SpawnError(f"{label}: fork failed: {e.strerror}", program=label) from e

        if pid == 0:
            self._child_main(child)

        self._logger.debug("Forked child", context={'child': pid, 'command': label})
        self._wait(pid)

    def _child_main(self, child: Callable[[], int]) -> None:
        """Run inside the forked child. Never returns."""
        status = EXIT_FAILURE
        try:
            status = child()
        except ShellError as e:
            output(e.report())
        except Exception as e:
            self._logger.exception(f"Unexpected error in child: {e}", exc=e)
        finally:
            flush_standard_streams()
            os._exit(status)

    def _wait(self, pid: int) -> None:
        try:
            _, status = os.waitpid(pid, 0)
        except ChildProcessError as e:
            raise ChildWaitError(f"wait for child {pid} failed: {e.strerror}", pid=pid) from e
        except OSError as e:
            raise ShellPanic(
                f"wait for child {pid} failed: {e.strerror}",
                context={'pid': pid}
            ) from e

        self._logger.debug(
            "Child exited",
            context={'child': pid, 'exit_code': os.waitstatus_to_exitcode(status)}
        )

    def _exec(self, command: Tokens) -> int:
        """Replace the child image with the program; report if that fails."""
        try:
            os.execvp(command.program, list(command.words))
        except (OSError, ValueError) as e:
            reason = getattr(e, 'strerror', None) or str(e)
            error = SpawnError(f"{command.program}: {reason}", program=command.program, pid=os.getpid())
            self._logger.debug(f"execvp failed: {error}")
            output(error.report())
        return EXIT_NOT_FOUND

    def _run_redirected(self, fd: int, path: str, flags: int, inner: Command) -> int:
        """Child body for a redirect node: rebind ``fd``, then run ``inner``."""
        self._bind(fd, path, flags)
        self.execute(inner)
        return EXIT_SUCCESS

    def _bind(self, fd: int, path: str, flags: int) -> None:
        """
        Point ``fd`` at ``path``.

        On failure the error is reported and ``fd`` is pointed at the null
        device, so the command reads nothing and its output is discarded.
        The shell's own stdin and stdout never reach it.
        """
        try:
            target = os.open(path, flags, CREATE_MODE)
        except OSError as e:
            error = ShellIOError(f"{path}: {e.strerror}", path=path, pid=os.getpid())
            self._logger.debug(f"Redirection failed: {error}")
            output(error.report())
            target = os.open(os.devnull, flags & os.O_ACCMODE)

        if target != fd:
            os.dup2(target, fd)
            os.close(target)
