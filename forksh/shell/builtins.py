"""
Shell Built-in Commands

Commands the dispatcher runs inside the shell process itself, without
forking: cd, source and help.

Author: YSNRFD
Version: 1.0.0
"""

import os
from pathlib import Path
from typing import Callable, List, TYPE_CHECKING

from .console import output
from .parser import CommandParser
from forksh.exceptions import (
    ExecutionException,
    ParseException,
    ShellError,
    ShellIOError,
)
from forksh.logger import get_logger

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


def load_help_text(path: Path) -> str:
    """
    Read the help message resource.

    Raises:
        ShellIOError: If the file cannot be read
    """
    try:
        return Path(path).read_text(encoding='utf-8')
    except OSError as e:
        raise ShellIOError(
            f"help: cannot read {path}: {e.strerror}",
            path=str(path)
        ) from e


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the shell without
    creating a new process, so ``cd`` changes the shell's own
    working directory.
    """

    def __init__(self, dispatcher: 'Dispatcher'):
        """
        Initialize built-in commands.

        Args:
            dispatcher: Dispatcher used to run sourced commands
        """
        self._dispatcher = dispatcher
        self._parser = CommandParser()
        self._logger = get_logger('builtins')
        self._source_depth = 0
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'cd': self.cmd_cd,
            'source': self.cmd_source,
            'help': self.cmd_help,
        }

    @property
    def names(self) -> frozenset:
        """Names of all built-in commands."""
        return frozenset(self._commands)

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Recoverable errors are reported here; a ShellPanic passes
        through.

        Args:
            name: Command name
            args: Command arguments

        Returns:
            Exit code
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127

        self._logger.debug(f"Running built-in {name}", context={'args': args})
        try:
            return cmd(args)
        except ShellError as e:
            if not e.recoverable:
                raise
            self._logger.info(f"{name} failed: {e}")
            output(e.report())
            return 1

    # Command implementations

    def cmd_cd(self, args: List[str]) -> int:
        """Change directory."""
        path = args[0] if args else os.path.expanduser('~')

        try:
            os.chdir(path)
        except OSError as e:
            raise ShellIOError(
                f"cd: {e.strerror}. Path was {path}",
                path=path
            ) from e

        return 0

    def cmd_source(self, args: List[str]) -> int:
        """
        Run every line of a file as a command line.

        A line that fails to parse stops the rest of the file. A command
        that fails to run does not.
        """
        if not args:
            output("usage: source <file>")
            return 2

        path = args[0]
        max_depth = self._dispatcher.config.max_source_depth

        if self._source_depth >= max_depth:
            raise ExecutionException(
                f"source: {path}: nested too deeply (limit {max_depth})",
                context={'path': path}
            )

        try:
            script = open(path, 'r', encoding='utf-8', errors='replace')
        except OSError as e:
            raise ShellIOError(
                f"source: {path}: {e.strerror}",
                path=path
            ) from e

        self._source_depth += 1
        try:
            with script:
                for lineno, line in enumerate(script, start=1):
                    try:
                        commands = self._parser.parse(line)
                    except ParseException as e:
                        output(f"forksh: {path}:{lineno}: {e.message}")
                        return 1
                    self._dispatcher.execute_all(commands)
        finally:
            self._source_depth -= 1

        return 0

    def cmd_help(self, args: List[str]) -> int:
        """Display help information."""
        output(load_help_text(self._dispatcher.config.help_path), newline=False)
        return 0
