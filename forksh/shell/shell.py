"""
forksh Shell Module

The interactive read-parse-dispatch loop.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional

from .builtins import load_help_text
from .command import Command, EMPTY, Empty, describe, is_builtin_leaf
from .console import output
from .dispatcher import Dispatcher
from .parser import CommandParser
from forksh.core.config_loader import ShellConfig, get_config
from forksh.exceptions import ParseException, ShellError, ShellPanic
from forksh.logger import get_logger


class Shell:
    """
    forksh Interactive Shell.

    Provides:
    - Command parsing
    - Built-in commands (cd, source, help, prev, quit)
    - External programs via fork/exec
    - I/O redirection
    - Command sequencing

    ``quit``, ``prev`` and ``help`` are recognised when they make up
    the whole line, case-insensitively. ``prev`` runs the last
    non-built-in command again without replacing it.

    Example:
        >>> shell = Shell()
        >>> shell.run()
    """

    LOOP_COMMANDS = ('quit', 'prev', 'help')

    def __init__(self, config: Optional[ShellConfig] = None):
        self._config = config or get_config().shell
        self._logger = get_logger('shell')
        self._parser = CommandParser()
        self._dispatcher = Dispatcher(self._config)
        self._exiting = False

        # Session state
        self._previous: Command = EMPTY

        # Prompt
        self._prompt = self._config.prompt

    @property
    def previous(self) -> Command:
        """The command ``prev`` would run."""
        return self._previous

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def exiting(self) -> bool:
        return self._exiting

    def run(self) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop. It ends on ``quit`` or end of input.

        Returns:
            Exit code

        Raises:
            ShellPanic: On an unrecoverable internal failure
        """
        self._logger.info("Shell starting")

        if self._config.show_help_on_start:
            self._show_help()

        while not self._exiting:
            try:
                try:
                    line = input(self._prompt)
                except EOFError:
                    output("")
                    break
                except KeyboardInterrupt:
                    output("^C")
                    continue

                self.execute_line(line)

            except ShellPanic:
                raise
            except Exception as e:
                self._logger.exception(f"Shell error: {e}", exc=e)
                output(f"forksh: error: {e}")

        self._logger.info("Shell stopped")
        return 0

    def execute_line(self, line: str) -> None:
        """
        Execute one line of user input.

        Args:
            line: Raw input line
        """
        line = line.strip()
        keyword = line.lower()

        if keyword == 'quit':
            output(self._config.goodbye_message)
            self.request_exit()
            return

        if keyword == 'prev':
            self._logger.debug("Repeating previous command", context={'command': describe(self._previous)})
            self._dispatcher.execute_safely(self._previous)
            return

        if keyword == 'help':
            self._show_help()
            return

        try:
            commands = self._parser.parse(line)
        except ParseException as e:
            self._logger.info(f"Rejected line: {e}")
            output(e.report())
            return

        self._logger.debug(
            "Dispatching",
            context={'commands': [describe(c) for c in commands]}
        )

        for command in commands:
            self._dispatcher.execute_safely(command)
            if self._should_remember(command):
                self._previous = command

    def _should_remember(self, command: Command) -> bool:
        if isinstance(command, Empty):
            return False
        return not is_builtin_leaf(command, self._dispatcher.builtins.names)

    def _show_help(self) -> None:
        try:
            output(load_help_text(self._config.help_path), newline=False)
        except ShellError as e:
            output(e.report())

    def run_script(self, path: str) -> int:
        """
        Run a script file non-interactively.

        Args:
            path: Script path

        Returns:
            Exit code of the ``source`` built-in
        """
        return self._dispatcher.builtins.execute('source', [path])

    def request_exit(self) -> None:
        """Request the shell to exit."""
        self._exiting = True


def create_shell(config: Optional[ShellConfig] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(config)
