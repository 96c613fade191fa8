"""
forksh Shell Module

Provides the command-line shell:
- Lexing and command building
- Built-in commands
- Process dispatch with I/O redirection
- The interactive loop
"""

from .lexer import Token, TokenType, tokenize
from .command import (
    Command,
    Empty,
    Tokens,
    InputRedirect,
    OutputRedirect,
    EMPTY,
    describe,
    is_builtin_leaf,
)
from .parser import CommandParser, build, parse
from .builtins import BuiltinCommands, load_help_text
from .dispatcher import Dispatcher
from .shell import Shell, create_shell

__all__ = [
    # Lexer
    'Token',
    'TokenType',
    'tokenize',
    # Commands
    'Command',
    'Empty',
    'Tokens',
    'InputRedirect',
    'OutputRedirect',
    'EMPTY',
    'describe',
    'is_builtin_leaf',
    # Parser
    'CommandParser',
    'build',
    'parse',
    # Execution
    'BuiltinCommands',
    'load_help_text',
    'Dispatcher',
    'Shell',
    'create_shell',
]
