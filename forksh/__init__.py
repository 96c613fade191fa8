"""
forksh - a small UNIX command interpreter

Reads a line, splits it into tokens, builds a command tree describing
sequencing (;) and redirection (< >), and runs it with fork/exec.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .shell.shell import Shell, create_shell
from .shell.parser import parse
from .shell.lexer import tokenize

__all__ = [
    'Shell',
    'create_shell',
    'parse',
    'tokenize',
]
