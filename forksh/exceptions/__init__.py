"""
forksh Exception Hierarchy

All shell exceptions inherit from ShellError.

Architecture:
    ShellError (Base)
    ├── ParseException
    │   ├── MalformedInput
    │   ├── RedirectionError
    │   └── UnsupportedOperatorError
    ├── ExecutionException
    │   ├── SpawnError
    │   ├── ChildWaitError
    │   └── ShellIOError
    ├── ConfigValidationError (forksh.core.config_loader)
    └── ShellPanic
"""

from .shell_exceptions import (
    ShellError,
    ShellPanic,
)

from .parse_exceptions import (
    ParseException,
    MalformedInput,
    RedirectionError,
    UnsupportedOperatorError,
)

from .execution_exceptions import (
    ExecutionException,
    SpawnError,
    ChildWaitError,
    ShellIOError,
)

__all__ = [
    # Base
    'ShellError',
    'ShellPanic',
    # Parsing
    'ParseException',
    'MalformedInput',
    'RedirectionError',
    'UnsupportedOperatorError',
    # Execution
    'ExecutionException',
    'SpawnError',
    'ChildWaitError',
    'ShellIOError',
]
