"""
forksh Core Module

Configuration handling shared by the shell and its entry point.
"""

from .config_loader import (
    Config,
    ConfigLoader,
    ConfigValidationError,
    LoggingConfig,
    ShellConfig,
    get_config,
)

__all__ = [
    'Config',
    'ConfigLoader',
    'ConfigValidationError',
    'LoggingConfig',
    'ShellConfig',
    'get_config',
]
