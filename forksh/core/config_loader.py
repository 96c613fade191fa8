"""
forksh Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Default value handling
- Dumping the active configuration
- Type-safe access to configuration values

Author: YSNRFD
Version: 1.0.0
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import threading

from forksh.exceptions import ShellError


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config.json'
DEFAULT_HELP_PATH = Path(__file__).resolve().parent.parent / 'help.txt'


class ConfigValidationError(ShellError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            error_code=3001,
            recoverable=True,
            context={"path": path} if path else None
        )
        self.path = path


@dataclass
class ShellConfig:
    """Interactive shell settings."""
    prompt: str = "shell $ "
    help_file: str = ""
    show_help_on_start: bool = True
    goodbye_message: str = "Goodbye"
    max_source_depth: int = 16

    @property
    def help_path(self) -> Path:
        """Help text resource, falling back to the packaged one."""
        return Path(self.help_file).expanduser() if self.help_file else DEFAULT_HELP_PATH


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: str = ""
    console_output: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the shell.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('config.json')
        >>> print(config.shell.prompt)
        shell $
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigValidationError: If the file cannot be loaded or parsed
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigValidationError(
                f"Configuration file not found: {config_path}",
                path=str(config_path)
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f"Invalid JSON in configuration file: {e}",
                path=str(config_path)
            )
        except OSError as e:
            raise ConfigValidationError(
                f"Cannot read configuration file: {e}",
                path=str(config_path)
            )

        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration root must be a JSON object",
                path=str(config_path)
            )

        self._config = self._parse_config(data)
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        # Parse shell config
        if 'shell' in data:
            shell_data = data['shell']
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                help_file=shell_data.get('help_file', config.shell.help_file),
                show_help_on_start=shell_data.get('show_help_on_start', config.shell.show_help_on_start),
                goodbye_message=shell_data.get('goodbye_message', config.shell.goodbye_message),
                max_source_depth=shell_data.get('max_source_depth', config.shell.max_source_depth),
            )

        # Parse logging config
        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        self._validate(config)
        return config

    @staticmethod
    def _validate(config: Config) -> None:
        """Check values the shell cannot work with."""
        if not isinstance(config.shell.prompt, str):
            raise ConfigValidationError("shell.prompt must be a string")
        if not isinstance(config.shell.max_source_depth, int) or config.shell.max_source_depth < 1:
            raise ConfigValidationError("shell.max_source_depth must be a positive integer")
        valid_levels = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        if str(config.logging.level).upper() not in valid_levels:
            raise ConfigValidationError(
                f"logging.level must be one of {', '.join(valid_levels)}"
            )

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def reset(self) -> None:
        """Drop any loaded configuration and go back to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            else:
                return obj

        return dataclass_to_dict(self.config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
