#!/usr/bin/env python3
"""
forksh - main entry point

Usage:
    forksh [--config PATH]            interactive shell
    forksh [--config PATH] SCRIPT     run SCRIPT as with ``source`` and exit
    forksh [--config PATH] --show-config
                                      print the active configuration as JSON

Author: YSNRFD
Version: 1.0.0
"""

import json
import sys
from typing import List, Optional

from forksh.core.config_loader import (
    ConfigLoader,
    ConfigValidationError,
    DEFAULT_CONFIG_PATH,
)
from forksh.exceptions import ShellPanic
from forksh.logger import Logger, LogLevel, get_logger
from forksh.shell.shell import Shell


USAGE = "usage: forksh [--config PATH] [--show-config | SCRIPT]"


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for forksh.

    Start-up sequence:
    1. Load configuration
    2. Initialize logging
    3. Start the shell (or run the script)

    Returns:
        Process exit status
    """
    args = sys.argv[1:] if argv is None else list(argv)
    config_path = str(DEFAULT_CONFIG_PATH)
    script = None
    show_config = False

    while args:
        arg = args.pop(0)
        if arg in ('-h', '--help'):
            print(USAGE)
            return 0
        if arg == '--config':
            if not args:
                print(USAGE, file=sys.stderr)
                return 2
            config_path = args.pop(0)
        elif arg == '--show-config':
            show_config = True
        elif script is None:
            script = arg
        else:
            print(USAGE, file=sys.stderr)
            return 2

    try:
        loader = ConfigLoader()
        config = loader.load(config_path)
    except ConfigValidationError as e:
        print(f"forksh: {e.message}", file=sys.stderr)
        return 2

    if show_config:
        if script is not None:
            print(USAGE, file=sys.stderr)
            return 2
        print(json.dumps(loader.to_dict(), indent=4))
        return 0

    try:
        Logger.initialize(
            level=LogLevel.from_name(config.logging.level),
            log_file=config.logging.log_file or None,
            use_colors=config.logging.use_colors,
            console_output=config.logging.console_output,
        )
    except OSError as e:
        print(f"forksh: cannot open log file: {e}", file=sys.stderr)
        return 2

    logger = get_logger('main')
    logger.info("forksh starting", context={'config': config_path})

    shell = Shell(config.shell)

    try:
        if script is not None:
            return shell.run_script(script)
        return shell.run()
    except ShellPanic as e:
        logger.critical(f"Shell panic: {e}")
        print(e.report())
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())
