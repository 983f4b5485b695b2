#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Main entry point for glyphmatch
"""

import sys
from typing import Optional, Sequence

# Python version check
MIN_PYTHON = (3, 9)
if sys.version_info < MIN_PYTHON:
    raise RuntimeError(
        f"glyphmatch requires Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]} or newer. "
        "Please upgrade your interpreter."
    )

from .commands import COMMANDS
from .setup.arguments import setup_arguments
from .setup.initialization import setup_logging_and_cleanup

from text_recognition import InvalidConfigurationError
from utils.core.logging import get_logger, shutdown_logging

log = get_logger()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Program entry point: parse arguments and run the requested command."""
    args = setup_arguments(argv)
    setup_logging_and_cleanup(args)

    try:
        return COMMANDS[args.command](args)
    except InvalidConfigurationError as e:
        log.error(f"Invalid configuration: {e}")
        return 2
    except (ValueError, OSError) as e:
        log.error(f"{type(e).__name__}: {e}")
        return 1
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
