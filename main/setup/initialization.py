#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Initialization setup (logging)
"""

import argparse
import logging

from utils.core.logging import cleanup_logs, get_logger, log_section, setup_logging

log = get_logger()


def get_log_mode(args: argparse.Namespace) -> str:
    """Determine log mode based on flags"""
    if args.debug:
        return 'debug'
    if args.verbose:
        return 'verbose'
    return 'customer'


def setup_logging_and_cleanup(args: argparse.Namespace) -> None:
    """Setup logging and clean up old logs"""
    write_logs = getattr(args, "write_logs", True)
    if write_logs:
        cleanup_logs()

    log_mode = get_log_mode(args)
    setup_logging(log_mode, write_logs=write_logs)

    # OpenCV/numpy never log through the logging module, PIL might if present
    logging.getLogger("PIL").setLevel(logging.INFO)

    if log_mode != 'customer':
        log_section(log, "glyphmatch starting", "🚀", {
            "Command": args.command,
            "Verbose Mode": "Enabled" if args.verbose else "Disabled",
            "Log File": "Enabled" if write_logs else "Disabled",
        })
