#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utils Package - Utility functions and helpers

This package is organized into subpackages:
- core: Core utilities (logging, paths)
"""

# Import paths first (doesn't depend on logging setup)
from utils.core.paths import get_user_data_dir, get_logs_dir


# Lazy imports for logging so that importing utils never installs the TRACE level early
def __getattr__(name):
    """Lazy import for logging helpers"""
    if name in {
        'get_logger', 'setup_logging', 'shutdown_logging', 'log_section',
        'log_success', 'get_log_mode', 'cleanup_logs'
    }:
        from utils.core import logging as _logging
        return getattr(_logging, name)

    raise AttributeError(f"module 'utils' has no attribute '{name}'")

__all__ = [
    # Paths (eagerly imported)
    'get_user_data_dir', 'get_logs_dir',
    # Logging (lazy)
    'get_logger', 'setup_logging', 'shutdown_logging', 'log_section',
    'log_success', 'get_log_mode', 'cleanup_logs',
]
