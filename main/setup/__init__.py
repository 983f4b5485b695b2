#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Setup subpackage
"""

from .arguments import setup_arguments
from .initialization import setup_logging_and_cleanup

__all__ = [
    'setup_arguments',
    'setup_logging_and_cleanup',
]
