#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Path utilities for glyphmatch
Handles user data directories (logs)
"""

import os
from pathlib import Path

from config import APP_NAME


def get_user_data_dir() -> Path:
    """
    Get the user data directory where the application can write files.
    This ensures proper permissions regardless of where the app is installed.
    """
    if os.name == "nt":  # Windows
        # Use %LOCALAPPDATA% for user-specific data (logs)
        localappdata = os.environ.get("LOCALAPPDATA")
        if localappdata:
            return Path(localappdata) / APP_NAME
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile) / "AppData" / "Local" / APP_NAME
        # Last resort: current directory
        return Path.cwd() / f".{APP_NAME}"
    # Linux/macOS: XDG_DATA_HOME or fallback to ~/.local/share
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_logs_dir() -> Path:
    """
    Get the directory holding session log files.
    Creates the directory if it doesn't exist.
    """
    logs_dir = get_user_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
