#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Global constants for glyphmatch
All arbitrary values are centralized here for easy tracking and modification
"""

# =============================================================================
# APPLICATION METADATA
# =============================================================================

APP_NAME = "glyphmatch"                  # Used for the user data directory
APP_VERSION = "0.1.0"                    # Application version


# =============================================================================
# RECOGNITION CONSTANTS
# =============================================================================

# Minimum score the best reference image must reach for a sub-image to be recognized.
# 1.0 means pixel-exact matching (text rendered with a fixed font and color)
DEFAULT_MIN_RECOGNITION_SCORE = 1.0

# Empty space narrower than (average reference width / divisor) is kerning, not a space
SPACE_WIDTH_DIVISOR = 2.5

# Crop text sub-images to their first/last rows containing text
DEFAULT_TRIM_SUB_IMAGES_VERTICALLY = True


# =============================================================================
# COLOR FILTER CONSTANTS
# =============================================================================

DEFAULT_TEXT_COLOR = "#ffffff"           # White text
DEFAULT_RGB_TOLERANCE = 25               # Max per-channel distance for R, G and B
DEFAULT_ALPHA_TOLERANCE = 0              # Max distance for the alpha channel

COLOR_CHANNEL_MAX = 255                  # 8 bits per channel
ARGB_MAX = 0xFFFFFFFF                    # 4 channels packed in 32 bits


# =============================================================================
# REFERENCE IMAGES
# =============================================================================

DEFAULT_REFERENCE_GLOB = "*.png"         # Files read as reference images
DEFAULT_SAMPLE_GLOB = "*"                # Files read as sample images when authoring
DEFAULT_IMAGE_FORMAT = "png"             # Format of sub-images written to disk

# Characters that cannot appear as-is in file names (or are confusing there)
FILENAME_CHAR_ESCAPES = {
    ".": "dot",
    "-": "dash",
    "/": "slash",
    "\\": "backslash",
}

# Characters expected in a complete latin reference set (coverage report)
DEFAULT_EXPECTED_CHARACTERS = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
)


# =============================================================================
# LOGGING CONSTANTS
# =============================================================================

LOG_MAX_FILE_SIZE_MB_DEFAULT = 10        # Rotate session log file above this size
LOG_MAX_AGE_SECONDS = 24 * 60 * 60       # Delete log files older than 1 day
LOG_FILE_PATTERN = "glyphmatch_*.log*"
LOG_TIMESTAMP_FORMAT = "%d-%m-%Y_%H-%M-%S"  # No colons for Windows compatibility
LOG_SEPARATOR_WIDTH = 60                 # Width of log section separators
LOG_QUEUE_MAX_SIZE = 1000                # Console log records waiting to be written


# =============================================================================
# DEFAULT ARGUMENTS
# =============================================================================

DEFAULT_VERBOSE = False
DEFAULT_WRITE_LOGS = True
