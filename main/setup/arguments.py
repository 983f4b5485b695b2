#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line argument parsing
"""

import argparse
from typing import Optional, Sequence

from config import (
    APP_VERSION,
    DEFAULT_ALPHA_TOLERANCE,
    DEFAULT_EXPECTED_CHARACTERS,
    DEFAULT_MIN_RECOGNITION_SCORE,
    DEFAULT_REFERENCE_GLOB,
    DEFAULT_RGB_TOLERANCE,
    DEFAULT_SAMPLE_GLOB,
    DEFAULT_TEXT_COLOR,
    DEFAULT_VERBOSE,
    DEFAULT_WRITE_LOGS,
)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def _score(value: str) -> float:
    number = float(value)
    if not 0.0 <= number <= 1.0:
        raise argparse.ArgumentTypeError(f"must be between 0.0 and 1.0: {value}")
    return number


def _add_detector_arguments(parser: argparse.ArgumentParser) -> None:
    """Options defining which pixels are text"""
    parser.add_argument("--text-color", type=str, default=DEFAULT_TEXT_COLOR,
                        help="Color of the text, as RRGGBB or AARRGGBB hex (default: %(default)s)")
    parser.add_argument("--rgb-tolerance", type=_non_negative_int, default=DEFAULT_RGB_TOLERANCE,
                        help="Max difference on each of the R, G, B channels (default: %(default)s)")
    parser.add_argument("--alpha-tolerance", type=_non_negative_int, default=DEFAULT_ALPHA_TOLERANCE,
                        help="Max difference on the alpha channel (default: %(default)s)")
    parser.add_argument("--no-trim", action="store_false", dest="trim_vertically",
                        help="Keep the full image height for text sub-images")


def setup_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse and return command line arguments"""
    ap = argparse.ArgumentParser(
        prog="glyphmatch",
        description="glyphmatch - recognize text rendered with a known font and color"
    )

    # General arguments
    ap.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    ap.add_argument("--verbose", action="store_true", default=DEFAULT_VERBOSE,
                    help="Enable verbose logging (developer mode - shows all technical details)")
    ap.add_argument("--debug", action="store_true", default=False,
                    help="Enable ultra-detailed debug logging (includes every match score)")
    ap.add_argument("--no-log-file", action="store_false", dest="write_logs", default=DEFAULT_WRITE_LOGS,
                    help="Do not write a session log file")

    commands = ap.add_subparsers(dest="command", required=True)

    # Recognition
    recognize = commands.add_parser("recognize", help="Recognize the text of images")
    recognize.add_argument("images", nargs="+", help="Images containing a single line of text")
    recognize.add_argument("--references", required=True,
                           help="Directory of reference images named after their text")
    recognize.add_argument("--references-glob", default=DEFAULT_REFERENCE_GLOB,
                           help="Pattern selecting reference image files (default: %(default)s)")
    recognize.add_argument("--min-score", type=_score, default=DEFAULT_MIN_RECOGNITION_SCORE,
                           help="Minimum similarity score of the best match (default: %(default)s)")
    recognize.add_argument("--space-width", type=_non_negative_int, default=None,
                           help="Minimum gap width read as a space (default: inferred from references)")
    recognize.add_argument("--unmatched-dir", default=None,
                           help="Save unrecognized sub-images to this directory for labeling")
    _add_detector_arguments(recognize)

    # Reference set authoring
    split = commands.add_parser("split", help="Split sample images into unique sub-images to label")
    split.add_argument("samples_dir", help="Directory of sample images")
    split.add_argument("output_dir", help="Directory receiving the sub-images")
    split.add_argument("--glob", default=DEFAULT_SAMPLE_GLOB,
                       help="Pattern selecting sample image files (default: %(default)s)")
    _add_detector_arguments(split)

    split_chars = commands.add_parser("split-chars",
                                      help="Split a sample image into sub-images named after its text")
    split_chars.add_argument("image", help="Sample image")
    split_chars.add_argument("text", help="Text of the sample image")
    split_chars.add_argument("output_dir", help="Directory receiving the sub-images")
    _add_detector_arguments(split_chars)

    coverage = commands.add_parser("coverage", help="Report which characters have reference images")
    coverage.add_argument("references", help="Directory of reference images")
    coverage.add_argument("--references-glob", default=DEFAULT_REFERENCE_GLOB,
                          help="Pattern selecting reference image files (default: %(default)s)")
    coverage.add_argument("--expected", default=DEFAULT_EXPECTED_CHARACTERS,
                          help="Characters that should have a reference image")

    return ap.parse_args(argv)
