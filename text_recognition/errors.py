#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions raised by the text recognition package.
"""

from typing import Optional

import numpy as np


class InvalidConfigurationError(ValueError):
    """Raised eagerly when a component is built with unusable settings."""


class NoAcceptableMatchError(Exception):
    """
    No reference image matched a sub-image with a sufficient score.

    This usually means a reference image is missing for the character(s) in
    question. The unmatched sub-image is kept on the exception so it can be
    saved and labeled manually.
    """

    def __init__(self, unmatched_sub_image: np.ndarray, original_image: np.ndarray,
                 best_match: Optional[object] = None, min_recognition_score: Optional[float] = None):
        self.unmatched_sub_image = unmatched_sub_image
        self.original_image = original_image
        self.best_match = best_match
        self.min_recognition_score = min_recognition_score
        height, width = unmatched_sub_image.shape[:2]
        message = f"No reference image matches the {width}x{height} sub-image"
        if best_match is not None:
            message += (f" (best: '{best_match.reference.text}' with score {best_match.score:.3f}, "
                        f"required {min_recognition_score})")
        super().__init__(message)
