#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Text recognizer based on reference images.

Reads a single line of text by splitting the image into text elements and
spaces, then matching each text element against labeled reference images.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from config import (
    DEFAULT_ALPHA_TOLERANCE,
    DEFAULT_MIN_RECOGNITION_SCORE,
    DEFAULT_RGB_TOLERANCE,
    DEFAULT_TRIM_SUB_IMAGES_VERTICALLY,
    SPACE_WIDTH_DIVISOR,
)
from utils.core.logging import get_logger
from .color import Color
from .errors import InvalidConfigurationError, NoAcceptableMatchError
from .image_helpers import ensure_bgra
from .reference_images import ReferenceImage
from .text_detector import ImagePart, Space, TextDetector, TextSubImage, mask_similarity

log = get_logger()


@dataclass(frozen=True)
class ScoredImage:
    """A reference image with its similarity score against a sub-image."""

    reference: ReferenceImage
    score: float


def infer_space_width(reference_images: Sequence[ReferenceImage]) -> int:
    """
    Default minimum width of an actual space between words.

    Narrower gaps between text elements are considered spacing between
    letters of the same word.
    """
    average_width = sum(ref.width for ref in reference_images) / len(reference_images)
    return int(average_width / SPACE_WIDTH_DIVISOR)


class SimpleOcr:
    """
    Reads characters out of an image containing a single line of text.

    Sub-images are often individual characters, but several characters can be
    grouped in one sub-image due to kerning (a lowercase letter after an
    uppercase T or V: Te, To, Va...). Such groups need their own reference
    image.
    """

    def __init__(self, reference_images: Sequence[ReferenceImage],
                 text_detector: TextDetector,
                 min_recognition_score: float = DEFAULT_MIN_RECOGNITION_SCORE,
                 space_width_threshold: Optional[int] = None,
                 measure_time: bool = False):
        """
        Args:
            reference_images: Labeled images of known text, must not be empty
            text_detector: Defines which pixels are part of the text
            min_recognition_score: Minimum score of the best matching reference
                image for a successful recognition. Below that,
                NoAcceptableMatchError is raised.
            space_width_threshold: Minimum width of empty space between two text
                elements that is read as a whitespace character. Inferred from
                the reference images width if not given.
            measure_time: Enable timing measurements for recognition operations
        """
        self.reference_images: List[ReferenceImage] = list(reference_images)
        if not self.reference_images:
            raise InvalidConfigurationError("No reference image provided")
        if not 0.0 <= min_recognition_score <= 1.0:
            raise InvalidConfigurationError(
                f"min_recognition_score must be between 0.0 and 1.0 (got {min_recognition_score})")
        if space_width_threshold is None:
            space_width_threshold = infer_space_width(self.reference_images)
        if space_width_threshold < 0:
            raise InvalidConfigurationError(
                f"space_width_threshold must not be negative (got {space_width_threshold})")

        self.text_detector = text_detector
        # Reference masks never change, only sub-image masks are computed per match
        self._reference_masks = [text_detector.text_mask(ref.image) for ref in self.reference_images]
        self.min_recognition_score = min_recognition_score
        self.space_width_threshold = space_width_threshold
        self.measure_time = measure_time

        # Timing statistics
        self.last_recognition_time = 0.0
        self.avg_recognition_time = 0.0
        self.recognition_call_count = 0

        log.debug(f"Recognizer initialized: {len(self.reference_images)} reference images, "
                  f"min score {min_recognition_score}, space width {space_width_threshold}px")

    @classmethod
    def with_text_color(cls, reference_images: Sequence[ReferenceImage],
                        text_color: Color,
                        rgb_tolerance: int = DEFAULT_RGB_TOLERANCE,
                        alpha_tolerance: int = DEFAULT_ALPHA_TOLERANCE,
                        trim_sub_images_vertically: bool = DEFAULT_TRIM_SUB_IMAGES_VERTICALLY,
                        **kwargs) -> "SimpleOcr":
        """
        Create a recognizer for text of the given color.

        Pixels with colors close enough to text_color are considered part of
        the text. Other keyword arguments are passed to the constructor.
        """
        detector = TextDetector.from_text_color(text_color, rgb_tolerance, alpha_tolerance,
                                                trim_sub_images_vertically=trim_sub_images_vertically)
        return cls(reference_images, detector, **kwargs)

    def recognize_text(self, image: np.ndarray) -> str:
        """
        Recognize the text in an image based on the reference images.

        Args:
            image: Image containing a single line of text

        Returns:
            Recognized text, without leading or trailing whitespace

        Raises:
            NoAcceptableMatchError: a text element matches no reference image well enough
        """
        start_time = time.perf_counter() if self.measure_time else 0
        image = ensure_bgra(image)

        parts = self.text_detector.split_text_and_spaces(image)
        text = "".join(self._recognize_part(part, image) for part in parts).strip()

        if self.measure_time:
            self._record_time((time.perf_counter() - start_time) * 1000)
        log.debug(f"Recognized text: '{text}' ({len(parts)} parts)")
        return text

    def _recognize_part(self, part: ImagePart, original_image: np.ndarray) -> str:
        if isinstance(part, Space):
            return " " if part.width >= self.space_width_threshold else ""
        if isinstance(part, TextSubImage):
            return self._find_closest_reference_text(part.sub_image, original_image)
        raise TypeError(f"Unknown image part: {part!r}")

    def _find_closest_reference_text(self, sub_image: np.ndarray, original_image: np.ndarray) -> str:
        best = self.best_match(sub_image)
        if best.score < self.min_recognition_score:
            log.debug(f"No acceptable match for {sub_image.shape[1]}x{sub_image.shape[0]} sub-image "
                      f"(best: '{best.reference.text}' {best.score:.3f})")
            raise NoAcceptableMatchError(sub_image, original_image, best, self.min_recognition_score)
        log.trace(f"Matched '{best.reference.text}' (score: {best.score:.3f})")
        return best.reference.text

    def similarity_scores(self, sub_image: np.ndarray) -> List[ScoredImage]:
        """Score a sub-image against every reference image, in reference order."""
        sub_image_mask = self.text_detector.text_mask(sub_image)
        return [ScoredImage(ref, mask_similarity(sub_image_mask, ref_mask))
                for ref, ref_mask in zip(self.reference_images, self._reference_masks)]

    def best_match(self, sub_image: np.ndarray) -> ScoredImage:
        """
        Reference image with the highest similarity score.

        Ties go to the reference image that comes first in the list.
        """
        # max() keeps the first of equal elements
        return max(self.similarity_scores(sub_image), key=lambda scored: scored.score)

    def _record_time(self, elapsed_ms: float):
        self.last_recognition_time = elapsed_ms
        self.recognition_call_count += 1
        self.avg_recognition_time = ((self.avg_recognition_time * (self.recognition_call_count - 1))
                                     + elapsed_ms) / self.recognition_call_count
        log.debug(f"[OCR:timing] Recognition: {elapsed_ms:.2f}ms | "
                  f"Avg: {self.avg_recognition_time:.2f}ms | Count: {self.recognition_call_count}")

    def get_timing_stats(self) -> dict:
        """
        Get recognition timing statistics.

        Returns:
            Dictionary with timing statistics:
            - last_recognition_time: Time of last recognition operation (ms)
            - avg_recognition_time: Average recognition operation time (ms)
            - recognition_call_count: Total number of timed recognition calls
        """
        return {
            'last_recognition_time': self.last_recognition_time,
            'avg_recognition_time': self.avg_recognition_time,
            'recognition_call_count': self.recognition_call_count,
            'measure_time': self.measure_time,
        }

    def reset_timing_stats(self):
        """Reset recognition timing statistics."""
        self.last_recognition_time = 0.0
        self.avg_recognition_time = 0.0
        self.recognition_call_count = 0
        log.debug("[OCR:timing] Timing statistics reset")
