#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Text detection and segmentation module.

Splits an image containing a single line of text into alternating parts of
text and empty space, column by column, and scores how similar two images
are based on which of their pixels are text.
"""

from dataclasses import dataclass
from typing import List, Union

import numpy as np

from config import DEFAULT_ALPHA_TOLERANCE, DEFAULT_RGB_TOLERANCE, DEFAULT_TRIM_SUB_IMAGES_VERTICALLY
from utils.core.logging import get_logger
from .color import Color, ColorFilter, ColorSimilarityFilter
from .image_helpers import ensure_bgra, horizontal_slice, vertical_slice

log = get_logger()


@dataclass(frozen=True, eq=False)
class TextSubImage:
    """A column-contiguous crop of the source image containing text."""

    sub_image: np.ndarray

    @property
    def width(self) -> int:
        return self.sub_image.shape[1]

    @property
    def height(self) -> int:
        return self.sub_image.shape[0]


@dataclass(frozen=True)
class Space:
    """A range of columns without any text pixel."""

    width: int


ImagePart = Union[TextSubImage, Space]


def filter_text_sub_images(parts: List[ImagePart]) -> List[np.ndarray]:
    """Keep only the sub-images of the text parts, in order."""
    return [part.sub_image for part in parts if isinstance(part, TextSubImage)]


def mask_similarity(mask1: np.ndarray, mask2: np.ndarray) -> float:
    """
    Proportion of positions where two text masks agree, between 0.0 and 1.0.

    Masks of different shapes, or of zero area, score 0.0.
    """
    if mask1.shape != mask2.shape or mask1.size == 0:
        return 0.0
    agreement = mask1 == mask2
    return float(np.count_nonzero(agreement)) / agreement.size


class TextDetector:
    """Detects text based on a ColorFilter matching the color of the text."""

    def __init__(self, text_color_filter: ColorFilter,
                 trim_sub_images_vertically: bool = DEFAULT_TRIM_SUB_IMAGES_VERTICALLY):
        """
        Args:
            text_color_filter: Decides which pixels are part of the text
            trim_sub_images_vertically: Crop the empty rows above and below the
                text of each sub-image, so that text at a slightly different
                vertical position still gives identical sub-images. Disable it
                when the text is always at the same height, for more accurate
                matches.
        """
        self.text_color_filter = text_color_filter
        self.trim_sub_images_vertically = trim_sub_images_vertically

    @classmethod
    def from_text_color(cls, text_color: Color,
                        rgb_tolerance: int = DEFAULT_RGB_TOLERANCE,
                        alpha_tolerance: int = DEFAULT_ALPHA_TOLERANCE,
                        trim_sub_images_vertically: bool = DEFAULT_TRIM_SUB_IMAGES_VERTICALLY) -> "TextDetector":
        """Create a detector treating colors close to text_color as text."""
        return cls(ColorSimilarityFilter(text_color, rgb_tolerance, alpha_tolerance),
                   trim_sub_images_vertically=trim_sub_images_vertically)

    def text_mask(self, image: np.ndarray) -> np.ndarray:
        """Boolean (height, width) array, True where the pixel is text."""
        return self.text_color_filter.mask(ensure_bgra(image))

    def similarity_score(self, img1: np.ndarray, img2: np.ndarray) -> float:
        """
        Proportion of pixels that match between two images, between 0.0 and 1.0.

        A pixel matches if it is text on both images or empty space on both
        images. Images of different sizes score 0.0, even when they only
        differ by a single row.
        """
        if img1.shape[:2] != img2.shape[:2]:
            return 0.0
        return mask_similarity(self.text_mask(img1), self.text_mask(img2))

    def split_text_elements(self, image: np.ndarray) -> List[np.ndarray]:
        """Split the image into sub-images of text elements, left to right."""
        return filter_text_sub_images(self.split_text_and_spaces(image))

    def split_text_and_spaces(self, image: np.ndarray) -> List[ImagePart]:
        """
        Split the image into alternating parts of text and spaces.

        Args:
            image: Image containing a single line of text

        Returns:
            Parts covering every column of the image, left to right. Two
            consecutive parts never have the same kind.
        """
        image = ensure_bgra(image)
        height, width = image.shape[:2]
        if width == 0:
            return []

        mask = self.text_color_filter.mask(image)
        column_has_text = mask.any(axis=0)

        # Columns where the text/space classification differs from the previous column
        boundaries = np.flatnonzero(column_has_text[1:] != column_has_text[:-1]) + 1
        starts = [0] + boundaries.tolist()
        ends = boundaries.tolist() + [width]

        parts: List[ImagePart] = []
        for start, end in zip(starts, ends):
            if column_has_text[start]:
                parts.append(self._extract_text_part(image, mask, start, end))
            else:
                parts.append(Space(width=end - start))

        log.trace(f"Split {width}x{height} image into {len(parts)} parts "
                  f"({sum(isinstance(p, TextSubImage) for p in parts)} text)")
        return parts

    def _extract_text_part(self, image: np.ndarray, mask: np.ndarray, start: int, end: int) -> TextSubImage:
        if not self.trim_sub_images_vertically:
            return TextSubImage(vertical_slice(image, start, end))

        # The run contains text by construction, so there is at least one text row
        text_rows = np.flatnonzero(mask[:, start:end].any(axis=1))
        first_row, last_row = int(text_rows[0]), int(text_rows[-1])
        return TextSubImage(horizontal_slice(image[:, start:end], first_row, last_row + 1))
