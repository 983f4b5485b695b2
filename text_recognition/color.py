#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Colors and color filters.

A ColorFilter decides which pixels are "ink", i.e. part of the text to read.
Everything else in the recognition pipeline (segmentation, similarity scores)
is built on top of this single predicate.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar

import numpy as np

from config import (
    ARGB_MAX,
    COLOR_CHANNEL_MAX,
    DEFAULT_ALPHA_TOLERANCE,
    DEFAULT_RGB_TOLERANCE,
)
from .errors import InvalidConfigurationError


@dataclass(frozen=True)
class Color:
    """
    An ARGB color.

    The 4 channels (alpha, red, green, blue) are packed into a single 32-bit
    unsigned integer, 8 bits each, alpha in the most significant byte.
    """

    argb: int

    WHITE: ClassVar["Color"]
    BLACK: ClassVar["Color"]
    TRANSPARENT: ClassVar["Color"]

    def __post_init__(self):
        if not 0 <= self.argb <= ARGB_MAX:
            raise ValueError(f"ARGB value out of range: {self.argb:#x}")

    @classmethod
    def from_argb(cls, alpha: int, red: int, green: int, blue: int) -> "Color":
        """Create a color from its 4 channels, each in [0, 255]."""
        for name, value in (("alpha", alpha), ("red", red), ("green", green), ("blue", blue)):
            if not 0 <= value <= COLOR_CHANNEL_MAX:
                raise ValueError(f"{name} channel out of range: {value}")
        return cls((alpha << 24) | (red << 16) | (green << 8) | blue)

    @classmethod
    def from_bgra(cls, pixel) -> "Color":
        """Create a color from a BGRA pixel (OpenCV channel order)."""
        blue, green, red, alpha = (int(c) for c in pixel)
        return cls.from_argb(alpha, red, green, blue)

    @classmethod
    def parse(cls, text: str) -> "Color":
        """
        Parse a hex color.

        Accepts an optional '#' or '0x' prefix followed by 6 (RGB, opaque)
        or 8 (ARGB) hex digits.
        """
        digits = text.strip().lower()
        if digits.startswith("#"):
            digits = digits[1:]
        elif digits.startswith("0x"):
            digits = digits[2:]
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid color {text!r}: expected 6 or 8 hex digits")
        try:
            value = int(digits, 16)
        except ValueError:
            raise ValueError(f"Invalid color {text!r}: not hexadecimal") from None
        if len(digits) == 6:
            value |= 0xFF000000
        return cls(value)

    @property
    def alpha(self) -> int:
        return (self.argb >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self.argb >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.argb >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.argb & 0xFF

    def to_bgra(self) -> tuple:
        """Channels in OpenCV BGRA order."""
        return self.blue, self.green, self.red, self.alpha

    def __str__(self) -> str:
        return f"0x{self.argb:x}"


Color.WHITE = Color(0xFFFFFFFF)
Color.BLACK = Color(0xFF000000)
Color.TRANSPARENT = Color(0x00000000)


class ColorFilter(ABC):
    """A predicate on colors, deciding which pixels are part of the text."""

    @abstractmethod
    def matches(self, color: Color) -> bool:
        ...

    def mask(self, image: np.ndarray) -> np.ndarray:
        """
        Evaluate the filter on every pixel of a BGRA image.

        Returns a boolean array of shape (height, width). Subclasses can
        override this with a vectorized version; the result must be the
        same as calling matches() on each pixel.
        """
        height, width = image.shape[:2]
        result = np.zeros((height, width), dtype=bool)
        for row in range(height):
            for col in range(width):
                result[row, col] = self.matches(Color.from_bgra(image[row, col]))
        return result


class PredicateColorFilter(ColorFilter):
    """A ColorFilter backed by an arbitrary function of the color."""

    def __init__(self, predicate: Callable[[Color], bool]):
        self.predicate = predicate

    def matches(self, color: Color) -> bool:
        return bool(self.predicate(color))


class ColorSimilarityFilter(ColorFilter):
    """
    Matches colors that are close enough to a reference color.

    A color is close enough when each of its R, G and B channels differs from
    the reference by no more than rgb_tolerance, and its alpha channel by no
    more than alpha_tolerance.
    """

    def __init__(self, reference_color: Color,
                 rgb_tolerance: int = DEFAULT_RGB_TOLERANCE,
                 alpha_tolerance: int = DEFAULT_ALPHA_TOLERANCE):
        if rgb_tolerance < 0:
            raise InvalidConfigurationError(
                f"rgb_tolerance is a distance and must not be negative (got {rgb_tolerance})")
        if alpha_tolerance < 0:
            raise InvalidConfigurationError(
                f"alpha_tolerance is a distance and must not be negative (got {alpha_tolerance})")
        self.reference_color = reference_color
        self.rgb_tolerance = rgb_tolerance
        self.alpha_tolerance = alpha_tolerance
        # BGRA order, matching the pixel buffers
        self._reference_bgra = np.array(reference_color.to_bgra(), dtype=np.int16)
        self._tolerances = np.array(
            [rgb_tolerance, rgb_tolerance, rgb_tolerance, alpha_tolerance], dtype=np.int32)

    def matches(self, color: Color) -> bool:
        ref = self.reference_color
        return (abs(color.alpha - ref.alpha) <= self.alpha_tolerance
                and abs(color.red - ref.red) <= self.rgb_tolerance
                and abs(color.green - ref.green) <= self.rgb_tolerance
                and abs(color.blue - ref.blue) <= self.rgb_tolerance)

    def mask(self, image: np.ndarray) -> np.ndarray:
        distances = np.abs(image.astype(np.int16) - self._reference_bgra)
        return np.all(distances <= self._tolerances, axis=-1)

    def __repr__(self) -> str:
        return (f"ColorSimilarityFilter({self.reference_color}, rgb_tolerance={self.rgb_tolerance}, "
                f"alpha_tolerance={self.alpha_tolerance})")
