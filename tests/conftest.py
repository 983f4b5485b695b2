"""
Pytest configuration and shared fixtures for glyphmatch tests.

Text images are rendered from a tiny pixel font drawn as ASCII art: '#' is
a text pixel (opaque white), '.' is background (opaque black). Glyphs are
5 rows high and separated by one background column.
"""

from typing import Dict, List, Sequence

import numpy as np
import pytest

from text_recognition import Color, ReferenceImage, SimpleOcr, TextDetector

GLYPH_HEIGHT = 5
LETTER_GAP = 1
SPACE_WIDTH = 3
PADDING = 2
SPACE_WIDTH_THRESHOLD = 3

TEXT_BGRA = (255, 255, 255, 255)
BACKGROUND_BGRA = (0, 0, 0, 255)

_GLYPH_ART = {
    "0": ["###",
          "#.#",
          "#.#",
          "#.#",
          "###"],
    "1": [".#.",
          "##.",
          ".#.",
          ".#.",
          "###"],
    "5": ["###",
          "#..",
          "###",
          "..#",
          "###"],
    "7": ["###",
          "..#",
          ".#.",
          ".#.",
          ".#."],
    ".": [".",
          ".",
          ".",
          ".",
          "#"],
    "T": ["###",
          ".#.",
          ".#.",
          ".#.",
          ".#."],
    "a": ["...",
          "...",
          ".##",
          "#.#",
          ".##"],
    "i": ["#",
          ".",
          "#",
          "#",
          "#"],
    "l": ["#",
          "#",
          "#",
          "#",
          "#"],
    "e": ["...",
          ".##",
          "###",
          "#..",
          ".##"],
}
# Kerned pair: no background column between the two letters
_GLYPH_ART["Ta"] = [t + a for t, a in zip(_GLYPH_ART["T"], _GLYPH_ART["a"])]

GLYPHS: Dict[str, np.ndarray] = {
    name: np.array([[ch == "#" for ch in row] for row in rows], dtype=bool)
    for name, rows in _GLYPH_ART.items()
}


def _paint(mask: np.ndarray) -> np.ndarray:
    image = np.empty(mask.shape + (4,), dtype=np.uint8)
    image[:, :] = BACKGROUND_BGRA
    image[mask] = TEXT_BGRA
    return image


def render_tokens(tokens: Sequence[str], padding: int = PADDING) -> np.ndarray:
    """
    Render glyphs left to right into a BGRA image.

    Each token is a glyph name, or " " for a space. Tokens are separated by
    LETTER_GAP background columns, and the whole line is surrounded by
    padding background pixels.
    """
    columns: List[np.ndarray] = []
    for index, token in enumerate(tokens):
        if index > 0:
            columns.append(np.zeros((GLYPH_HEIGHT, LETTER_GAP), dtype=bool))
        if token == " ":
            columns.append(np.zeros((GLYPH_HEIGHT, SPACE_WIDTH), dtype=bool))
        else:
            columns.append(GLYPHS[token])
    line = np.hstack(columns) if columns else np.zeros((GLYPH_HEIGHT, 0), dtype=bool)
    return _paint(np.pad(line, padding, constant_values=False))


def render_text(text: str, padding: int = PADDING) -> np.ndarray:
    """Render text one character per glyph, except for the kerned 'Ta' pair."""
    tokens = []
    rest = text
    while rest:
        if rest.startswith("Ta"):
            tokens.append("Ta")
            rest = rest[2:]
        else:
            tokens.append(rest[0])
            rest = rest[1:]
    return render_tokens(tokens, padding)


def make_references(detector: TextDetector, texts: Sequence[str]) -> List[ReferenceImage]:
    """Reference images cut out of rendered glyphs, the same way a sample would be split."""
    references = []
    for text in texts:
        (sub_image,) = detector.split_text_elements(render_tokens([text]))
        references.append(ReferenceImage(image=sub_image, text=text))
    return references


@pytest.fixture
def detector():
    """Detector for white text, trimming sub-images vertically."""
    return TextDetector.from_text_color(Color.WHITE)


@pytest.fixture
def untrimmed_detector():
    return TextDetector.from_text_color(Color.WHITE, trim_sub_images_vertically=False)


@pytest.fixture
def digit_references(detector):
    return make_references(detector, ["0", "1", "5", "7"])


@pytest.fixture
def digit_ocr(detector, digit_references):
    return SimpleOcr(digit_references, detector, space_width_threshold=SPACE_WIDTH_THRESHOLD)


@pytest.fixture
def letter_ocr(detector):
    references = make_references(detector, ["Ta", "i", "l", "e"])
    return SimpleOcr(references, detector, space_width_threshold=SPACE_WIDTH_THRESHOLD)
