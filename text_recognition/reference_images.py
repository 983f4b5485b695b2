#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Reference images for text recognition.

Reference images are labeled sub-images of known text, read from a directory
where each file name gives the text of the image. This module also provides
the authoring side: splitting sample images into sub-images and saving them,
so they can be renamed after their text and used as reference images.

File name convention:
- the text is the name without extension, up to the first space. Anything
  after a space is ignored, which allows several images for the same text,
  or "a.png" and "A upper.png" on case-insensitive file systems;
- ".", "-", "/" and "\\" are written "dot", "dash", "slash" and "backslash";
- other characters that are not valid in file names are URL-encoded.
"""

import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import quote_plus, unquote_plus

import numpy as np

from config import (
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_REFERENCE_GLOB,
    DEFAULT_SAMPLE_GLOB,
    FILENAME_CHAR_ESCAPES,
)
from utils.core.logging import get_logger
from .errors import InvalidConfigurationError
from .image_helpers import PathLike, ensure_bgra, read_image, write_image
from .image_store import UniqueImageStore
from .text_detector import TextDetector

log = get_logger()

_WHITESPACE_RE = re.compile(r"\s+")
_FILENAME_CHAR_UNESCAPES = {escaped: char for char, escaped in FILENAME_CHAR_ESCAPES.items()}


@dataclass(frozen=True)
class ReferenceImage:
    """A labeled image of known text (usually a single character)."""

    image: np.ndarray = field(compare=False, repr=False)
    text: str

    def __post_init__(self):
        image = ensure_bgra(self.image)
        height, width = image.shape[:2]
        if width < 1 or height < 1:
            raise InvalidConfigurationError(
                f"Reference image for '{self.text}' must be at least 1x1 (got {width}x{height})")
        object.__setattr__(self, "image", image)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]


def escape_char_for_filename(text: str) -> str:
    """Escape a character (or short text) so that it can be used as a file name."""
    return FILENAME_CHAR_ESCAPES.get(text) or quote_plus(text)


def unescape_filename_to_char(name: str) -> str:
    """Inverse of escape_char_for_filename."""
    return _FILENAME_CHAR_UNESCAPES.get(name) or unquote_plus(name)


def infer_text_from_path(path: PathLike) -> str:
    """Text of a reference image file: its name without extension, up to the first space."""
    return unescape_filename_to_char(Path(path).stem.split(" ")[0])


def read_reference_images(directory: PathLike, glob: str = DEFAULT_REFERENCE_GLOB) -> List[ReferenceImage]:
    """
    Read reference images from a directory, associating them with text based on their names.

    Args:
        directory: Directory containing the labeled images
        glob: Pattern selecting the image files in the directory

    Returns:
        Reference images, sorted by file name
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise InvalidConfigurationError(f"Reference images directory does not exist: {directory}")

    paths = sorted(p for p in directory.glob(glob) if p.is_file())
    references = [ReferenceImage(image=read_image(p), text=infer_text_from_path(p)) for p in paths]
    log.info(f"Loaded {len(references)} reference images from {directory}")
    for reference in references:
        log.trace(f"Reference '{reference.text}': {reference.width}x{reference.height}")
    return references


def _random_filename(index: int, sub_image: np.ndarray) -> str:
    return str(uuid.uuid4())


def split_and_save_sub_images(detector: TextDetector,
                              sample_image: np.ndarray,
                              output_dir: PathLike,
                              filename_fn: Optional[Callable[[int, np.ndarray], str]] = None) -> List[Path]:
    """
    Split a sample image into sub-images of text elements and save them as PNG files.

    Sub-images are often individual characters, but several characters can be
    grouped together due to kerning (Te, To, Va...).

    Args:
        detector: Detector used to split the sample image
        sample_image: Image containing a single line of text
        output_dir: Directory to write the sub-images to (created if missing)
        filename_fn: Called with (index, sub_image) to get each file name
            without extension. Defaults to random UUIDs.

    Returns:
        Paths of the written files, in text order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    if filename_fn is None:
        filename_fn = _random_filename

    paths = []
    for index, sub_image in enumerate(detector.split_text_elements(sample_image)):
        path = output_dir / f"{filename_fn(index, sub_image)}.{DEFAULT_IMAGE_FORMAT}"
        paths.append(write_image(sub_image, path))
    log.debug(f"Saved {len(paths)} sub-images to {output_dir}")
    return paths


def save_sub_images_to_store(detector: TextDetector,
                             sample_image: np.ndarray,
                             image_store: UniqueImageStore) -> List[Path]:
    """
    Split a sample image into sub-images of text elements and save them in an image store.

    The store reuses existing identical images instead of writing duplicates.

    Returns:
        Paths of the sub-images in the store, in text order
    """
    return [image_store.save_image_or_get_path(sub_image)
            for sub_image in detector.split_text_elements(sample_image)]


def split_samples_into_store(detector: TextDetector,
                             sample_images_dir: PathLike,
                             output_dir: PathLike,
                             sample_images_glob: str = DEFAULT_SAMPLE_GLOB) -> UniqueImageStore:
    """
    Split every sample image of a directory into sub-images, saved without exact duplicates.

    The resulting sub-images should then be renamed after their text content so
    they can be loaded with read_reference_images().

    Returns:
        The store holding the sub-images
    """
    sample_images_dir = Path(sample_images_dir)
    if not sample_images_dir.is_dir():
        raise InvalidConfigurationError(f"Sample images directory does not exist: {sample_images_dir}")

    image_store = UniqueImageStore(output_dir)
    sample_paths = sorted(p for p in sample_images_dir.glob(sample_images_glob) if p.is_file())
    log.info(f"Splitting {len(sample_paths)} sample images into {image_store.images_dir}")
    for sample_path in sample_paths:
        paths = save_sub_images_to_store(detector, read_image(sample_path), image_store)
        log.debug(f"{sample_path.name}: {len(paths)} sub-images")
    return image_store


def split_and_save_character_images(detector: TextDetector,
                                    sample_image: np.ndarray,
                                    sample_text: str,
                                    output_dir: PathLike) -> List[Path]:
    """
    Split a sample image into sub-images named after the characters of its text.

    Whitespace in sample_text is ignored, and characters that are not valid in
    file names are escaped.

    This only works when each text element is a single character. If the
    kerning of the font groups characters together (Ta, Va...), the number of
    sub-images does not match the number of characters and
    InvalidConfigurationError is raised: use split_and_save_sub_images() and
    name the files manually instead.
    """
    characters = list(_WHITESPACE_RE.sub("", sample_text))
    sub_images = detector.split_text_elements(sample_image)
    if len(sub_images) != len(characters):
        raise InvalidConfigurationError(
            f"Found {len(sub_images)} text elements for {len(characters)} characters in "
            f"'{sample_text}' (characters grouped by kerning?)")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return [write_image(sub_image, output_dir / f"{escape_char_for_filename(char)}.{DEFAULT_IMAGE_FORMAT}")
            for sub_image, char in zip(sub_images, characters)]
