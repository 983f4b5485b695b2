#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Text Recognition Module

Pattern matching-based text recognition for text rendered with a known font
and color. Images are split into text elements and spaces, and each text
element is matched pixel by pixel against labeled reference images.
"""

from .color import Color, ColorFilter, ColorSimilarityFilter, PredicateColorFilter
from .errors import InvalidConfigurationError, NoAcceptableMatchError
from .image_helpers import color_at, decode_image, encode_image, ensure_bgra, read_image, write_image
from .image_store import UniqueImageStore
from .recognizer import ScoredImage, SimpleOcr, infer_space_width
from .reference_images import (
    ReferenceImage,
    escape_char_for_filename,
    infer_text_from_path,
    read_reference_images,
    save_sub_images_to_store,
    split_and_save_character_images,
    split_and_save_sub_images,
    split_samples_into_store,
    unescape_filename_to_char,
)
from .text_detector import ImagePart, Space, TextDetector, TextSubImage, filter_text_sub_images, mask_similarity

__all__ = [
    'Color',
    'ColorFilter',
    'ColorSimilarityFilter',
    'PredicateColorFilter',
    'InvalidConfigurationError',
    'NoAcceptableMatchError',
    'color_at',
    'decode_image',
    'encode_image',
    'ensure_bgra',
    'read_image',
    'write_image',
    'UniqueImageStore',
    'ScoredImage',
    'SimpleOcr',
    'infer_space_width',
    'ReferenceImage',
    'escape_char_for_filename',
    'infer_text_from_path',
    'read_reference_images',
    'save_sub_images_to_store',
    'split_and_save_character_images',
    'split_and_save_sub_images',
    'split_samples_into_store',
    'unescape_filename_to_char',
    'ImagePart',
    'Space',
    'TextDetector',
    'TextSubImage',
    'filter_text_sub_images',
    'mask_similarity',
]
