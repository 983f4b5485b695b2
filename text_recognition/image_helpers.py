#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Image I/O and pixel buffer helpers

Pixel buffers are numpy uint8 arrays in OpenCV BGRA channel order,
shape (height, width, 4).
"""

from pathlib import Path
from typing import Union

import cv2
import numpy as np

from config import DEFAULT_IMAGE_FORMAT
from .color import Color

PathLike = Union[str, Path]


def ensure_bgra(image: np.ndarray) -> np.ndarray:
    """
    Normalize an image to 4-channel BGRA

    Args:
        image: Grayscale (h, w), BGR (h, w, 3) or BGRA (h, w, 4) image

    Returns:
        BGRA image; grayscale and BGR pixels become fully opaque
    """
    if image is None:
        raise ValueError("No image provided")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected an 8-bit image, got dtype {image.dtype}")
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    if image.ndim == 2:
        image = np.stack([image, image, image], axis=-1)
    if image.ndim == 3 and image.shape[2] == 3:
        # Same as cv2.COLOR_BGR2BGRA, but also accepts zero-sized images
        opaque = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([image, opaque], axis=-1)
    if image.ndim == 3 and image.shape[2] == 4:
        return image
    raise ValueError(f"Unsupported image shape: {image.shape}")


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, BMP, ...) into a BGRA pixel buffer"""
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError("Could not decode image data")
    return ensure_bgra(image)


def read_image(path: PathLike) -> np.ndarray:
    """
    Read an image file into a BGRA pixel buffer

    The file is read as bytes then decoded, so that paths with non-ASCII
    characters work on every platform (cv2.imread does not on Windows).
    """
    path = Path(path)
    try:
        return decode_image(path.read_bytes())
    except ValueError:
        raise ValueError(f"Could not read image: {path}") from None


def encode_image(image: np.ndarray, image_format: str = DEFAULT_IMAGE_FORMAT) -> bytes:
    """Encode a pixel buffer in the given format ("png", "bmp", ...)"""
    success, buffer = cv2.imencode(f".{image_format.lstrip('.')}", np.ascontiguousarray(image))
    if not success:
        raise ValueError(f"Could not encode image as {image_format}")
    return buffer.tobytes()


def write_image(image: np.ndarray, path: PathLike) -> Path:
    """Write a pixel buffer to a file, the format being given by the file extension"""
    path = Path(path)
    path.write_bytes(encode_image(image, path.suffix or DEFAULT_IMAGE_FORMAT))
    return path


def color_at(image: np.ndarray, col: int, row: int) -> Color:
    """Get the color of the pixel at the given column and row of a BGRA image"""
    return Color.from_bgra(image[row, col])


def vertical_slice(image: np.ndarray, start_col: int, end_col: int) -> np.ndarray:
    """Copy of the columns [start_col, end_col) of the image, full height"""
    return image[:, start_col:end_col].copy()


def horizontal_slice(image: np.ndarray, start_row: int, end_row: int) -> np.ndarray:
    """Copy of the rows [start_row, end_row) of the image, full width"""
    return image[start_row:end_row, :].copy()


def new_image(width: int, height: int, color: Color = Color.TRANSPARENT) -> np.ndarray:
    """Create a BGRA image filled with a single color"""
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[:, :] = color.to_bgra()
    return image
