#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Image store without duplicates.

Used when building a reference image set from samples: the same character
appears many times across sample images, but should only be saved (and
labeled) once.
"""

import hashlib
import threading
import uuid
from pathlib import Path
from typing import Dict, List

import numpy as np

from config import DEFAULT_IMAGE_FORMAT
from utils.core.logging import get_logger
from .image_helpers import PathLike, encode_image

log = get_logger()


def _hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class UniqueImageStore:
    """
    Stores images in a directory, detecting and preventing exact duplicates.

    Every file already in the directory is hashed when the store is created.
    Files with the same hash are compared byte by byte, so a hash collision
    never makes two different images share a path.
    """

    def __init__(self, images_dir: PathLike, image_format: str = DEFAULT_IMAGE_FORMAT):
        """
        Args:
            images_dir: Directory holding the images (created if missing)
            image_format: Format used to encode pixel buffers, and extension of new files
        """
        self.images_dir = Path(images_dir)
        self.image_format = image_format.lstrip(".")
        self._lock = threading.Lock()

        self.images_dir.mkdir(parents=True, exist_ok=True)
        self._paths_by_hash: Dict[str, List[Path]] = {}
        self._load_existing_images()

    def _load_existing_images(self):
        """Index every file already present in the store directory."""
        for path in sorted(self.images_dir.iterdir()):
            if not path.is_file():
                continue
            self._paths_by_hash.setdefault(_hash_bytes(path.read_bytes()), []).append(path)
        log.debug(f"Image store {self.images_dir}: {len(self)} existing images indexed")

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._paths_by_hash.values())

    def paths(self) -> List[Path]:
        """Paths of all images in the store."""
        return [path for paths in self._paths_by_hash.values() for path in paths]

    def save_or_get_path(self, image_bytes: bytes) -> Path:
        """
        Ensure the given encoded image is saved in this store and return its path.

        The bytes must already be encoded in the store's image format. If an
        identical file exists, its path is returned and nothing is written.
        Otherwise the bytes are written to a new file.
        """
        image_hash = _hash_bytes(image_bytes)
        with self._lock:
            existing = self._find_existing_image(image_bytes, image_hash)
            if existing is not None:
                log.trace(f"Image already stored: {existing.name}")
                return existing
            return self._write_image(image_bytes, image_hash)

    def save_image_or_get_path(self, image: np.ndarray) -> Path:
        """Encode a pixel buffer in the store's format, then save_or_get_path()."""
        return self.save_or_get_path(encode_image(image, self.image_format))

    def _find_existing_image(self, image_bytes: bytes, image_hash: str):
        for path in self._paths_by_hash.get(image_hash, []):
            if path.read_bytes() == image_bytes:
                return path
        return None

    def _write_image(self, image_bytes: bytes, image_hash: str) -> Path:
        path = self.images_dir / f"{uuid.uuid4()}.{self.image_format}"
        # Exclusive creation: never overwrite a file, even one created outside the store
        with open(path, "xb") as f:
            f.write(image_bytes)
        self._paths_by_hash.setdefault(image_hash, []).append(path)
        log.debug(f"Stored new image: {path.name}")
        return path
