#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sub-command implementations

Each command returns the process exit code. Results go to stdout, logs to
stderr and the session log file.
"""

import argparse
from collections import Counter
from pathlib import Path

from text_recognition import (
    Color,
    NoAcceptableMatchError,
    SimpleOcr,
    TextDetector,
    UniqueImageStore,
    read_image,
    read_reference_images,
    split_and_save_character_images,
    split_samples_into_store,
)
from utils.core.logging import get_logger, log_section, log_success

log = get_logger()


def _build_detector(args: argparse.Namespace) -> TextDetector:
    return TextDetector.from_text_color(Color.parse(args.text_color),
                                        rgb_tolerance=args.rgb_tolerance,
                                        alpha_tolerance=args.alpha_tolerance,
                                        trim_sub_images_vertically=args.trim_vertically)


def run_recognize(args: argparse.Namespace) -> int:
    """Recognize the text of each image, printing '<image>\\t<text>' lines"""
    references = read_reference_images(args.references, args.references_glob)
    ocr = SimpleOcr(references, _build_detector(args),
                    min_recognition_score=args.min_score,
                    space_width_threshold=args.space_width,
                    measure_time=True)
    unmatched_store = UniqueImageStore(args.unmatched_dir) if args.unmatched_dir else None

    failures = 0
    for image_path in args.images:
        try:
            image = read_image(image_path)
        except (ValueError, OSError) as e:
            failures += 1
            log.error(f"{image_path}: {e}")
            continue
        try:
            text = ocr.recognize_text(image)
        except NoAcceptableMatchError as e:
            failures += 1
            log.warning(f"{image_path}: {e}")
            if unmatched_store is not None:
                saved = unmatched_store.save_image_or_get_path(e.unmatched_sub_image)
                log.info(f"Unmatched sub-image saved for labeling: {saved}")
            continue
        print(f"{image_path}\t{text}")

    stats = ocr.get_timing_stats()
    log.debug(f"[OCR:timing] {stats['recognition_call_count']} images, "
              f"avg {stats['avg_recognition_time']:.2f}ms")
    if failures:
        log.warning(f"{failures}/{len(args.images)} images could not be fully recognized")
        return 1
    log_success(log, f"Recognized {len(args.images)} images")
    return 0


def run_split(args: argparse.Namespace) -> int:
    """Split sample images into unique sub-images, to be renamed after their text"""
    store = split_samples_into_store(_build_detector(args), args.samples_dir, args.output_dir, args.glob)
    log_success(log, f"{len(store)} unique sub-images in {store.images_dir}")
    print(store.images_dir)
    return 0


def run_split_chars(args: argparse.Namespace) -> int:
    """Split a sample image into sub-images named after the characters of its text"""
    paths = split_and_save_character_images(_build_detector(args), read_image(args.image),
                                            args.text, args.output_dir)
    for path in paths:
        print(path)
    log_success(log, f"Saved {len(paths)} character images to {args.output_dir}")
    return 0


def run_coverage(args: argparse.Namespace) -> int:
    """Report which characters have reference images"""
    references = read_reference_images(args.references, args.references_glob)
    counts = Counter(ref.text for ref in references)
    single_chars = {text for text in counts if len(text) == 1}
    groups = sorted(text for text in counts if len(text) > 1)
    missing = [char for char in dict.fromkeys(args.expected) if char not in single_chars]
    low_coverage = sorted(text for text, count in counts.items() if count > 1)

    log_section(log, "Reference coverage", "🔤", {
        "Directory": Path(args.references),
        "Reference images": len(references),
        "Distinct texts": len(counts),
    })
    print(f"characters: {''.join(sorted(single_chars))}")
    print(f"groups: {' '.join(groups)}")
    print(f"missing: {''.join(missing)}")
    print(f"several images: {' '.join(low_coverage)}")
    return 0


COMMANDS = {
    "recognize": run_recognize,
    "split": run_split,
    "split-chars": run_split_chars,
    "coverage": run_coverage,
}
