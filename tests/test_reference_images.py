"""Tests for text_recognition.reference_images module."""

import numpy as np
import pytest

from conftest import render_text, render_tokens
from text_recognition import (
    InvalidConfigurationError,
    ReferenceImage,
    SimpleOcr,
    escape_char_for_filename,
    infer_text_from_path,
    read_image,
    read_reference_images,
    split_and_save_character_images,
    split_and_save_sub_images,
    split_samples_into_store,
    unescape_filename_to_char,
    write_image,
)


# ---------------------------------------------------------------------------
# File name convention
# ---------------------------------------------------------------------------


class TestFilenameEscaping:
    @pytest.mark.parametrize("char, name", [
        (".", "dot"),
        ("-", "dash"),
        ("/", "slash"),
        ("\\", "backslash"),
        ("a", "a"),
        ("7", "7"),
        ("?", "%3F"),
        ("*", "%2A"),
    ])
    def test_escape(self, char, name):
        assert escape_char_for_filename(char) == name

    @pytest.mark.parametrize("char", [".", "-", "/", "\\", "a", "Z", "?", ":", "%", "é", "Ta"])
    def test_unescape_inverts_escape(self, char):
        assert unescape_filename_to_char(escape_char_for_filename(char)) == char

    @pytest.mark.parametrize("path, text", [
        ("refs/a.png", "a"),
        ("refs/A upper.png", "A"),
        ("refs/dot.png", "."),
        ("refs/dot 2.png", "."),
        ("refs/%3F.png", "?"),
        ("refs/Ta.png", "Ta"),
    ])
    def test_infer_text_from_path(self, path, text):
        assert infer_text_from_path(path) == text


# ---------------------------------------------------------------------------
# ReferenceImage
# ---------------------------------------------------------------------------


class TestReferenceImage:
    def test_normalized_to_bgra(self):
        ref = ReferenceImage(np.zeros((5, 3), dtype=np.uint8), "x")
        assert ref.image.shape == (5, 3, 4)
        assert (ref.width, ref.height) == (3, 5)

    def test_empty_image_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            ReferenceImage(np.zeros((0, 3, 4), dtype=np.uint8), "x")


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestReadReferenceImages:
    def test_reads_sorted_and_labeled(self, tmp_path, detector):
        for name, token in [("7", "7"), ("dot", "."), ("1", "1"), ("1 bold", "1")]:
            (sub_image,) = detector.split_text_elements(render_tokens([token]))
            write_image(sub_image, tmp_path / f"{name}.png")
        (tmp_path / "notes.txt").write_text("not an image")

        references = read_reference_images(tmp_path)

        assert [r.text for r in references] == ["1", "1", "7", "."]
        assert references[3].image.shape == (1, 1, 4)

    def test_glob(self, tmp_path, detector):
        (sub_image,) = detector.split_text_elements(render_tokens(["1"]))
        write_image(sub_image, tmp_path / "1.png")
        write_image(sub_image, tmp_path / "7.png")
        assert [r.text for r in read_reference_images(tmp_path, "7*")] == ["7"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            read_reference_images(tmp_path / "missing")

    def test_round_trip_through_files(self, tmp_path, detector):
        """Sub-images saved by name are read back as usable reference images."""
        split_and_save_character_images(detector, render_text("1570"), "1570", tmp_path)
        ocr = SimpleOcr(read_reference_images(tmp_path), detector, space_width_threshold=3)
        assert ocr.recognize_text(render_text("7105")) == "7105"


# ---------------------------------------------------------------------------
# Authoring
# ---------------------------------------------------------------------------


class TestSplitAndSave:
    def test_split_and_save_sub_images(self, tmp_path, detector):
        out = tmp_path / "out"
        paths = split_and_save_sub_images(detector, render_text("1.5"), out,
                                          filename_fn=lambda index, _: f"part{index}")
        assert [p.name for p in paths] == ["part0.png", "part1.png", "part2.png"]
        assert read_image(paths[1]).shape == (1, 1, 4)

    def test_split_and_save_sub_images_default_names(self, tmp_path, detector):
        paths = split_and_save_sub_images(detector, render_text("17"), tmp_path)
        assert len(paths) == 2
        assert len({p.name for p in paths}) == 2
        assert all(p.suffix == ".png" for p in paths)

    def test_character_images_named_after_text(self, tmp_path, detector):
        paths = split_and_save_character_images(detector, render_text("1.5"), "1 . 5", tmp_path)
        assert [p.name for p in paths] == ["1.png", "dot.png", "5.png"]

    def test_character_count_mismatch(self, tmp_path, detector):
        """'Ta' is a single text element, so 6 characters give 5 sub-images."""
        with pytest.raises(InvalidConfigurationError):
            split_and_save_character_images(detector, render_text("Taille"), "Taille", tmp_path)

    def test_split_samples_into_store(self, tmp_path, detector):
        samples = tmp_path / "samples"
        samples.mkdir()
        write_image(render_text("1750"), samples / "a.png")
        write_image(render_text("5701"), samples / "b.png")
        write_image(render_text("11"), samples / "c.png")

        store = split_samples_into_store(detector, samples, tmp_path / "unique")

        assert len(store) == 4
        assert len(list((tmp_path / "unique").iterdir())) == 4

    def test_split_samples_missing_directory(self, tmp_path, detector):
        with pytest.raises(InvalidConfigurationError):
            split_samples_into_store(detector, tmp_path / "missing", tmp_path / "unique")
