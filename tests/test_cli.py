"""Tests for the glyphmatch command line."""

import pytest

from conftest import make_references, render_text, render_tokens
from main import main
from main.setup.arguments import setup_arguments
from main.setup.initialization import get_log_mode
from text_recognition import write_image


@pytest.fixture
def references_dir(tmp_path, detector):
    directory = tmp_path / "refs"
    directory.mkdir()
    for ref in make_references(detector, ["0", "1", "5", "7", "."]):
        write_image(ref.image, directory / f"{'dot' if ref.text == '.' else ref.text}.png")
    return directory


def _write_sample(directory, name, image):
    directory.mkdir(exist_ok=True)
    return write_image(image, directory / name)


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


class TestArguments:
    def test_recognize_defaults(self):
        args = setup_arguments(["recognize", "a.png", "--references", "refs"])
        assert args.command == "recognize"
        assert args.images == ["a.png"]
        assert args.min_score == 1.0
        assert args.space_width is None
        assert args.trim_vertically is True
        assert args.write_logs is True

    def test_detector_options(self):
        args = setup_arguments(["split", "in", "out", "--text-color", "#ff0000",
                                "--rgb-tolerance", "5", "--no-trim"])
        assert args.text_color == "#ff0000"
        assert args.rgb_tolerance == 5
        assert args.trim_vertically is False

    @pytest.mark.parametrize("argv", [
        ["recognize", "a.png", "--references", "refs", "--min-score", "1.5"],
        ["recognize", "a.png", "--references", "refs", "--rgb-tolerance", "-1"],
        ["recognize", "a.png"],
        [],
    ])
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit):
            setup_arguments(argv)

    def test_log_mode(self):
        assert get_log_mode(setup_arguments(["coverage", "refs"])) == "customer"
        assert get_log_mode(setup_arguments(["--verbose", "coverage", "refs"])) == "verbose"
        assert get_log_mode(setup_arguments(["--verbose", "--debug", "coverage", "refs"])) == "debug"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestRecognizeCommand:
    def test_prints_recognized_text(self, tmp_path, references_dir, capsys):
        sample = _write_sample(tmp_path / "samples", "price.png", render_text("175.000"))

        code = main(["--no-log-file", "recognize", str(sample),
                     "--references", str(references_dir), "--space-width", "3"])

        assert code == 0
        assert capsys.readouterr().out == f"{sample}\t175.000\n"

    def test_unmatched_sub_images_saved(self, tmp_path, references_dir, capsys):
        sample = _write_sample(tmp_path / "samples", "word.png", render_text("Taille"))
        unmatched = tmp_path / "unmatched"

        code = main(["--no-log-file", "recognize", str(sample), "--references", str(references_dir),
                     "--space-width", "3", "--unmatched-dir", str(unmatched)])

        assert code == 1
        assert capsys.readouterr().out == ""
        assert len(list(unmatched.iterdir())) == 1

    def test_missing_references_directory(self, tmp_path):
        sample = _write_sample(tmp_path / "samples", "a.png", render_text("1"))
        code = main(["--no-log-file", "recognize", str(sample), "--references", str(tmp_path / "none")])
        assert code == 2

    def test_missing_image(self, tmp_path, references_dir):
        code = main(["--no-log-file", "recognize", str(tmp_path / "none.png"),
                     "--references", str(references_dir)])
        assert code == 1

    def test_unreadable_image_does_not_stop_batch(self, tmp_path, references_dir, capsys):
        broken = tmp_path / "samples" / "broken.png"
        broken.parent.mkdir()
        broken.write_bytes(b"not an image")
        sample = _write_sample(tmp_path / "samples", "ok.png", render_text("750"))

        code = main(["--no-log-file", "recognize", str(broken), str(tmp_path / "none.png"), str(sample),
                     "--references", str(references_dir), "--space-width", "3"])

        assert code == 1
        assert capsys.readouterr().out == f"{sample}\t750\n"

    def test_invalid_color(self, tmp_path, references_dir):
        sample = _write_sample(tmp_path / "samples", "a.png", render_text("1"))
        code = main(["--no-log-file", "recognize", str(sample), "--references", str(references_dir),
                     "--text-color", "white"])
        assert code == 1


class TestSplitCommands:
    def test_split(self, tmp_path, capsys):
        samples = tmp_path / "samples"
        _write_sample(samples, "a.png", render_text("1750"))
        _write_sample(samples, "b.png", render_text("0157"))
        output = tmp_path / "unique"

        assert main(["--no-log-file", "split", str(samples), str(output)]) == 0
        assert len(list(output.iterdir())) == 4
        assert capsys.readouterr().out.strip() == str(output)

    def test_split_chars(self, tmp_path, capsys):
        sample = _write_sample(tmp_path / "samples", "a.png", render_text("5.1"))
        output = tmp_path / "chars"

        assert main(["--no-log-file", "split-chars", str(sample), "5.1", str(output)]) == 0
        assert sorted(p.name for p in output.iterdir()) == ["1.png", "5.png", "dot.png"]
        assert len(capsys.readouterr().out.splitlines()) == 3

    def test_split_chars_count_mismatch(self, tmp_path):
        sample = _write_sample(tmp_path / "samples", "a.png", render_tokens(["1", "7"]))
        assert main(["--no-log-file", "split-chars", str(sample), "175", str(tmp_path / "out")]) == 2


class TestCoverageCommand:
    def test_reports_missing_characters(self, references_dir, capsys):
        assert main(["--no-log-file", "coverage", str(references_dir), "--expected", "0123456789."]) == 0

        out = capsys.readouterr().out.splitlines()
        assert "characters: .0157" in out
        assert "missing: 234689" in out
