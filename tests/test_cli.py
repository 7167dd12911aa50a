"""
Tests for the command line front end.

Run with: python -m pytest tests/test_cli.py -v
"""

import logging
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from PIL import Image

from watermake import cli


def create_test_image(path: Path, size=(120, 80)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 30, 30)).save(path)
    return path


def test_defaults_match_documented_cli():
    args = cli.build_parser().parse_args(["photo.png"])
    request = cli.request_from_args(args)

    assert request.source_path == Path("photo.png")
    assert request.text == "Watermark"
    assert request.output_path is None
    assert request.position == "bottom-right"
    assert request.opacity == 128
    assert request.font_size == 30
    assert request.random_color is True
    assert request.shadow_offset == (2, 2)
    assert request.shadow_opacity == 100


def test_short_flags_are_parsed():
    args = cli.build_parser().parse_args([
        "in", "-t", "Hello", "-o", "out.png", "-p", "center", "-a", "200",
        "-s", "12", "-n", "-sox", "-3", "-soy", "4", "-sa", "50",
    ])
    request = cli.request_from_args(args)

    assert request.text == "Hello"
    assert request.output_path == Path("out.png")
    assert request.position == "center"
    assert request.opacity == 200
    assert request.font_size == 12
    assert request.random_color is False
    assert request.shadow_offset == (-3, 4)
    assert request.shadow_opacity == 50


def test_missing_input_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage: watermark" in capsys.readouterr().out


@pytest.mark.parametrize("flags, message", [
    (["-a", "-1"], "Opacity"),
    (["-a", "256"], "Opacity"),
    (["-sa", "256"], "Shadow opacity"),
    (["-s", "0"], "Font size"),
    (["-p", "middle"], "Invalid position"),
])
def test_validation_happens_before_any_file_access(tmp_path, caplog, flags, message):
    missing = tmp_path / "missing.png"

    assert cli.main([str(missing)] + flags) == 1
    assert message in caplog.text
    assert "Cannot access" not in caplog.text


@pytest.mark.parametrize("opacity", ["0", "255"])
def test_opacity_bounds_accepted(tmp_path, opacity):
    source = create_test_image(tmp_path / "photo.png")

    assert cli.main([str(source), "-a", opacity, "--seed", "1"]) == 0
    assert (tmp_path / "photo_watermark.png").exists()


def test_single_file_explicit_output(tmp_path):
    source = create_test_image(tmp_path / "photo.jpg")
    target = tmp_path / "out" / "result.webp"

    assert cli.main([str(source), "-o", str(target), "-n", "-t", "Hi"]) == 0
    assert not target.exists()
    with Image.open(tmp_path / "out" / "result.jpg") as image:
        assert image.format == "JPEG"


def test_inaccessible_input(tmp_path, caplog):
    assert cli.main([str(tmp_path / "missing.png")]) == 1
    assert "Cannot access" in caplog.text


def test_unsupported_file_type(tmp_path, caplog):
    text_file = tmp_path / "notes.txt"
    text_file.write_text("hello")

    assert cli.main([str(text_file)]) == 1
    assert "not a supported image format" in caplog.text


def test_webp_file_reports_error(tmp_path, caplog):
    webp = tmp_path / "photo.webp"
    webp.write_bytes(b"RIFF")

    assert cli.main([str(webp)]) == 1
    assert "not supported" in caplog.text
    assert not (tmp_path / "photo_watermark.jpg").exists()


def test_directory_mode(tmp_path):
    newer = create_test_image(tmp_path / "a.png", size=(120, 80))
    older = create_test_image(tmp_path / "nested" / "b.jpg", size=(60, 40))
    os.utime(newer, (2000, 2000))
    os.utime(older, (1000, 1000))

    assert cli.main([str(tmp_path), "--seed", "5"]) == 0

    output_dir = tmp_path / "watermarked"
    assert sorted(p.name for p in output_dir.iterdir()) == ["1.jpg", "2.png"]
    with Image.open(output_dir / "1.jpg") as first, Image.open(output_dir / "2.png") as second:
        assert first.size == (60, 40)
        assert second.size == (120, 80)


def test_verbose_flag_enables_debug_logging(tmp_path, caplog):
    source = create_test_image(tmp_path / "photo.png")

    assert cli.build_parser().parse_args([str(source), "-v"]).verbose is True
    assert cli.build_parser().parse_args([str(source)]).verbose is False

    with caplog.at_level(logging.DEBUG):
        assert cli.main([str(source), "-v", "--seed", "1"]) == 0

    assert "Arguments:" in caplog.text
    assert (tmp_path / "photo_watermark.png").exists()


def test_directory_mode_custom_output(tmp_path):
    input_dir = tmp_path / "in"
    create_test_image(input_dir / "a.png")

    assert cli.main([str(input_dir), "-o", str(tmp_path / "done")]) == 0
    assert (tmp_path / "done" / "1.png").exists()
