"""Tests for QtJpegEncoder."""

from __future__ import annotations

import base64

import pytest

from errors import EncodingFailure
from image_encoder import QtJpegEncoder, decode
from models import Point, Sketch, Stroke


@pytest.fixture
def encoder(qapp) -> QtJpegEncoder:  # noqa: ANN001
    return QtJpegEncoder()


def _line_sketch() -> Sketch:
    sketch = Sketch(width=120, height=80)
    sketch.add_stroke(Stroke(points=[Point(10, 40), Point(110, 40)], width=8.0))
    return sketch


def test_encode_produces_jpeg_and_matching_base64(encoder: QtJpegEncoder) -> None:
    payload = encoder.encode(_line_sketch())

    assert payload.data[:2] == b"\xff\xd8"  # JPEG SOI marker
    assert payload.mime_type == "image/jpeg"
    assert base64.b64decode(payload.text) == payload.data


def test_decoded_image_keeps_strokes(encoder: QtJpegEncoder) -> None:
    payload = encoder.encode(_line_sketch())
    image = decode(payload.data)

    assert not image.isNull()
    assert (image.width(), image.height()) == (120, 80)
    assert image.pixelColor(60, 40).lightness() < 80  # on the stroke
    assert image.pixelColor(60, 5).lightness() > 200  # background stays white


def test_single_point_stroke_renders_a_dot(encoder: QtJpegEncoder) -> None:
    sketch = Sketch(width=40, height=40)
    sketch.add_stroke(Stroke(points=[Point(20, 20)], width=10.0))

    image = decode(encoder.encode(sketch).data)
    assert image.pixelColor(20, 20).lightness() < 100


def test_zero_area_surface_fails(encoder: QtJpegEncoder) -> None:
    sketch = Sketch(width=0, height=80)
    sketch.add_stroke(Stroke(points=[Point(1, 1), Point(2, 2)]))

    with pytest.raises(EncodingFailure):
        encoder.encode(sketch)


def test_quality_out_of_range_rejected() -> None:
    with pytest.raises(ValueError):
        QtJpegEncoder(quality=80)


def test_lower_quality_gives_smaller_output(qapp) -> None:  # noqa: ANN001
    sketch = Sketch(width=200, height=200)
    for i in range(0, 200, 10):
        sketch.add_stroke(Stroke(points=[Point(i, 0), Point(200 - i, 200)], width=3.0))

    small = QtJpegEncoder(quality=0.1).encode(sketch)
    large = QtJpegEncoder(quality=1.0).encode(sketch)
    assert len(small.data) < len(large.data)
