"""Render a Sketch with Qt and turn it into a base64 JPEG payload."""

from __future__ import annotations

import base64
import logging
from typing import Any

from errors import EncodingFailure
from models import EncodedPayload, Sketch, Stroke

try:
    from PySide6.QtCore import QBuffer, QIODevice, QPointF, Qt
    from PySide6.QtGui import QColor, QImage, QPainter, QPen
except Exception:  # pragma: no cover
    QImage = None  # type: ignore

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 0.8


def paint_strokes(painter: Any, strokes: list[Stroke]) -> None:
    """Draw strokes with a black round pen. Shared with the on-screen canvas."""
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    for stroke in strokes:
        if not stroke.points:
            continue
        pen = QPen(QColor("black"))
        pen.setWidthF(stroke.width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        points = [QPointF(p.x, p.y) for p in stroke.points]
        if len(points) == 1:
            painter.drawPoint(points[0])
        else:
            painter.drawPolyline(points)


class QtJpegEncoder:
    def __init__(self, quality: float = DEFAULT_QUALITY) -> None:
        if not 0.0 <= quality <= 1.0:
            raise ValueError(f"quality must be within 0..1, got {quality}")
        self._quality = quality

    def render(self, sketch: Sketch) -> Any:
        if QImage is None:
            raise EncodingFailure("PySide6 is not installed")
        if sketch.width <= 0 or sketch.height <= 0:
            raise EncodingFailure(f"surface has no area ({sketch.width}x{sketch.height})")
        image = QImage(sketch.width, sketch.height, QImage.Format.Format_RGB32)
        image.fill(QColor("white"))
        painter = QPainter(image)
        try:
            paint_strokes(painter, sketch.strokes)
        finally:
            painter.end()
        return image

    def encode(self, sketch: Sketch) -> EncodedPayload:
        image = self.render(sketch)
        buffer = QBuffer()
        buffer.open(QIODevice.OpenModeFlag.WriteOnly)
        try:
            ok = image.save(buffer, "JPEG", round(self._quality * 100))
            data = bytes(buffer.data().data())
        finally:
            buffer.close()
        if not ok or not data:
            raise EncodingFailure("JPEG writer produced no data")
        logger.debug("Encoded %dx%d sketch into %d JPEG bytes", sketch.width, sketch.height, len(data))
        return EncodedPayload(data=data, text=base64.b64encode(data).decode("ascii"))


def decode(data: bytes) -> Any:
    """Load JPEG bytes back into a QImage; returns a null image if unreadable."""
    if QImage is None:
        raise RuntimeError("PySide6 is not installed")
    return QImage.fromData(data, "JPEG")
