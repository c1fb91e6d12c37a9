"""Drawing widget that records pen strokes into a Sketch."""

from __future__ import annotations

from image_encoder import paint_strokes
from models import Point, Sketch

try:
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QColor, QPainter, QPen
    from PySide6.QtWidgets import QSizePolicy, QWidget
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QWidget = object  # type: ignore


class SketchCanvas(QWidget):
    def __init__(self, sketch: Sketch, pen_width: float = 1.0, height: int = 400) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self._sketch = sketch
        self._pen_width = pen_width
        self._drawing = False
        self._enabled = True
        self.setFixedHeight(height)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.setCursor(Qt.CursorShape.CrossCursor)

    def set_drawing_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self._drawing = False

    def resizeEvent(self, event) -> None:  # noqa: ANN001, N802
        self._sketch.width = self.width()
        self._sketch.height = self.height()
        super().resizeEvent(event)

    def mousePressEvent(self, event) -> None:  # noqa: ANN001, N802
        if not self._enabled or event.button() != Qt.MouseButton.LeftButton:
            return
        self._drawing = True
        pos = event.position()
        self._sketch.begin_stroke(Point(pos.x(), pos.y()), width=self._pen_width)
        self.update()

    def mouseMoveEvent(self, event) -> None:  # noqa: ANN001, N802
        if not self._drawing:
            return
        pos = event.position()
        self._sketch.extend_stroke(Point(pos.x(), pos.y()))
        self.update()

    def mouseReleaseEvent(self, event) -> None:  # noqa: ANN001, N802
        self._drawing = False

    def paintEvent(self, event) -> None:  # noqa: ANN001, N802
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor("white"))
            paint_strokes(painter, self._sketch.strokes)
            painter.setPen(QPen(QColor("gray"), 1))
            painter.drawRect(self.rect().adjusted(0, 0, -1, -1))
        finally:
            painter.end()
