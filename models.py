"""Core data models for the app."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SessionState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    RESULT = "RESULT"
    ERROR = "ERROR"


class OutcomeKind(str, Enum):
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass
class Stroke:
    points: list[Point] = field(default_factory=list)
    width: float = 1.0


@dataclass
class Sketch:
    """Raster surface size plus the strokes drawn on it."""

    width: int = 0
    height: int = 0
    strokes: list[Stroke] = field(default_factory=list)

    def begin_stroke(self, point: Point, width: float = 1.0) -> Stroke:
        stroke = Stroke(points=[point], width=width)
        self.strokes.append(stroke)
        return stroke

    def extend_stroke(self, point: Point) -> None:
        if not self.strokes:
            self.begin_stroke(point)
            return
        self.strokes[-1].points.append(point)

    def add_stroke(self, stroke: Stroke) -> None:
        self.strokes.append(stroke)

    def clear(self) -> None:
        self.strokes = []

    def bounds(self) -> Optional[Bounds]:
        """Bounding box of all ink, inflated by half of each pen width."""
        min_x = min_y = float("inf")
        max_x = max_y = float("-inf")
        for stroke in self.strokes:
            half = stroke.width / 2.0
            for p in stroke.points:
                min_x = min(min_x, p.x - half)
                min_y = min(min_y, p.y - half)
                max_x = max(max_x, p.x + half)
                max_y = max(max_y, p.y + half)
        if min_x == float("inf"):
            return None
        return Bounds(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def is_empty(self) -> bool:
        bounds = self.bounds()
        return bounds is None or bounds.is_empty

    def snapshot(self) -> Sketch:
        return copy.deepcopy(self)


@dataclass(frozen=True)
class EncodedPayload:
    data: bytes
    text: str
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class SessionView:
    """What the window shows. Replaced as a whole on every transition."""

    state: SessionState
    text: str = ""
    error: str = ""

    @classmethod
    def idle(cls) -> SessionView:
        return cls(state=SessionState.IDLE)

    @classmethod
    def loading(cls) -> SessionView:
        return cls(state=SessionState.LOADING)

    @classmethod
    def result(cls, text: str) -> SessionView:
        return cls(state=SessionState.RESULT, text=text)

    @classmethod
    def failed(cls, message: str) -> SessionView:
        return cls(state=SessionState.ERROR, error=message)


@dataclass
class CompletionOutcome:
    kind: str
    text: str = ""
    code: str = ""
    message: str = ""
