"""State-machine based session orchestration."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from errors import ApiErrorFailure, EncodingFailure, ValidationFailure, user_message
from interfaces import CompletionClient, ImageEncoder
from models import CompletionOutcome, OutcomeKind, SessionState, SessionView, Sketch

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionView, SessionView], None]


class SessionController:
    def __init__(
        self,
        encoder: ImageEncoder,
        client: CompletionClient,
        sketch: Optional[Sketch] = None,
        on_state_change: Optional[StateCallback] = None,
    ) -> None:
        self._encoder = encoder
        self._client = client
        self._on_state_change = on_state_change

        self._lock = threading.RLock()
        self._sketch = sketch if sketch is not None else Sketch()
        self._view = SessionView.idle()
        # Advanced by every submission and every clear; outcomes tagged with
        # an older value are dropped.
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._view.state

    @property
    def view(self) -> SessionView:
        return self._view

    @property
    def sketch(self) -> Sketch:
        return self._sketch

    def replace_client(self, client: CompletionClient) -> None:
        with self._lock:
            self._client = client

    def process(self) -> None:
        with self._lock:
            if self._view.state == SessionState.LOADING:
                return
            if self._sketch.is_empty():
                self._transition(SessionView.failed(ValidationFailure().user_message))
                return
            try:
                payload = self._encoder.encode(self._sketch.snapshot())
            except EncodingFailure as exc:
                logger.warning("Sketch encoding failed: %s", exc)
                self._transition(SessionView.failed(exc.user_message))
                return

            self._generation += 1
            generation = self._generation
            self._transition(SessionView.loading())
            logger.info("Submitting sketch #%d (%d bytes)", generation, len(payload.data))
            try:
                self._client.submit(payload, lambda outcome: self._handle_outcome(generation, outcome))
            except Exception as exc:
                logger.exception("Could not start submission #%d", generation)
                self._transition(SessionView.failed(ApiErrorFailure(str(exc)).user_message))

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._sketch.clear()
            self._transition(SessionView.idle())

    def _handle_outcome(self, generation: int, outcome: CompletionOutcome) -> None:
        with self._lock:
            if generation != self._generation or self._view.state != SessionState.LOADING:
                logger.info("Dropping stale outcome for submission #%d", generation)
                return
            if outcome.kind == OutcomeKind.RESULT.value:
                self._transition(SessionView.result(outcome.text))
            else:
                self._transition(SessionView.failed(outcome.message or user_message(outcome.code)))

    def _transition(self, to_view: SessionView) -> None:
        from_view = self._view
        if from_view == to_view:
            return
        self._view = to_view
        if self._on_state_change:
            self._on_state_change(from_view, to_view)
