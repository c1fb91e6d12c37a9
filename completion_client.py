"""Chat completion client for describing a sketch.

The sketch travels inline: the prompt and the base64 JPEG text form the
content of a single user message. One POST, one buffered response, no
retries. ``submit`` runs the exchange on a worker thread and reports exactly
one ``CompletionOutcome``.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from config import API_KEY_ENV, DEFAULT_ENDPOINT, DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from errors import (
    ApiErrorFailure,
    AuthFailure,
    EmptyResponseFailure,
    NetworkFailure,
    NoInterpretationFailure,
    RequestEncodingFailure,
    ResponseParsingFailure,
    TabulaError,
)
from models import CompletionOutcome, EncodedPayload, OutcomeKind
from schemas import ChatMessage, CompletionRequest, CompletionResponse

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Analyze the following base64-encoded image data and describe what you see:"
# httpx defaults to 5 s, too short for a completion round trip.
DEFAULT_TIMEOUT_S = 60.0
_LOG_BODY_LIMIT = 2000


class OpenAICompletionClient:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        prompt: str = DEFAULT_PROMPT,
        request_timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint
        self._max_tokens = max_tokens
        self._prompt = prompt
        self._request_timeout_s = request_timeout_s
        self._transport = transport

    def submit(
        self,
        payload: EncodedPayload,
        on_outcome: Callable[[CompletionOutcome], None],
    ) -> threading.Thread:
        thread = threading.Thread(target=self._worker, args=(payload, on_outcome), daemon=True)
        thread.start()
        return thread

    def build_request(self, payload: EncodedPayload) -> CompletionRequest:
        return CompletionRequest(
            model=self._model,
            messages=[ChatMessage(role="user", content=f"{self._prompt}\n{payload.text}")],
            max_tokens=self._max_tokens,
        )

    def complete(self, payload: EncodedPayload) -> str:
        """Run one request/response exchange and return the interpretation text."""
        api_key = self._api_key or os.getenv(API_KEY_ENV, "")
        if not api_key:
            raise AuthFailure("No API key configured")

        try:
            request = self.build_request(payload)
            body = json.dumps(request.model_dump(), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise RequestEncodingFailure(str(exc)) from exc

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        try:
            with httpx.Client(transport=self._transport, timeout=self._request_timeout_s) as http:
                response = http.post(self._endpoint, content=body, headers=headers)
        except httpx.TransportError as exc:
            raise NetworkFailure(str(exc) or type(exc).__name__) from exc

        return self._interpret(response)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _worker(
        self,
        payload: EncodedPayload,
        on_outcome: Callable[[CompletionOutcome], None],
    ) -> None:
        try:
            text = self.complete(payload)
        except TabulaError as exc:
            logger.warning("Completion failed (%s): %s", exc.code, exc)
            on_outcome(
                CompletionOutcome(kind=OutcomeKind.ERROR.value, code=exc.code, message=exc.user_message)
            )
            return
        except Exception as exc:
            logger.exception("Unexpected completion failure")
            failure = ApiErrorFailure(str(exc))
            on_outcome(
                CompletionOutcome(kind=OutcomeKind.ERROR.value, code=failure.code, message=failure.user_message)
            )
            return
        on_outcome(CompletionOutcome(kind=OutcomeKind.RESULT.value, text=text))

    def _interpret(self, response: httpx.Response) -> str:
        raw = response.content
        if not raw:
            raise EmptyResponseFailure()
        logger.debug("API response (%d): %s", response.status_code, raw[:_LOG_BODY_LIMIT].decode("utf-8", "replace"))

        if response.status_code == 401:
            raise AuthFailure(_error_envelope_message(raw) or "401 Unauthorized")
        if response.status_code >= 400:
            message = _error_envelope_message(raw)
            if message:
                raise ApiErrorFailure(f"{response.status_code} {message}")

        try:
            parsed = CompletionResponse.model_validate_json(raw)
        except ValidationError as exc:
            raise ResponseParsingFailure(_summarize(exc)) from exc

        if parsed.usage is not None:
            logger.info(
                "Completion %s used %d tokens (%d prompt, %d completion)",
                parsed.id,
                parsed.usage.total_tokens,
                parsed.usage.prompt_tokens,
                parsed.usage.completion_tokens,
            )

        content = parsed.first_content()
        if content is None:
            raise NoInterpretationFailure()
        return content


def _error_envelope_message(raw: bytes) -> str:
    """Pull ``error.message`` out of a provider error body, if it has one."""
    try:
        data = json.loads(raw)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    error = data.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or "")
    if isinstance(error, str):
        return error
    return ""


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first.get('msg', '')}"
    return str(first.get("msg", exc))
