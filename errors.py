"""Shared error codes, user-facing messages and failure types."""

from __future__ import annotations

VALIDATION_FAILED = "VALIDATION_FAILED"
ENCODING_FAILED = "ENCODING_FAILED"
REQUEST_ENCODING_FAILED = "REQUEST_ENCODING_FAILED"
NETWORK_ERROR = "NETWORK_ERROR"
EMPTY_RESPONSE = "EMPTY_RESPONSE"
RESPONSE_PARSING_FAILED = "RESPONSE_PARSING_FAILED"
NO_INTERPRETATION = "NO_INTERPRETATION"
AUTH_FAILED = "AUTH_FAILED"
API_ERROR = "API_ERROR"

ERROR_MESSAGES = {
    VALIDATION_FAILED: "Please draw something first",
    ENCODING_FAILED: "Image conversion failed",
    REQUEST_ENCODING_FAILED: "Failed to encode request body",
    NETWORK_ERROR: "Network error",
    EMPTY_RESPONSE: "No data received",
    RESPONSE_PARSING_FAILED: "Response parsing error",
    NO_INTERPRETATION: "No interpretation found in response",
    AUTH_FAILED: "API key is missing or invalid",
    API_ERROR: "The completion service returned an error",
}


class TabulaError(Exception):
    code = API_ERROR

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or ERROR_MESSAGES[self.code])
        self.detail = detail

    @property
    def user_message(self) -> str:
        base = ERROR_MESSAGES[self.code]
        if self.detail:
            return f"{base}: {self.detail}"
        return base


class ValidationFailure(TabulaError):
    code = VALIDATION_FAILED


class EncodingFailure(TabulaError):
    code = ENCODING_FAILED


class RequestEncodingFailure(TabulaError):
    code = REQUEST_ENCODING_FAILED


class NetworkFailure(TabulaError):
    code = NETWORK_ERROR


class EmptyResponseFailure(TabulaError):
    code = EMPTY_RESPONSE


class ResponseParsingFailure(TabulaError):
    code = RESPONSE_PARSING_FAILED


class NoInterpretationFailure(TabulaError):
    code = NO_INTERPRETATION


class AuthFailure(TabulaError):
    code = AUTH_FAILED


class ApiErrorFailure(TabulaError):
    code = API_ERROR


def user_message(code: str, detail: str = "") -> str:
    """Render the message shown in the window for an error code."""
    base = ERROR_MESSAGES.get(code, code)
    return f"{base}: {detail}" if detail else base
