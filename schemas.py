"""Wire models for the chat completion endpoint."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    max_tokens: int


class _ResponseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)


class ResponseMessage(_ResponseModel):
    role: str
    content: Optional[str] = None


class Choice(_ResponseModel):
    index: int
    message: ResponseMessage
    finish_reason: Optional[str] = None


class Usage(_ResponseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class CompletionResponse(_ResponseModel):
    id: str
    model: str
    created: int
    choices: list[Choice]
    usage: Optional[Usage] = None

    def first_content(self) -> Optional[str]:
        """Content of the first choice, or None when there is nothing to show."""
        if not self.choices:
            return None
        content = self.choices[0].message.content
        if content is None:
            return None
        return content
