"""Protocol interfaces used by SessionController."""

from __future__ import annotations

import threading
from typing import Callable, Protocol

from models import CompletionOutcome, EncodedPayload, Sketch


class ImageEncoder(Protocol):
    def encode(self, sketch: Sketch) -> EncodedPayload: ...


class CompletionClient(Protocol):
    def submit(
        self,
        payload: EncodedPayload,
        on_outcome: Callable[[CompletionOutcome], None],
    ) -> threading.Thread: ...


class ConfigStore(Protocol):
    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_model(self) -> str: ...

    def set_model(self, model: str) -> None: ...

    def get_endpoint(self) -> str: ...

    def get_max_tokens(self) -> int: ...
