"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_MODEL = "gpt-4"
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MAX_TOKENS = 300


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "tabula" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", "")) or os.getenv(API_KEY_ENV, "")

    def set_api_key(self, key: str) -> None:
        data = self._read_all()
        data["api_key"] = key
        self._write_all(data)

    def get_model(self) -> str:
        data = self._read_all()
        return str(data.get("model", DEFAULT_MODEL))

    def set_model(self, model: str) -> None:
        data = self._read_all()
        data["model"] = model
        self._write_all(data)

    def get_endpoint(self) -> str:
        data = self._read_all()
        return str(data.get("endpoint", DEFAULT_ENDPOINT))

    def get_max_tokens(self) -> int:
        data = self._read_all()
        try:
            return int(data.get("max_tokens", DEFAULT_MAX_TOKENS))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid max_tokens in %s", self._path)
            return DEFAULT_MAX_TOKENS

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Could not read config at %s, using defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
