"""Wrapper for the OpenAI-compatible chat-completions API used to rewrite transcripts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from core.errors import RewriteFailed
from core.http_client import get_shared_client

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)


class RewriteClient:
    """Turns free text into an instruction prompt with one chat-completion call."""

    def __init__(self, config: "AppConfig", client: httpx.Client | None = None):
        self.api_key = config.api_key
        self.chat_url = config.chat_url
        self.model = config.rewrite_model
        self.temperature = config.rewrite_temperature
        self._client = client

    def _headers(self):
        return {"Authorization": f"Bearer {self.api_key}"}

    @staticmethod
    def build_messages(text: str, instruction_template: str) -> list[dict]:
        # Template and input stay in separate roles.
        return [
            {"role": "system", "content": instruction_template},
            {"role": "user", "content": text},
        ]

    def rewrite(self, text: str, instruction_template: str) -> str:
        payload = {
            "model": self.model,
            "messages": self.build_messages(text, instruction_template),
            "temperature": self.temperature,
        }
        client = self._client or get_shared_client()
        logger.debug(
            "Chat request -> %s | model=%s temperature=%s",
            self.chat_url,
            self.model,
            self.temperature,
        )
        try:
            resp = client.post(self.chat_url, headers=self._headers(), json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as e:
            raise RewriteFailed(f"Rewrite request failed: {e}", cause=e) from e
        except ValueError as e:
            raise RewriteFailed(f"Rewrite response was not valid JSON: {e}", cause=e) from e
        return self._extract_assistant_content(body)

    @staticmethod
    def _extract_assistant_content(payload) -> str:
        if not isinstance(payload, dict):
            raise RewriteFailed("Chat response payload is not a JSON object.")
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise RewriteFailed("Chat response is missing a valid 'choices' list.")

        first = choices[0]
        if not isinstance(first, dict):
            raise RewriteFailed("Chat response choice is malformed.")
        message = first.get("message")
        if not isinstance(message, dict):
            raise RewriteFailed("Chat response choice is missing 'message'.")
        content = message.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
        raise RewriteFailed("Chat response did not include assistant content.")
