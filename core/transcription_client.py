import logging
import os
from typing import TYPE_CHECKING, Optional

import httpx

from core.errors import TranscriptionFailed
from core.http_client import get_shared_client

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Wrapper for the OpenAI-compatible speech-to-text endpoint."""

    def __init__(self, config: "AppConfig", client: Optional[httpx.Client] = None):
        self.api_key = config.api_key
        self.api_url = config.transcription_url
        self.model = config.transcription_model
        self._client = client

    def _headers(self):
        return {"Authorization": f"Bearer {self.api_key}"}

    @staticmethod
    def _extract_text_from_payload(payload) -> str:
        if not isinstance(payload, dict):
            return ""
        text_value = payload.get("text")
        if isinstance(text_value, str):
            return text_value
        return ""

    def transcribe(self, audio_path: str, language: str) -> str:
        """Transcribe a finished recording. The language hint is passed through as-is."""
        filename = os.path.basename(str(audio_path))
        data = {"model": self.model, "language": language}
        client = self._client or get_shared_client()
        logger.debug(
            "STT request -> %s | model=%s language=%s file=%s",
            self.api_url,
            self.model,
            language,
            filename,
        )
        try:
            with open(audio_path, "rb") as f:
                resp = client.post(
                    self.api_url,
                    headers=self._headers(),
                    data=data,
                    files={"file": (filename, f)},
                )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            raise TranscriptionFailed(f"Transcription request failed: {e}", cause=e) from e
        except OSError as e:
            raise TranscriptionFailed(f"Could not read recording {audio_path}: {e}", cause=e) from e
        except ValueError as e:
            raise TranscriptionFailed(f"Transcription response was not valid JSON: {e}", cause=e) from e

        text = self._extract_text_from_payload(payload)
        # A silent memo has nothing to rewrite.
        if not text.strip():
            raise TranscriptionFailed("Transcription response did not contain any text.")
        return text
