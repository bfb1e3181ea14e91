"""Unit tests for TranscriptionClient request shape and error mapping."""

import os
import tempfile
import unittest

import httpx

from core.app_config import AppConfig
from core.errors import TranscriptionFailed
from core.transcription_client import TranscriptionClient


class TranscriptionClientTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.audio_path = os.path.join(self._tmp.name, "memo.wav")
        with open(self.audio_path, "wb") as f:
            f.write(b"RIFF....WAVE")
        self.config = AppConfig(api_key="sk-test")

    def tearDown(self):
        self._tmp.cleanup()

    def _client(self, handler) -> TranscriptionClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        self.addCleanup(http.close)
        return TranscriptionClient(self.config, client=http)

    def test_sends_multipart_with_model_and_language(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = request.read()
            return httpx.Response(200, json={"text": " Crea una función. "})

        text = self._client(handler).transcribe(self.audio_path, "es")

        self.assertEqual(text, " Crea una función. ")
        self.assertEqual(seen["url"], "https://api.openai.com/v1/audio/transcriptions")
        self.assertEqual(seen["auth"], "Bearer sk-test")
        self.assertIn(b'name="model"', seen["body"])
        self.assertIn(b"whisper-1", seen["body"])
        self.assertIn(b'name="language"', seen["body"])
        self.assertIn(b'filename="memo.wav"', seen["body"])
        self.assertIn(b"RIFF....WAVE", seen["body"])

    def test_http_error_raises_transcription_failed_with_cause(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"message": "server down"}})

        with self.assertRaises(TranscriptionFailed) as ctx:
            self._client(handler).transcribe(self.audio_path, "es")
        self.assertIsInstance(ctx.exception.cause, httpx.HTTPStatusError)

    def test_transport_error_raises_transcription_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(TranscriptionFailed):
            self._client(handler).transcribe(self.audio_path, "es")

    def test_missing_recording_raises_transcription_failed(self):
        client = self._client(lambda request: httpx.Response(200, json={"text": "x"}))
        with self.assertRaises(TranscriptionFailed):
            client.transcribe(os.path.join(self._tmp.name, "missing.wav"), "es")

    def test_response_without_text_raises(self):
        client = self._client(lambda request: httpx.Response(200, json={"duration": 1.2}))
        with self.assertRaises(TranscriptionFailed):
            client.transcribe(self.audio_path, "es")

    def test_segments_are_not_used_as_text(self):
        client = self._client(
            lambda request: httpx.Response(200, json={"segments": [{"text": "Hola"}]})
        )
        with self.assertRaises(TranscriptionFailed):
            client.transcribe(self.audio_path, "es")

    def test_blank_text_raises(self):
        client = self._client(lambda request: httpx.Response(200, json={"text": "  "}))
        with self.assertRaises(TranscriptionFailed):
            client.transcribe(self.audio_path, "es")


if __name__ == "__main__":
    unittest.main()
