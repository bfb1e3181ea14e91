"""Application configuration as an injectable dataclass."""

import os
import shlex
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

from core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_ENV_FILES = (".env.local", ".env")


def default_recorder_command() -> list[str]:
    """sox reading the default input device; Windows needs the waveaudio driver."""
    if sys.platform == "win32":
        return ["sox", "-t", "waveaudio", "-d"]
    return ["sox", "-d"]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", cause=e) from e


@dataclass
class AppConfig:
    """Application configuration loaded from environment variables."""

    # API
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL

    # STT
    transcription_model: str = "whisper-1"

    # Rewrite
    rewrite_model: str = "gpt-4"
    rewrite_temperature: float = 0.2

    # Recording
    recorder_command: list[str] = field(default_factory=default_recorder_command)
    audio_file: str = ""

    # Logging
    log_level: str = "WARNING"
    log_file: str = ""

    @property
    def transcription_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/audio/transcriptions"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    @staticmethod
    def from_env(env_files=DEFAULT_ENV_FILES) -> "AppConfig":
        """Load config from .env.local / .env files and environment variables."""
        for path in env_files:
            load_dotenv(path)
        recorder = os.getenv("RECORDER_COMMAND", "").strip()
        return AppConfig(
            api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL,
            transcription_model=os.getenv("TRANSCRIPTION_MODEL", "whisper-1"),
            rewrite_model=os.getenv("REWRITE_MODEL", "gpt-4"),
            rewrite_temperature=_env_float("REWRITE_TEMPERATURE", 0.2),
            recorder_command=shlex.split(recorder) if recorder else default_recorder_command(),
            audio_file=os.getenv("AUDIO_FILE", "").strip(),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
            log_file=os.getenv("LOG_FILE", "").strip(),
        )
