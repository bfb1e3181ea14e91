"""Public core APIs for composition roots and external integrations."""

from core.app_config import AppConfig
from core.capture_session import CaptureSession
from core.errors import (
    ConfigurationError,
    PipelineError,
    RecordingFailed,
    RewriteFailed,
    TranscriptionFailed,
)
from core.http_client import close_shared_client, get_shared_client
from core.pipeline import PipelineOutcome, PromptPipeline, RunOptions
from core.rewrite_client import RewriteClient
from core.transcription_client import TranscriptionClient

__all__ = [
    "AppConfig",
    "CaptureSession",
    "ConfigurationError",
    "PipelineError",
    "PipelineOutcome",
    "PromptPipeline",
    "RecordingFailed",
    "RewriteClient",
    "RewriteFailed",
    "RunOptions",
    "TranscriptionClient",
    "TranscriptionFailed",
    "get_shared_client",
    "close_shared_client",
]
