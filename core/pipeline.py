"""Voice-to-prompt pipeline: record → transcribe → rewrite → deliver.

Stages run strictly one after another. The first failing stage raises a
``PipelineError`` and nothing later runs, so a partial result is never
delivered.
"""

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

from core.app_config import AppConfig
from core.capture_session import CaptureSession
from core.errors import ConfigurationError
from core.prompt_text import resolve_instruction_template, strip_enclosing_quotes
from core.rewrite_client import RewriteClient
from core.text_output import DeliveryError, copy_to_clipboard, write_output_file
from core.transcription_client import TranscriptionClient

logger = logging.getLogger(__name__)

RECORDING_FILENAME = "recording.wav"


@dataclass
class RunOptions:
    """Per-run options, usually straight from the command line."""

    language: str = "es"
    output_path: Optional[str] = None
    copy_to_clipboard: bool = True
    instruction_template: Optional[str] = None


@dataclass
class PipelineOutcome:
    text: str
    transcription: str
    copied_to_clipboard: bool = False
    output_path: Optional[Path] = None


class PromptPipeline:
    """Runs one voice memo through every stage.

    All collaborators are injectable so the pipeline can be driven with fakes.
    ``on_status`` receives short progress messages meant for the user.
    """

    def __init__(
        self,
        config: AppConfig,
        transcriber=None,
        rewriter=None,
        session_factory: Optional[Callable[[Path], CaptureSession]] = None,
        copy_text: Callable[[str], None] = copy_to_clipboard,
        write_text: Callable[[str, str], Path] = write_output_file,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.transcriber = transcriber or TranscriptionClient(config)
        self.rewriter = rewriter or RewriteClient(config)
        self._session_factory = session_factory or self._default_session
        self._copy_text = copy_text
        self._write_text = write_text
        self._on_status = on_status

    def run(self, options: RunOptions) -> PipelineOutcome:
        self._check_credentials()

        with self._recording_path() as audio_path:
            self._record(audio_path)
            self._status("Transcribing...")
            transcription = self.transcriber.transcribe(str(audio_path), options.language)
        logger.info("Transcription: %s", transcription)
        self._status(f"Input: {transcription}")

        self._status("Rewriting into an English prompt...")
        template = resolve_instruction_template(options.instruction_template)
        rewritten = self.rewriter.rewrite(transcription, template)
        text = strip_enclosing_quotes(rewritten)
        self._status(f"English prompt: {text}")

        outcome = PipelineOutcome(text=text, transcription=transcription)
        self._deliver(outcome, options)
        return outcome

    # -- Stages --

    def _check_credentials(self):
        if not (self.config.api_key or "").strip():
            raise ConfigurationError(
                "OPENAI_API_KEY not set. Please set it in .env.local or your environment."
            )

    def _record(self, audio_path: Path):
        session = self._session_factory(audio_path)
        with session:
            self._status("Recording... Press ESC to finish.")
            session.wait()

    def _deliver(self, outcome: PipelineOutcome, options: RunOptions):
        # Delivery targets are best effort: failures are reported, not fatal.
        if options.copy_to_clipboard:
            try:
                self._copy_text(outcome.text)
                outcome.copied_to_clipboard = True
                self._status("Prompt copied to clipboard!")
            except DeliveryError as e:
                logger.warning("Clipboard delivery failed: %s", e)
                self._status(f"Warning: {e}")
        if options.output_path:
            try:
                outcome.output_path = self._write_text(options.output_path, outcome.text)
                self._status(f"Prompt written to {options.output_path}")
            except DeliveryError as e:
                logger.warning("File delivery failed: %s", e)
                self._status(f"Warning: {e}")

    # -- Helpers --

    def _default_session(self, audio_path: Path) -> CaptureSession:
        return CaptureSession(audio_path, recorder_command=self.config.recorder_command)

    @contextmanager
    def _recording_path(self) -> Iterator[Path]:
        if self.config.audio_file:
            yield Path(self.config.audio_file)
            return
        with tempfile.TemporaryDirectory(prefix="voice2prompt-") as tmp:
            yield Path(tmp) / RECORDING_FILENAME

    def _status(self, message: str):
        logger.debug(message)
        if self._on_status:
            self._on_status(message)
