"""Error kinds raised by the record → transcribe → rewrite pipeline."""


class PipelineError(RuntimeError):
    """Base class for fatal pipeline errors. Carries the underlying cause, if any."""

    stage = "pipeline"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(PipelineError):
    stage = "configuration"


class RecordingFailed(PipelineError):
    stage = "recording"


class TranscriptionFailed(PipelineError):
    stage = "transcription"


class RewriteFailed(PipelineError):
    stage = "rewrite"
