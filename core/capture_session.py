"""Interactive recording session: a recorder subprocess stopped by a single key press."""

import logging
import signal
import subprocess
import sys
import threading
from enum import Enum
from pathlib import Path
from typing import Optional

from core.app_config import default_recorder_command
from core.errors import RecordingFailed
from core.terminal_input import ESCAPE_KEY, KeyListener, open_terminal

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    """Lifecycle of one capture session."""

    IDLE = "Idle"
    RECORDING = "Recording"
    STOPPING = "Stopping"
    COMPLETED = "Completed"
    FAILED = "Failed"


class StopReason(str, Enum):
    """Which event source ended the recording."""

    NONE = "none"
    USER = "user"
    PROCESS_EXIT = "process-exit"
    ABORTED = "aborted"


class CaptureSession:
    """Owns the recorder process and the raw-mode key listener for one recording.

    Two event sources race to end a session: the user pressing a stop key, and
    the recorder exiting on its own. The first one wins under ``_lock``; the
    other becomes a no-op. Whoever wins also claims the key input, so the
    listener is stopped and the terminal restored exactly once.
    """

    def __init__(
        self,
        target_path,
        recorder_command: Optional[list[str]] = None,
        terminal=None,
        stop_keys=(ESCAPE_KEY,),
        popen=subprocess.Popen,
    ):
        self.target_path = Path(target_path)
        self.recorder_command = list(recorder_command or default_recorder_command())
        self.stop_keys = tuple(stop_keys)
        self._terminal = terminal if terminal is not None else open_terminal()
        self._popen = popen

        self._lock = threading.Lock()
        self._state = CaptureState.IDLE
        self._stop_reason = StopReason.NONE
        self._input_attached = False
        self._process = None
        self._listener: Optional[KeyListener] = None
        self._stderr_thread: Optional[threading.Thread] = None
        self.returncode: Optional[int] = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def stop_reason(self) -> StopReason:
        return self._stop_reason

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # -- Lifecycle --

    def start(self):
        """Spawn the recorder and switch the terminal to raw key input."""
        with self._lock:
            if self._state is not CaptureState.IDLE:
                raise RuntimeError(f"Capture session cannot start from state {self._state.value}")

        command = [*self.recorder_command, str(self.target_path)]
        logger.info("Starting recorder: %s", " ".join(command))
        try:
            self._process = self._popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            self._state = CaptureState.FAILED
            raise RecordingFailed(f"Could not start recorder '{command[0]}': {e}", cause=e) from e

        try:
            self._terminal.enter_raw()
        except OSError as e:
            logger.error("Raw key input unavailable, stopping recorder: %s", e)
            self._process.terminate()
            self.returncode = self._process.wait()
            self._state = CaptureState.FAILED
            raise RecordingFailed(f"Recording needs an interactive terminal: {e}", cause=e) from e

        self._listener = KeyListener(self._terminal, self._on_key)
        with self._lock:
            self._input_attached = True
            self._state = CaptureState.RECORDING
        self._listener.start()

        if getattr(self._process, "stderr", None) is not None:
            self._stderr_thread = threading.Thread(
                target=self._drain_stderr, name="recorder-stderr", daemon=True
            )
            self._stderr_thread.start()
        logger.info("Recording started (pid=%s)", getattr(self._process, "pid", "?"))

    def request_stop(self) -> bool:
        """User-requested stop. Returns False if the session was already stopping."""
        with self._lock:
            if self._state is not CaptureState.RECORDING:
                return False
            self._state = CaptureState.STOPPING
            self._stop_reason = StopReason.USER
            claimed = self._claim_input()

        # Disarm input before signalling so no second stop path can start.
        self._release_input(claimed)
        logger.info("Stop key pressed, signalling recorder")
        self._signal_recorder()
        return True

    def wait(self) -> Path:
        """Block until the recorder exits. Returns the recording path or raises RecordingFailed."""
        if self._process is None:
            raise RuntimeError("Capture session was not started")
        try:
            returncode = self._process.wait()
        except BaseException:
            # The recorder may still be running (e.g. Ctrl+C); close() ends it.
            self.close()
            raise
        self._mark_exited()

        if self._stderr_thread is not None:
            self._stderr_thread.join(timeout=1)

        with self._lock:
            self.returncode = returncode
            # Negative return codes mean the recorder died from a signal.
            ok = self._stop_reason is StopReason.USER or returncode is None or returncode <= 0
            self._state = CaptureState.COMPLETED if ok else CaptureState.FAILED

        if not ok:
            logger.error("Recorder exited with code %s", returncode)
            raise RecordingFailed(f"Recorder process exited with code {returncode}")
        logger.info("Recording complete (%s): %s", self._stop_reason.value, self.target_path)
        return self.target_path

    def close(self):
        """Release every handle; terminates a recorder that is still running."""
        if self._process is not None and self._process.poll() is None:
            with self._lock:
                if self._state is CaptureState.RECORDING:
                    self._state = CaptureState.STOPPING
                    self._stop_reason = StopReason.ABORTED
            logger.warning("Terminating recorder left running")
            self._process.terminate()
            self.returncode = self._process.wait()
        if self._process is not None:
            self._mark_exited()
        with self._lock:
            if self._state in (CaptureState.RECORDING, CaptureState.STOPPING):
                self._state = CaptureState.FAILED

    # -- Event sources --

    def _on_key(self, key: str):
        if key in self.stop_keys:
            self.request_stop()

    def _mark_exited(self):
        with self._lock:
            if self._state is CaptureState.RECORDING:
                self._state = CaptureState.STOPPING
                self._stop_reason = StopReason.PROCESS_EXIT
                logger.info("Recorder exited before the stop key was pressed")
            claimed = self._claim_input()
        self._release_input(claimed)

    # -- Helpers --

    def _claim_input(self) -> bool:
        # Caller holds _lock.
        if not self._input_attached:
            return False
        self._input_attached = False
        return True

    def _release_input(self, claimed: bool):
        if self._listener is None:
            return
        if claimed:
            self._listener.stop()
            self._terminal.restore()
            logger.debug("Key listener detached, terminal restored")
        else:
            # The other event source owns the detach; wait until it is done.
            self._listener.join()

    def _signal_recorder(self):
        if sys.platform == "win32":
            self._process.terminate()
        else:
            self._process.send_signal(signal.SIGINT)

    def _drain_stderr(self):
        for raw in self._process.stderr:
            line = raw.decode("utf-8", errors="replace").rstrip()
            if line:
                logger.debug("recorder: %s", line)
