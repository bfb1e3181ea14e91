"""Delivery targets for the final prompt: system clipboard and a plain-text file."""

import logging
from pathlib import Path

import pyperclip

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """A delivery target could not be written. Never fatal to the pipeline."""


def copy_to_clipboard(text: str):
    """Copy text to the system clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise DeliveryError(f"Clipboard unavailable: {e}") from e


def write_output_file(path, text: str) -> Path:
    """Write text to path as UTF-8, replacing any previous content."""
    target = Path(path)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise DeliveryError(f"Could not write {target}: {e}") from e
    return target
