"""CLI runtime wiring for voice2prompt."""

import argparse
import logging
import sys
from collections.abc import Sequence

from core.app_config import AppConfig
from core.errors import ConfigurationError, PipelineError
from core.http_client import close_shared_client
from core.pipeline import PromptPipeline, RunOptions

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record a voice memo and turn it into an English prompt for a coding assistant."
    )
    parser.add_argument("-l", "--lang", default="es", help="Input language (e.g., es, en, pt)")
    parser.add_argument("-o", "--output", help="Output file for the English prompt")
    parser.add_argument(
        "-c",
        "--clipboard",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Copy result to clipboard",
    )
    parser.add_argument("-p", "--prompt", help="Override the system prompt for translation")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or WARNING)")
    return parser


def _configure_logging(level_name: str, log_file: str = ""):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, str(level_name or "").upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers,
    )


def _print_status(message: str):
    print(f"[INFO] {message}", file=sys.stderr)
    sys.stderr.flush()


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        config = AppConfig.from_env()
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    _configure_logging(args.log_level or config.log_level, config.log_file)

    options = RunOptions(
        language=args.lang,
        output_path=args.output,
        copy_to_clipboard=args.clipboard,
        instruction_template=args.prompt,
    )
    pipeline = PromptPipeline(config, on_status=_print_status)

    try:
        outcome = pipeline.run(options)
    except PipelineError as e:
        logger.debug("Pipeline aborted at %s stage", e.stage, exc_info=True)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n[INFO] Cancelled.", file=sys.stderr)
        return 130
    finally:
        close_shared_client()

    print(outcome.text)
    return 0


def main():
    sys.exit(run_cli())
