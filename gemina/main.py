"""Command-line entry point: upload one document and print its prediction."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from loguru import logger
from pydantic import ValidationError

from gemina.core.config import get_settings
from gemina.core.errors import GeminaError
from gemina.core.logging_config import setup_logging
from gemina.models.schemas import ApiResult, UploadStatus
from gemina.services.gemina_client import GeminaClient
from gemina.services.workflow import DocumentWorkflow


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemina-extract",
        description="Upload a document to Gemina and poll until its prediction is ready.",
    )
    parser.add_argument("source", help="Local file path or http(s) URL of the document")
    parser.add_argument("--api-key", help="Gemina API key (default: GEMINA_API_KEY)")
    parser.add_argument("--client-id", help="Gemina client id (default: GEMINA_CLIENT_ID)")
    parser.add_argument("--api-url", help="API base URL (default: GEMINA_API_URL)")
    parser.add_argument(
        "--no-llm", dest="use_llm", action="store_false", default=None,
        help="Disable LLM-assisted extraction",
    )
    parser.add_argument("--interval", type=_non_negative_float, help="Seconds between polls")
    parser.add_argument("--max-attempts", type=_positive_int, help="Give up after N polls")
    parser.add_argument("--timeout", type=_positive_float, help="Give up after N seconds of polling")
    parser.add_argument("--debug", action="store_true", default=None, help="Verbose logging")
    return parser


UPLOAD_MESSAGES = {
    UploadStatus.CREATED: "Uploaded Successfully.",
    UploadStatus.ALREADY_PROCESSING: "Document is already being processed. No need to upload again.",
}


def _print_result(title: str, result: ApiResult) -> None:
    print(f"{title}:")
    print(_format_payload(result.payload, result.text))
    print(f"Status code: {result.status_code}\n")


def _format_payload(payload: Any, text: str) -> str:
    if payload is None:
        return text
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        "api_key": args.api_key,
        "client_id": args.client_id,
        "api_url": args.api_url,
        "use_llm": args.use_llm,
        "poll_interval": args.interval,
        "poll_max_attempts": args.max_attempts,
        "poll_timeout": args.timeout,
        "debug": args.debug,
    }
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Error message: invalid configuration: {exc}")
        return 1
    settings = settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    setup_logging(debug=settings.debug, log_dir=settings.log_dir or None)

    if not settings.has_credentials():
        parser.error("an API key and client id are required (--api-key/--client-id or GEMINA_API_KEY/GEMINA_CLIENT_ID)")

    try:
        with GeminaClient(settings) as client:
            result = DocumentWorkflow(client, settings).run(args.source)
    except GeminaError as exc:
        logger.error(f"Workflow failed: {exc}")
        print(f"Error message: {exc}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    _print_result("Upload result", result.upload)
    outcome = UPLOAD_MESSAGES.get(result.upload.status_code)
    if outcome:
        print(f"{outcome}\n")
    _print_result("Prediction result", result.prediction)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
