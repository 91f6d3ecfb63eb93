from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from mail_boundary.config import get_settings
from mail_boundary.services.detection import build_registry
from mail_boundary.services.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _read_input(path: str | None) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _run(path: str | None, list_detectors: bool) -> tuple[int, dict[str, Any]]:
    settings = get_settings()
    configure_logging(settings.log_level)
    registry = build_registry(settings)

    if list_detectors:
        return 0, {"detectors": registry.get_detector_names()}

    try:
        text = _read_input(path)
    except OSError as exc:
        logger.error(
            "Unable to read input",
            extra={"event": "cli_input_unreadable", "path": path, "error": repr(exc)},
        )
        return 2, {"error": f"unable to read input: {exc}"}

    result = registry.detect(text)
    return (0 if result.found else 1), result.as_dict()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Locate the embedded forwarded/reply message inside plain email text."
    )
    parser.add_argument("path", nargs="?", default=None, help="Text file to analyze (default: stdin).")
    parser.add_argument(
        "--detectors",
        action="store_true",
        help="Print the registered detector names in priority order and exit.",
    )
    args = parser.parse_args(argv)

    code, payload = _run(args.path, args.detectors)
    print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    return code


if __name__ == "__main__":
    raise SystemExit(main())
