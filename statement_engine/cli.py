"""Command-line entry point.

Usage:
    statement-engine analyze statement.pdf --password secret
    statement-engine analyze export.csv --indent 2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import IngestError
from .pipeline import FileKind, ingest_path
from .settings import APP_NAME, APP_VERSION
from .settings_store import load_settings

log = logging.getLogger("statement_engine.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NEEDS_SECRET = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Bank statement ingestion & normalization")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING (default), ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a statement and print the result as JSON")
    analyze.add_argument("file", type=Path)
    analyze.add_argument("--kind", choices=[k.value for k in FileKind], help="Override detection by extension")
    analyze.add_argument("--password", default=None, help="Password for protected PDFs")
    analyze.add_argument("--indent", type=int, default=None)
    return parser


def _cmd_analyze(args: argparse.Namespace) -> int:
    if not args.file.is_file():
        print(f"File not found: {args.file}", file=sys.stderr)
        return EXIT_FAILED

    try:
        result = ingest_path(args.file, secret=args.password, settings=load_settings(), file_kind=args.kind)
    except IngestError as e:
        log.debug("Ingestion failed", exc_info=True)
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return EXIT_NEEDS_SECRET if e.retryable else EXIT_FAILED

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=args.indent))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "analyze":
        return _cmd_analyze(args)
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
