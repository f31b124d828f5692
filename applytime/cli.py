from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from applytime.config import load_config
from applytime.errors import ConfigError
from applytime.logging_config import configure_logging
from applytime.pipeline import summarize

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="applytime",
        description="Attribute provisioning time (apply -json event stream) to addresses, providers and resource types.",
    )
    ap.add_argument("--input", "-i", default="-", help="Event stream file (default: stdin).")
    ap.add_argument("--top", type=int, default=None, help="Rows per report block (default: 10).")
    ap.add_argument("--config", default=None, help="YAML config file (default: ./applytime.yml if present).")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR.")
    ap.add_argument("--log-format", default=None, choices=["text", "json"], help="stderr log format.")
    ap.add_argument("--strict", action="store_true", help="Exit 1 if the stream ended on a malformed record.")
    return ap


def _stdin() -> TextIO:
    # Match --input: undecodable bytes become U+FFFD instead of aborting the read.
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="replace")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.top is not None and args.top < 0:
        print("ERROR: --top must be >= 0", file=sys.stderr)
        return 2

    try:
        cfg = load_config(
            Path(args.config) if args.config else None,
            top_n=args.top,
            log_level=args.log_level,
            log_format=args.log_format,
        )
    except ConfigError as exc:
        print(f"ERROR: config: {exc}", file=sys.stderr)
        return 2

    configure_logging(level=cfg.log_level, fmt=cfg.log_format)

    if args.input == "-":
        stream = _stdin()
        try:
            summary = summarize(stream, top_n=cfg.top_n)
        finally:
            if stream is not sys.stdin:
                stream.detach()
    else:
        path = Path(args.input).expanduser()
        try:
            f = path.open("r", encoding="utf-8", errors="replace")
        except OSError as exc:
            print(f"ERROR: cannot open {path}: {exc}", file=sys.stderr)
            return 2
        with f:
            summary = summarize(f, top_n=cfg.top_n)

    if args.strict and summary.decode_error:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
