from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from applytime.errors import StreamDecodeError
from applytime.latency import DIMENSIONS, LatencyAccumulator
from applytime.report import Report, build_report, format_report
from applytime.stream import read_messages

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10


@dataclass
class RunSummary:
    messages_read: int = 0
    completions: int = 0
    decode_error: Optional[str] = None
    reports: List[Report] = field(default_factory=list)

    @property
    def ignored(self) -> int:
        return self.messages_read - self.completions


def accumulate_stream(stream: TextIO, acc: LatencyAccumulator, summary: RunSummary) -> None:
    """Fold every decodable message into acc; stop quietly at the first decode error."""
    try:
        for message in read_messages(stream):
            summary.messages_read += 1
            acc.accumulate(message)
    except StreamDecodeError as exc:
        summary.decode_error = str(exc)
        logger.error(
            "stopped reading at malformed record: %s",
            exc,
            extra={"extra_data": {"line": exc.line, "messages_read": summary.messages_read}},
        )
    summary.completions = acc.completed


def summarize(stream: TextIO, top_n: int = DEFAULT_TOP_N, out: Optional[TextIO] = None) -> RunSummary:
    """
    Read the whole stream, then print one report block per dimension.

    Reports are emitted even when the stream ended on a decode error.
    """
    out = sys.stdout if out is None else out
    acc = LatencyAccumulator()
    summary = RunSummary()

    accumulate_stream(stream, acc, summary)
    logger.info(
        "stream done",
        extra={"extra_data": {
            "messages_read": summary.messages_read,
            "completions": summary.completions,
            "ignored": summary.ignored,
        }},
    )

    for dim in DIMENSIONS:
        report = build_report(dim.label, top_n, acc.mapping(dim))
        summary.reports.append(report)
        for line in format_report(report):
            out.write(line + "\n")

    return summary
