# applytime/__init__.py
"""
applytime - where did the provisioning run spend its time.

Pipeline: stream (decode) -> latency (accumulate per dimension) -> report (rank + format).
"""
from .errors import ApplytimeError, ConfigError, StreamDecodeError
from .events import APPLY_COMPLETE, Hook, Message, Resource
from .latency import (
    BY_ADDRESS, BY_PROVIDER, BY_RESOURCE_TYPE, DIMENSIONS,
    Dimension, LatencyAccumulator, LatencyStats,
)
from .pipeline import RunSummary, summarize
from .report import Report, ReportRow, build_report, format_report, rank
from .stream import read_messages

__all__ = [
    "ApplytimeError", "ConfigError", "StreamDecodeError",
    "APPLY_COMPLETE", "Hook", "Message", "Resource",
    "BY_ADDRESS", "BY_PROVIDER", "BY_RESOURCE_TYPE", "DIMENSIONS",
    "Dimension", "LatencyAccumulator", "LatencyStats",
    "RunSummary", "summarize",
    "Report", "ReportRow", "build_report", "format_report", "rank",
    "read_messages",
]
