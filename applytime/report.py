# applytime/report.py
"""
Ranker/Reporter - top N keys by average latency.

Ordering: descending average, ties broken by descending key string, so the
output never depends on mapping iteration order. Percentages are relative
to the total over ALL keys, not only the rows shown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import deal

from applytime.latency import LatencyMap, LatencyStats


@dataclass(frozen=True)
class ReportRow:
    key: str
    stats: LatencyStats
    percent: float


@dataclass(frozen=True)
class Report:
    label: str
    total: int
    rows: List[ReportRow] = field(default_factory=list)


def rank(mapping: LatencyMap) -> List[Tuple[str, LatencyStats]]:
    return sorted(
        mapping.items(),
        key=lambda kv: (kv[1].average(), kv[0]),
        reverse=True,
    )


def _percent(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return part * 100 / total


@deal.pre(lambda label, top_n, mapping: top_n >= 0, message="top_n must be non-negative")
@deal.post(lambda result: result.total >= 0)
def build_report(label: str, top_n: int, mapping: LatencyMap) -> Report:
    ranked = rank(mapping)
    n = min(top_n, len(ranked))
    total = sum(stats.total_time for stats in mapping.values())

    rows = [
        ReportRow(key=key, stats=stats, percent=_percent(stats.total_time, total))
        for key, stats in ranked[:n]
    ]
    return Report(label=label, total=total, rows=rows)


def format_row(row: ReportRow) -> str:
    s = row.stats
    if s.instance_count == 1:
        return f"  {row.key}: {s.total_time} sec ({row.percent:.2f}%)"
    return (
        f"  {row.key}: total {s.total_time} sec ({row.percent:.2f}%) "
        f"over {s.instance_count} instances, avg: {s.average():.2f} sec "
        f"[{s.min_time}, {s.max_time}]"
    )


def format_report(report: Report) -> List[str]:
    lines = [f"Top {len(report.rows)} by {report.label} (total: {report.total} sec):"]
    lines.extend(format_row(row) for row in report.rows)
    return lines
