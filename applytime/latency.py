# applytime/latency.py
"""
Latency accumulation per dimension.

Each dimension (address, provider, resource type) keeps its own mapping
from key to LatencyStats. Records are created on first contribution and
folded in place afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple

import deal

from applytime.events import Message, Resource

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LatencyStats:
    total_time: int = 0
    min_time: int = 0
    max_time: int = 0
    instance_count: int = 0

    @deal.pre(lambda self, seconds: seconds >= 0, message="elapsed seconds must be non-negative")
    def add(self, seconds: int) -> None:
        self.total_time += seconds
        self.instance_count += 1
        # First contribution sets min; a genuine 0 must not be mistaken for "unset".
        if self.instance_count == 1 or seconds < self.min_time:
            self.min_time = seconds
        if seconds > self.max_time:
            self.max_time = seconds

    @deal.pre(lambda self: self.instance_count > 0, message="average of an empty record")
    @deal.post(lambda result: result >= 0)
    def average(self) -> float:
        return self.total_time / self.instance_count


LatencyMap = Dict[str, LatencyStats]


@dataclass(frozen=True)
class Dimension:
    label: str
    key: Callable[[Resource], str]


BY_ADDRESS = Dimension("address", lambda r: r.address)
BY_PROVIDER = Dimension("provider (avg)", lambda r: r.implied_provider)
BY_RESOURCE_TYPE = Dimension("resource (avg)", lambda r: r.resource_type)

# Report order.
DIMENSIONS: Tuple[Dimension, ...] = (BY_ADDRESS, BY_PROVIDER, BY_RESOURCE_TYPE)


@dataclass
class LatencyAccumulator:
    """
    Folds apply_complete messages into one LatencyMap per dimension.

    Usage:
        acc = LatencyAccumulator()
        for msg in read_messages(stream):
            acc.accumulate(msg)
        acc.mapping(BY_ADDRESS)
    """

    dimensions: Tuple[Dimension, ...] = DIMENSIONS
    completed: int = 0
    _maps: Dict[str, LatencyMap] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        for dim in self.dimensions:
            self._maps.setdefault(dim.label, {})

    def accumulate(self, message: Message) -> bool:
        if not message.is_completion:
            logger.debug("ignoring message", extra={"extra_data": {"type": message.type}})
            return False

        hook = message.hook
        for dim in self.dimensions:
            key = dim.key(hook.resource)
            stats = self._maps[dim.label].get(key)
            if stats is None:
                stats = self._maps[dim.label][key] = LatencyStats()
            stats.add(hook.elapsed_seconds)

        self.completed += 1
        return True

    def mapping(self, dimension: Dimension) -> LatencyMap:
        return self._maps[dimension.label]
