"""
Metric aggregation - groups raw metric rows into windowed chart series.
"""

import logging
from dataclasses import dataclass
from datetime import timezone
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List

from .models import MetricRow, MetricSeries

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 30
DATE_FORMAT = "%Y-%m-%d"


class KnownMetric(str, Enum):
    TRANSACTION_COUNT = "TransactionCount"
    AVG_TRANSACTION_SPEED = "AvgTransactionSpeed"


@dataclass(frozen=True)
class MetricSpec:
    """How a metric is titled, scaled and labelled on its chart."""
    title: str
    scale: float
    label: str


METRIC_SPECS = MappingProxyType({
    KnownMetric.TRANSACTION_COUNT.value: MetricSpec(
        title="Daily Transaction Count",
        scale=1000000000.0,
        label="All Instances (in Billions)",
    ),
    KnownMetric.AVG_TRANSACTION_SPEED.value: MetricSpec(
        title="Daily Average Transactions Time",
        scale=1,
        label="All Instances (in ms)",
    ),
})

_missing = [m.value for m in KnownMetric if m.value not in METRIC_SPECS]
if _missing:
    raise RuntimeError(f"No chart spec for metrics: {', '.join(_missing)}")


def get_metric_spec(name: str) -> MetricSpec:
    """Look up a metric's chart spec, falling back to scale 1 and its raw name."""
    spec = METRIC_SPECS.get(name)
    if spec is None:
        logger.warning(f"No chart spec for metric {name!r}, using unscaled values")
        spec = MetricSpec(title=name, scale=1, label=name)
    return spec


def aggregate_metrics(
    rows: Iterable[MetricRow],
    window: int = DEFAULT_WINDOW,
) -> Dict[str, MetricSeries]:
    """
    Group rows by metric and keep the most recent `window` samples of each.

    Groups keep first-seen order. Within a group rows are sorted by timestamp
    (stable, so ties keep input order) before the window is taken.

    Args:
        rows: Metric samples in any order
        window: Max samples per metric

    Returns:
        Dict of metric name -> MetricSeries
    """
    grouped: Dict[str, List[MetricRow]] = {}
    for row in rows:
        grouped.setdefault(row.name, []).append(row)

    series: Dict[str, MetricSeries] = {}
    for name, group in grouped.items():
        spec = get_metric_spec(name)
        recent = sorted(group, key=lambda r: r.timestamp)[-window:] if window > 0 else []

        series[name] = MetricSeries(
            name=name,
            title=spec.title,
            label=spec.label,
            values=[row.value / spec.scale for row in recent],
            labels=[row.timestamp.astimezone(timezone.utc).strftime(DATE_FORMAT) for row in recent],
        )

    logger.debug(f"Aggregated {len(series)} metric series")
    return series
