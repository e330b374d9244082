"""
Chart image URLs for metric series.

Rendering is done by the Google Image Charts service; we only build the
query string it expects.
"""

from typing import List
from urllib.parse import quote, urlencode

from .models import MetricSeries

CHART_BASE_URL = "https://chart.googleapis.com/chart"
CHART_WIDTH = 400
CHART_HEIGHT = 250
SERIES_COLOR = "0000cc"
TRANSPARENT_BACKGROUND = "bg,s,FFFFFF00"


def _format_value(value: float) -> str:
    text = f"{value:.10f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _encode_data(values: List[float]) -> str:
    # Text encoding; -1 is the service's "missing value" marker
    if not values:
        return "t:-1"
    return "t:" + ",".join(_format_value(v) for v in values)


def build_chart_url(series: MetricSeries, base_url: str = CHART_BASE_URL) -> str:
    """
    Build a line-chart image URL for a metric series.

    Auto-scaled, transparent background, legend on top, single series.
    """
    params = [
        ("cht", "lc"),
        ("chs", f"{CHART_WIDTH}x{CHART_HEIGHT}"),
        ("chd", _encode_data(series.values)),
        ("chds", "a"),
        ("chco", SERIES_COLOR),
        ("chdl", series.label),
        ("chdlp", "t"),
        ("chf", TRANSPARENT_BACKGROUND),
        ("chxt", "y"),
    ]
    if series.title:
        params.append(("chtt", series.title))

    return f"{base_url}?{urlencode(params, quote_via=quote, safe=',:|')}"
