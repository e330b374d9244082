"""
trust-bot: Slack bot for Salesforce Trust instance status, versions and metrics.

Usage:
    from trust_bot import BotRunner, BotConfig

    BotRunner(config=BotConfig.from_env()).start()

Or from the shell:
    SLACK_BOT_TOKEN=... SLACK_APP_TOKEN=... python -m trust_bot
"""

__version__ = "1.0.0"

from .runner import BotConfig, BotRunner
from .slack_adapter import SlackAdapter
from .status_api import StatusApiClient
from .classifier import classify_status
from .metrics import aggregate_metrics
from .charts import build_chart_url
from .errors import HttpError, NetworkError, ParseError, StatusApiError, UnknownInstance

__all__ = [
    "BotRunner",
    "BotConfig",
    "SlackAdapter",
    "StatusApiClient",
    "classify_status",
    "aggregate_metrics",
    "build_chart_url",
    "StatusApiError",
    "NetworkError",
    "HttpError",
    "ParseError",
    "UnknownInstance",
]
