"""
BotRunner - Core bot orchestrator.

The runner owns:
- Status API client
- Command parsing and handling (status, version, alias, metrics, help)
- Bot configuration (identity, endpoints, announce channels)

The adapter (e.g., SlackAdapter) owns the human interface.
"""

import logging
import os
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import __version__
from .charts import CHART_BASE_URL, build_chart_url
from .classifier import classify_status
from .errors import StatusApiError
from .metrics import DEFAULT_WINDOW, aggregate_metrics
from .status_api import STATUS_API_BASE_URL, StatusApiClient

logger = logging.getLogger(__name__)

STATUS_COMMAND = re.compile(r"^status\s+([A-Za-z0-9]+)$", re.IGNORECASE)
VERSION_COMMAND = re.compile(r"^version\s+([A-Za-z0-9]+)$", re.IGNORECASE)
ALIAS_COMMAND = re.compile(r"^alias\s+([A-Za-z0-9.\-]+)$", re.IGNORECASE)
METRICS_COMMAND = re.compile(r"^metrics$", re.IGNORECASE)
HELP_COMMAND = re.compile(r"^help$", re.IGNORECASE)

HELP_TEXT = """*Commands*
`status <instance>` - Gets the status
`version <instance>` - Gets the version information
`alias <name>` - Gets the instance name for the given alias
`metrics` - Charts transaction count and speed across all instances"""

Reply = Dict[str, Any]


def _split_channels(value: Optional[str]) -> List[str]:
    return [c.strip() for c in (value or "").split(",") if c.strip()]


@dataclass
class BotConfig:
    """Configuration for the bot.

    Identity:
        bot_name: Bot display name
        version: Version string

    Endpoints:
        api_base_url: Trust status API root
        status_site_url: Human-facing status site, used for attachment links
        chart_base_url: Image chart service
        request_timeout: Status API timeout in seconds

    Optional:
        announce_channels: Slack channel IDs for online/shutdown notices
        metric_window: Samples per metric chart
        diagnostic_commands: Commands that trigger diagnostic info
    """

    bot_name: str = "Trust Bot"
    version: str = __version__
    api_base_url: str = STATUS_API_BASE_URL
    status_site_url: str = "https://status.salesforce.com"
    chart_base_url: str = CHART_BASE_URL
    request_timeout: float = 10.0
    announce_channels: List[str] = field(default_factory=list)
    metric_window: int = DEFAULT_WINDOW
    diagnostic_commands: List[str] = field(
        default_factory=lambda: ["ping", "info", "diag", "diagnostics", "health"]
    )

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Build a config from TRUST_BOT_* / TRUST_API_* environment variables."""
        timeout = os.environ.get("TRUST_API_TIMEOUT")
        try:
            request_timeout = float(timeout) if timeout else 10.0
        except ValueError:
            raise ValueError(f"Invalid TRUST_API_TIMEOUT: {timeout!r}") from None

        return cls(
            bot_name=os.environ.get("TRUST_BOT_NAME") or "Trust Bot",
            api_base_url=os.environ.get("TRUST_API_BASE_URL") or STATUS_API_BASE_URL,
            request_timeout=request_timeout,
            announce_channels=_split_channels(os.environ.get("TRUST_BOT_CHANNELS")),
        )


class BotRunner:
    """
    Core bot orchestrator.

        config = BotConfig.from_env()
        BotRunner(config=config).start()

    handle_message() returns a reply payload ({"text": ...} and/or
    {"attachments": [...]}) for the adapter to post, or None for no reply.
    """

    def __init__(
        self,
        config: BotConfig,
        adapter=None,
        api: Optional[StatusApiClient] = None,
    ):
        self.config = config
        self._start_time = 0.0

        self.api = api or StatusApiClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        )

        # Default to Slack adapter (lazy import avoids requiring tokens at import time)
        if adapter is not None:
            self.adapter = adapter
        else:
            from .slack_adapter import SlackAdapter

            self.adapter = SlackAdapter()

    async def handle_message(self, user_text: str) -> Optional[Reply]:
        """
        Process a message. Called by the adapter.

        Args:
            user_text: Message text with bot mentions removed

        Returns:
            Reply payload, or None when nothing should be posted
        """
        text = user_text.strip()

        match = STATUS_COMMAND.match(text)
        if match:
            return await self.handle_status(match.group(1))

        match = VERSION_COMMAND.match(text)
        if match:
            return await self.handle_version(match.group(1))

        match = ALIAS_COMMAND.match(text)
        if match:
            return await self.handle_alias(match.group(1))

        if METRICS_COMMAND.match(text):
            return await self.handle_metrics()

        if HELP_COMMAND.match(text):
            return {"text": HELP_TEXT}

        if text.lower() in self.config.diagnostic_commands:
            return {"text": self._get_diagnostic_info()}

        logger.debug(f"Ignoring unrecognized message: {text!r}")
        return None

    def _status_link(self, key: str) -> str:
        return f"{self.config.status_site_url}/status/{key}"

    async def handle_status(self, instance: str) -> Reply:
        try:
            record = await self.api.get_instance_status(instance)
        except StatusApiError as e:
            logger.info(f"Status lookup failed for {instance!r}: {e}")
            return {"text": f'Unknown instance "{instance}"'}

        report = classify_status(record)

        attachment: Dict[str, Any] = {
            "title": f"{record.key} status",
            "title_link": self._status_link(record.key),
            "text": report.text,
            "fallback": report.fallback,
            "thumb_url": report.thumb_url,
        }
        if report.footer:
            attachment["footer"] = report.footer
        if report.fields:
            attachment["fields"] = report.fields

        return {"attachments": [attachment]}

    async def handle_version(self, instance: str) -> Reply:
        try:
            record = await self.api.get_instance_status(instance)
        except StatusApiError as e:
            logger.info(f"Version lookup failed for {instance!r}: {e}")
            return {"text": f'Unknown instance "{instance}"'}

        release_version = record.release_version or "Unknown"
        attachment = {
            "title": f"{record.key} version information",
            "title_link": self._status_link(record.key),
            "fallback": f"{record.key} release version {release_version}",
            "fields": [
                {
                    "title": "Release Version",
                    "value": release_version,
                    "short": False,
                }
            ],
        }
        return {"attachments": [attachment]}

    async def handle_alias(self, alias: str) -> Optional[Reply]:
        try:
            instance_key = await self.api.get_instance_alias(alias)
        except StatusApiError as e:
            logger.error(f"Alias lookup failed for {alias!r}: {e}")
            return None

        return {"text": f"{alias} runs on {instance_key}"}

    async def handle_metrics(self) -> Optional[Reply]:
        try:
            rows = await self.api.get_metric_values()
        except StatusApiError as e:
            logger.error(f"Metric fetch failed: {e}")
            return None

        series = aggregate_metrics(rows, window=self.config.metric_window)

        attachments = [
            {
                "title": s.title,
                "title_link": f"{self.config.status_site_url}/performance",
                "fallback": s.title,
                "image_url": build_chart_url(s, base_url=self.config.chart_base_url),
            }
            for s in series.values()
        ]
        return {"attachments": attachments}

    def _get_diagnostic_info(self) -> str:
        """Generate diagnostic information."""
        uptime_seconds = int(time.time() - self._start_time) if self._start_time else 0
        hours, remainder = divmod(uptime_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        uptime_str = f"{hours}h {minutes}m {seconds}s"

        return f"""*{self.config.bot_name} Diagnostics*

:robot_face: *Version:* {self.config.version}
:clock1: *Uptime:* {uptime_str}
:satellite: *Status API:* {self.config.api_base_url}
"""

    async def aclose(self):
        await self.api.aclose()

    def start(self, **adapter_kwargs):
        """Start the bot via its adapter.

        Args:
            **adapter_kwargs: Passed to adapter.start() (e.g., register_signals=False).
        """
        self._start_time = time.time()
        logger.info(f"Starting {self.config.bot_name} v{self.config.version}...")
        self.adapter.start(self, **adapter_kwargs)
