"""
Utilities - pure helpers for message text, timestamps, and status posting.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

import httpx

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"<@[A-Z0-9]+>")

# Average calendar lengths, in days
_DAYS_PER_MONTH = 30.436875
_DAYS_PER_YEAR = 365.2425


def strip_mentions(text: str) -> str:
    """Remove Slack user mentions (<@U123>) and surrounding whitespace."""
    return _MENTION_RE.sub("", text or "").strip()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp from the status API.

    Accepts a trailing 'Z' and fractional seconds. Naive values are taken as UTC.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def from_now(then: datetime, now: Optional[datetime] = None) -> str:
    """
    Humanize the distance between two moments ("5 minutes ago", "in 2 days").

    Thresholds follow the usual relative-time convention: under 45 seconds is
    "a few seconds", under 45 minutes counts minutes, under 22 hours counts
    hours, under 26 days counts days, under 11 months counts months.
    """
    now = now or datetime.now(timezone.utc)
    delta = (now - then).total_seconds()
    future = delta < 0

    seconds = round(abs(delta))
    minutes = round(abs(delta) / 60)
    hours = round(abs(delta) / 3600)
    days = round(abs(delta) / 86400)
    months = round(abs(delta) / 86400 / _DAYS_PER_MONTH)
    years = round(abs(delta) / 86400 / _DAYS_PER_YEAR)

    if seconds < 45:
        phrase = "a few seconds"
    elif minutes <= 1:
        phrase = "a minute"
    elif minutes < 45:
        phrase = f"{minutes} minutes"
    elif hours <= 1:
        phrase = "an hour"
    elif hours < 22:
        phrase = f"{hours} hours"
    elif days <= 1:
        phrase = "a day"
    elif days < 26:
        phrase = f"{days} days"
    elif months <= 1:
        phrase = "a month"
    elif months < 11:
        phrase = f"{months} months"
    elif years <= 1:
        phrase = "a year"
    else:
        phrase = f"{years} years"

    return f"in {phrase}" if future else f"{phrase} ago"


async def post_status_message(
    slack_token: str,
    channels: Iterable[str],
    message: str,
    timeout: float = 10.0,
) -> bool:
    """
    Post a status message to one or more Slack channels.

    Args:
        slack_token: Slack Bot OAuth token
        channels: Channel IDs to post to
        message: Message text
        timeout: Request timeout in seconds

    Returns:
        True if every post succeeded, False otherwise
    """
    ok = True
    async with httpx.AsyncClient(timeout=timeout) as client:
        for channel in channels:
            try:
                response = await client.post(
                    "https://slack.com/api/chat.postMessage",
                    headers={
                        "Authorization": f"Bearer {slack_token}",
                        "Content-Type": "application/json"
                    },
                    json={"channel": channel, "text": message}
                )
                data = response.json()
                if not data.get("ok"):
                    logger.error(f"Failed to post status to {channel}: {data.get('error')}")
                    ok = False
            except Exception as e:
                logger.error(f"Error posting status message to {channel}: {e}")
                ok = False
    return ok
