"""
SlackAdapter - Slack interface for the bot.

Handles Socket Mode connection, event routing, and reply posting.
Routes messages to BotRunner for processing.
"""

import asyncio
import logging
import os
import signal
from typing import Optional

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from .utils import post_status_message, strip_mentions

logger = logging.getLogger(__name__)


class SlackAdapter:
    """Slack Socket Mode adapter. Routes messages to a BotRunner."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        app_token: Optional[str] = None,
    ):
        self.bot_token = bot_token or os.environ.get("SLACK_BOT_TOKEN")
        self.app_token = app_token or os.environ.get("SLACK_APP_TOKEN")

        if not self.bot_token or not self.app_token:
            raise ValueError("Missing SLACK_BOT_TOKEN or SLACK_APP_TOKEN")

        self.runner = None

    def start(self, runner, register_signals: bool = True):
        """Start Slack Socket Mode, routing messages to runner. Blocks until shutdown."""
        self.runner = runner
        asyncio.run(self._run(register_signals))

    async def _run(self, register_signals: bool):
        self.app = AsyncApp(token=self.bot_token)
        self._register_handlers()

        stop = asyncio.Event()
        if register_signals:
            loop = asyncio.get_running_loop()
            loop.add_signal_handler(signal.SIGTERM, stop.set)
            loop.add_signal_handler(signal.SIGINT, stop.set)

        handler = AsyncSocketModeHandler(self.app, self.app_token)
        try:
            await handler.connect_async()
            await self._post_status(
                f":white_check_mark: {self.runner.config.bot_name} v{self.runner.config.version} is online!"
            )

            await stop.wait()
            logger.info("Shutdown signal received...")
        finally:
            await self._post_status(
                f":warning: {self.runner.config.bot_name} v{self.runner.config.version}"
                " is shutting down..."
            )
            await handler.close_async()
            await self.runner.aclose()

    def _register_handlers(self):
        """Register Slack event handlers."""

        @self.app.event("app_mention")
        async def handle_mention(event, say):
            await self._handle_mention(event, say)

        @self.app.event("message")
        async def handle_message(event, say):
            await self._handle_dm(event, say)

    async def _handle_mention(self, event, say):
        """Handle @mentions of the bot."""
        user_message = strip_mentions(event.get("text", ""))
        thread_ts = event.get("thread_ts")

        if not user_message:
            await say(
                f"Hi! I'm {self.runner.config.bot_name}. Try `help` to see what I can do.",
                thread_ts=thread_ts,
            )
            return

        try:
            reply = await self.runner.handle_message(user_message)
            if reply:
                await say(**reply, thread_ts=thread_ts)

        except Exception as e:
            logger.error(f"Error processing mention: {e}", exc_info=True)
            await say(f"Sorry, I encountered an error: {e}", thread_ts=thread_ts)

    async def _handle_dm(self, event, say):
        """Handle direct messages."""
        if event.get("channel_type") != "im":
            return
        if event.get("bot_id"):
            return

        user_message = strip_mentions(event.get("text", ""))

        try:
            reply = await self.runner.handle_message(user_message)
            if reply:
                await say(**reply)
        except Exception as e:
            logger.error(f"Error processing DM: {e}")
            await say(f"Sorry, I encountered an error: {e}")

    async def _post_status(self, message: str):
        """Post to announce channels if configured."""
        if self.runner and self.runner.config.announce_channels:
            await post_status_message(
                self.bot_token, self.runner.config.announce_channels, message
            )
