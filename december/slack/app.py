"""
Slack Bolt App
==============

Creates the Slack Bolt application December talks through.

Socket Mode keeps the bot reachable without a public URL: Slack pushes
events over a WebSocket the bot opens itself.
"""

from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from december.utils.config import get_config
from december.utils.logger import Logger

logger = Logger("SlackApp")


def create_slack_app() -> AsyncApp:
    """Create the Bolt app from the configured tokens."""
    config = get_config()

    app = AsyncApp(
        token=config.slack.bot_token,
        signing_secret=config.slack.signing_secret,
    )

    logger.info("Slack Bolt app created")
    return app


async def create_socket_handler(app: AsyncApp) -> AsyncSocketModeHandler:
    """Create the Socket Mode handler that connects the app to Slack."""
    config = get_config()

    handler = AsyncSocketModeHandler(
        app=app,
        app_token=config.slack.app_token
    )

    logger.info("Socket Mode handler created")
    return handler
