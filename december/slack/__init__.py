"""
Slack Integration
=================

The chat surface December answers on:
- Bolt app and Socket Mode handler
- Event handlers (mentions, direct messages, /december)
"""

from december.slack.app import create_slack_app, create_socket_handler
from december.slack.handlers import register_handlers

__all__ = ["create_slack_app", "create_socket_handler", "register_handlers"]
