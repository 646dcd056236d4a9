"""
Slack Event Handlers
====================

Routes Slack events to the agent.

Event Types:
- app_mention: Someone mentions @December in a channel; reply in thread
- message.im: Direct messages to the bot
- /december: Slash command (help, status, clear)

Error Handling:
    Handlers never raise into Bolt. Failures are logged and the user gets a
    short apology in the same place the reply would have gone.
"""

import re
from typing import TYPE_CHECKING

from slack_bolt.async_app import AsyncAck, AsyncApp, AsyncSay
from slack_sdk.web.async_client import AsyncWebClient

from december.utils.logger import Logger

if TYPE_CHECKING:
    from december.agent import Agent

logger = Logger("Handlers")

MENTION_RE = re.compile(r"<@[A-Z0-9]+>")

HELP_TEXT = """*December* - Your Coding Assistant

*Commands:*
- `/december help` - Show this help message
- `/december status` - Check bot status
- `/december clear` - Clear your conversation history

*How I answer:*
- Clear change requests get one complete change-set, with my assumptions listed first
- Requests missing something critical get a few targeted questions
- Questions about how things work get an explanation without code

*Examples:*
- "Create a contact form with name, email, and message fields"
- "Add authentication to the app"
- "How does routing work?"
"""

# Set during registration
_agent: "Agent | None" = None


def register_handlers(app: AsyncApp, agent: "Agent") -> None:
    """
    Register all event handlers with the Slack app.

    Args:
        app: The Bolt app instance
        agent: The agent that answers requests
    """
    global _agent
    _agent = agent

    app.event("app_mention")(handle_mention)
    app.event("message")(handle_message)
    app.command("/december")(handle_command)

    logger.info("Registered Slack event handlers")


def strip_mentions(text: str) -> str:
    """Remove <@U123> mentions and surrounding whitespace."""
    return MENTION_RE.sub("", text).strip()


async def handle_mention(event: dict, say: AsyncSay, client: AsyncWebClient) -> None:
    """Answer an @mention in a channel, replying in the thread."""
    thread_ts = event.get("thread_ts") or event.get("ts")

    if _agent is None:
        logger.error("Agent not initialized")
        await say(text="Sorry, I'm still starting up. Please try again in a moment.", thread_ts=thread_ts)
        return

    user_id = event.get("user")
    channel_id = event.get("channel")
    text = strip_mentions(event.get("text", ""))

    if not text:
        await say(
            text="Hi! Tell me what to build, or ask me how something works.",
            thread_ts=thread_ts
        )
        return

    logger.info(f"Mention from {user_id} in {channel_id}: {text[:50]}...")

    try:
        response = await _agent.process(
            user_id=user_id,
            message=text,
            channel_id=channel_id,
            channel_type="channel"
        )
        await say(text=response, thread_ts=thread_ts)

    except Exception as e:
        logger.error("Error handling mention", e)
        await say(text="Sorry, I encountered an error processing your request.", thread_ts=thread_ts)


async def handle_message(event: dict, say: AsyncSay, client: AsyncWebClient) -> None:
    """Answer a direct message; channel messages are left to handle_mention."""
    if event.get("channel_type") != "im":
        return

    # Bot messages (including our own) and edits/deletes
    if event.get("bot_id") or event.get("subtype"):
        return

    if _agent is None:
        logger.error("Agent not initialized")
        await say(text="Sorry, I'm still starting up. Please try again in a moment.")
        return

    user_id = event.get("user")
    channel_id = event.get("channel")
    text = event.get("text", "").strip()

    if not text:
        return

    logger.info(f"DM from {user_id}: {text[:50]}...")

    try:
        response = await _agent.process(
            user_id=user_id,
            message=text,
            channel_id=channel_id,
            channel_type="dm"
        )
        await say(text=response)

    except Exception as e:
        logger.error("Error handling DM", e)
        await say(text="Sorry, I encountered an error processing your request.")


async def handle_command(ack: AsyncAck, command: dict, say: AsyncSay) -> None:
    """
    Handle the /december slash command.

    Args:
        ack: Acknowledge function (must be called within 3 seconds)
        command: The command payload
        say: Function to send messages
    """
    await ack()

    if _agent is None:
        await say(text="Sorry, I'm still starting up.")
        return

    user_id = command.get("user_id")
    text = command.get("text", "").strip().lower()

    if text == "help" or not text:
        await say(text=HELP_TEXT)

    elif text == "status":
        stats = _agent.memory.get_stats()
        status_text = f"""*Bot Status*
- Status: Online
- Model: {_agent.model}
- Active conversations: {stats["users"]}
- Max clarification rounds: {_agent.classifier.max_clarification_rounds}"""
        await say(text=status_text)

    elif text == "clear":
        _agent.clear_conversation(user_id)
        await say(text="Conversation history cleared! Starting fresh.")

    else:
        await say(text=f"Unknown command: `{text}`. Try `/december help`")
