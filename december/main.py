"""
December - Main Entry Point
===========================

1. Loads configuration
2. Builds memory, example library, classifier and agent
3. Registers Slack handlers
4. Runs the Socket Mode connection until interrupted

Run with:
    python -m december.main

Or after installing:
    december
"""

import asyncio
import signal
import sys

from december.utils.config import get_config
from december.utils.logger import Logger, parse_level

main_logger = Logger("Main")


async def main():
    """Initialize all components and run the bot."""
    main_logger.info("Starting December...")

    try:
        main_logger.info("Loading configuration...")
        config = get_config()
        main_logger.set_level(parse_level(config.log_level))

        main_logger.info("Initializing memory...")
        from december.memory import MemoryManager
        memory = MemoryManager()

        main_logger.info("Loading example library...")
        from december.library import ExampleLibrary
        library = ExampleLibrary(config.library.directory, max_examples=config.library.max_examples)
        main_logger.info(f"Example topics: {', '.join(library.topics())}")

        main_logger.info("Creating agent...")
        from december.agent import Agent
        agent = Agent(memory=memory, library=library)

        main_logger.info("Creating Slack app...")
        from december.slack.app import create_slack_app, create_socket_handler
        from december.slack.handlers import register_handlers
        app = create_slack_app()
        register_handlers(app, agent)

        main_logger.info("Starting Socket Mode connection...")
        handler = await create_socket_handler(app)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig,
                lambda: asyncio.create_task(_shutdown(handler))
            )

        main_logger.info("December is running! Press Ctrl+C to stop.")
        await handler.start_async()

    except KeyboardInterrupt:
        main_logger.info("Received interrupt signal")
    except Exception as e:
        main_logger.error("Failed to start bot", e)
        sys.exit(1)


async def _shutdown(handler):
    """Close the Socket Mode connection."""
    main_logger.info("Shutting down...")
    await handler.close_async()
    main_logger.info("Shutdown complete")


def run():
    """Synchronous entry point for the `december` console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
