"""
TT Bot - A Discord bot that turns time requests into timestamp badges.
"""

import asyncio
import logging
import sys

from .main import main as async_main


def main() -> None:
    """Synchronous entry point that runs the async main function."""
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.exception(f"Failed to start bot: {e}")
        print(f"Failed to start bot: {e}", file=sys.stderr)
        sys.exit(1)


__all__ = ["main"]
