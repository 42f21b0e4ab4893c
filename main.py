"""
SmartBooking entry point.

Runs the offline console demo against in-memory stores.

Usage:
    python main.py                      # booking scenario
    python main.py --scenario race      # two clients race for one slot
    python main.py --date 2026-10-21    # list open slots for a day
"""

import logging

from smartbooking.config import settings

logger = logging.getLogger(__name__)


def _run_console_mode() -> None:
    from console_demo import main as console_main

    logger.info("Starting %s console", settings.app_name)
    console_main()


if __name__ == "__main__":
    _run_console_mode()
