#!/usr/bin/env python3
"""
Mining Pool Stats Dashboard
Live view of a MiningCore pool, its network and one miner.

Key Features:
- Polls the pool API, a price-tracking feed and a network hashrate feed on a fixed interval
- Updates only when the chain reaches a new block height (no duplicate chart points)
- 720-point rolling hashrate charts for network and pool, aligned by block height
- Block confirmation gauge, pool effort, connected miners, blocks found, coin price
- Connection status indicator; unreachable sources keep the last good values on screen
- Configurable via config.json, thread-safe snapshot hand-off to the render loop

Quit with q, Esc or by closing the window.
"""
import os

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import logging
from logging.handlers import RotatingFileHandler
import signal
import threading

from pooldash.constants import POLL_INTERVAL, POOL_API_URL
from pooldash.polling import StatsBoard, new_stats, run_stats_polling
from pooldash.rendering import init_pygame, run_render_loop

logger = logging.getLogger(__name__)


def setup_logging():
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    log_handler = RotatingFileHandler(
        log_file,
        maxBytes=2*1024*1024,
        backupCount=5
    )

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s | %(levelname)-5s | %(threadName)s | %(message)s',
        handlers=[log_handler, logging.StreamHandler()]
    )


def main():
    setup_logging()

    stop_event = threading.Event()

    def signal_handler(sig, frame):
        stop_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    stats = new_stats()
    board = StatsBoard(stats)

    # START BACKGROUND POLLING
    poller = threading.Thread(
        target=run_stats_polling,
        args=(board, stop_event),
        kwargs={"stats": stats},
        daemon=True,
        name="PoolStats"
    )
    poller.start()

    logger.info(f"Starting dashboard for {POOL_API_URL} (poll every {POLL_INTERVAL}s)")
    init_pygame()
    run_render_loop(board, stop_event)

    poller.join(timeout=5)
    logger.info("Dashboard stopped")


if __name__ == "__main__":
    main()
