"""
Background polling thread and the snapshot hand-off to the render loop.
The poller owns the live Stats; after every cycle it publishes a deep copy to the
StatsBoard, which the renderer reads under the board's lock. Polling runs on its own
interval timer, independent of frame rate and input handling.
"""
import copy
import logging
import threading
import time
from typing import Optional, Tuple

from pooldash.constants import POLL_INTERVAL, BLOCK_REWARD, REWARD_REDUCTION, MINER_ADDRESS
from pooldash.data import Stats
from pooldash.engine import Fetch, Sources, update_stats
from pooldash.fetcher import TransportError, fetch_json
from pooldash.miner import MinerFeed, apply_miner_reading

logger = logging.getLogger(__name__)

STATUS_CONNECTING = "Connecting…"
STATUS_LIVE = "Live"
STATUS_UNREACHABLE = "API unreachable"


class StatsBoard:
    # Double-buffered snapshot: publish() swaps in a fresh copy atomically
    def __init__(self, stats: Optional[Stats] = None):
        self._lock = threading.Lock()
        self._stats = copy.deepcopy(stats) if stats is not None else Stats()
        self._status = STATUS_CONNECTING
        self._last_update: Optional[float] = None

    def publish(self, stats: Stats, status: str = STATUS_LIVE) -> None:
        fresh = copy.deepcopy(stats)
        with self._lock:
            self._stats = fresh
            self._status = status
            self._last_update = time.time()

    def set_status(self, status: str) -> None:
        with self._lock:
            self._status = status

    def snapshot(self) -> Tuple[Stats, str, Optional[float]]:
        with self._lock:
            return self._stats, self._status, self._last_update


def new_stats() -> Stats:
    # Startup state: zeroed scalars, empty history, static placeholders filled in.
    stats = Stats()
    stats.network.reward = BLOCK_REWARD
    stats.network.reward_reduction = REWARD_REDUCTION
    stats.miner.address = MINER_ADDRESS or None
    return stats


def poll_once(stats: Stats, board: StatsBoard, sources: Sources,
              fetch: Fetch = fetch_json, miner_feed: Optional[MinerFeed] = None) -> bool:
    # One tick: update, then publish. Returns False when a source was unreachable.
    try:
        changed = update_stats(stats, sources, fetch)
    except TransportError as e:
        logger.error(f"API unreachable: {e}")
        # Partial updates (height committed) still reach the screen
        board.publish(stats, STATUS_UNREACHABLE)
        return False
    except Exception as e:
        logger.error(f"Stats update failed: {e}", exc_info=True)
        board.publish(stats, STATUS_UNREACHABLE)
        return False

    if miner_feed is not None:
        try:
            apply_miner_reading(stats.miner, miner_feed())
        except TransportError as e:
            logger.error(f"Miner feed unreachable: {e}")
        except Exception as e:
            logger.error(f"Miner feed error: {e}", exc_info=True)

    if changed:
        logger.info(f"Stats updated at height {stats.network.height}")
    board.publish(stats, STATUS_LIVE)
    return True


def run_stats_polling(board: StatsBoard, stop_event: threading.Event,
                      sources: Optional[Sources] = None,
                      interval: float = POLL_INTERVAL,
                      fetch: Fetch = fetch_json,
                      miner_feed: Optional[MinerFeed] = None,
                      stats: Optional[Stats] = None):
    # Polling loop: first cycle immediately, then one per interval until stop_event is set.
    sources = sources or Sources()
    stats = stats or new_stats()
    logger.info(f"Starting stats polling every {interval}s against {sources.pool_url}")

    while True:
        poll_once(stats, board, sources, fetch, miner_feed)
        if stop_event.wait(interval):
            break

    logger.info("Stats polling stopped")
