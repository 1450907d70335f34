"""
Seam for per-miner statistics.

No live per-miner source is wired in by default, so MinerStats stays at its zero
values. A feed is any callable returning a MinerReading; the poller applies it after
each pool cycle. Fields left as None keep their previous values.
"""
import logging
import time
from typing import Callable, Optional

from pooldash.data import MinerStats
from pooldash.normalize import normalize_field, round2

logger = logging.getLogger(__name__)


class MinerReading:
    # One observation of a single miner. Hashrate values are in Mh/s.
    def __init__(self, hashrate: Optional[float] = None,
                 average_hashrate: Optional[float] = None,
                 pending_shares: Optional[float] = None,
                 pending_balance: Optional[float] = None,
                 round_contribution: Optional[float] = None,
                 total_paid: Optional[float] = None,
                 timestamp: Optional[float] = None):
        self.hashrate = hashrate
        self.average_hashrate = average_hashrate
        self.pending_shares = pending_shares
        self.pending_balance = pending_balance
        self.round_contribution = round_contribution
        self.total_paid = total_paid
        self.timestamp = timestamp


MinerFeed = Callable[[], MinerReading]

SCALAR_FIELDS = (
    "average_hashrate", "pending_shares", "pending_balance",
    "round_contribution", "total_paid",
)


def apply_miner_reading(miner: MinerStats, reading: MinerReading) -> None:
    for name in SCALAR_FIELDS:
        value, warning = normalize_field(getattr(reading, name), round2, getattr(miner, name), name)
        if warning:
            logger.debug(warning)
        setattr(miner, name, value)

    if reading.hashrate is not None:
        ts = reading.timestamp if reading.timestamp is not None else time.time()
        miner.hashrate.push((ts, round2(reading.hashrate)))
        miner.hashrate.trim()
