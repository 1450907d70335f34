"""
Dashboard data model: network, pool and miner stats plus their aggregate.
One Stats instance is owned by the poller; the renderer only ever sees copies.
"""
from typing import Optional

from pooldash.constants import HISTORY_CAPACITY
from pooldash.history import HashrateHistory


class NetworkStats:
    # Chain-wide metrics; height is the change-detection key
    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.hashrate = HashrateHistory(capacity)  # (height, Th/s)
        self.difficulty: float = 0.0               # P
        self.height: int = 0
        self.reward: float = 0
        self.reward_reduction: float = 0
        self.price: float = 0.0                    # stable-coin per coin


class PoolStats:
    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.hashrate = HashrateHistory(capacity)  # (height, Gh/s)
        self.connected_miners: int = 0
        self.effort: float = 0.0                   # percent
        self.total_blocks: int = 0
        self.confirming_new_block: float = 0.0     # percent, 100 = nothing pending


class MinerStats:
    # Populated only through pooldash.miner.apply_miner_reading
    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.hashrate = HashrateHistory(capacity)  # (timestamp, Mh/s)
        self.average_hashrate: float = 0.0
        self.pending_shares: float = 0.0
        self.pending_balance: float = 0.0
        self.round_contribution: float = 0.0
        self.total_paid: float = 0.0
        self.address: Optional[str] = None


class Stats:
    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.network = NetworkStats(capacity)
        self.pool = PoolStats(capacity)
        self.miner = MinerStats(capacity)

    def trim_history(self) -> None:
        # Network and pool histories are appended 1:1, so they are always trimmed together.
        self.network.hashrate.trim()
        self.pool.hashrate.trim()
