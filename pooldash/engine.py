"""
Poll-cycle driver for the pool dashboard.

One call to update_stats() fetches the MiningCore pool document and, only when the
chain has moved to a new block height, the price feed, the network hashrate feed and
the pool's recent blocks. Fields are normalized one by one: a missing field keeps its
previous value and never blocks the others. The two abort points are the primary
fetch (nothing changes) and the secondary fetches (height already committed, the
dependent fields stay stale until the next new block).
"""
import logging
from typing import Any, Callable, Optional

from pooldash.constants import (
    POOL_API_URL, PRICE_FEED_URL, NETWORK_HASHRATE_URL,
    NATIVE_COIN, STABLE_COIN
)
from pooldash.data import Stats
from pooldash.extract import extract_float, extract_int, extract_str
from pooldash.fetcher import fetch_json
from pooldash.normalize import apply_field, round2

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Any]


class Sources:
    # The three endpoints of a single pool/network pair
    def __init__(self, pool_url: str = POOL_API_URL, price_url: str = PRICE_FEED_URL,
                 hashrate_url: str = NETWORK_HASHRATE_URL,
                 native_coin: str = NATIVE_COIN, stable_coin: str = STABLE_COIN):
        self.pool_url = pool_url
        self.price_url = price_url
        self.hashrate_url = hashrate_url
        self.native_coin = native_coin
        self.stable_coin = stable_coin

    @property
    def blocks_url(self) -> str:
        return self.pool_url.rstrip("/") + "/blocks"


def find_price(markets: Any, base: str, quote: str) -> Optional[float]:
    # Price of one `base` in `quote`: reciprocal of the market's last traded price.
    if not isinstance(markets, list):
        return None
    # The pair is unique in the feed: the first match decides, even when unusable.
    for market in markets:
        if extract_str(market, "base_name") == base and extract_str(market, "quote_name") == quote:
            last_price = extract_float(market, "last_price")
            if not last_price:
                return None
            return round2(1 / last_price)
    return None


def _update_hashrates(stats: Stats, pool_doc: Any, hashrate_doc: Any, height: int):
    # Both values are computed before either history is touched so the two
    # charts always gain a point together.
    network, pool = stats.network, stats.pool

    raw_net = extract_float(hashrate_doc, "hashRate")
    if raw_net is None:
        raw_net = extract_float(pool_doc, "pool.networkStats.networkHashrate")
    net_hr = apply_field(raw_net, "network_hashrate", network.hashrate.latest(), "Network Hashrate")
    pool_hr = apply_field(
        extract_float(pool_doc, "pool.poolStats.poolHashrate"),
        "pool_hashrate", pool.hashrate.latest(), "Pool Hashrate"
    )

    network.hashrate.push((height, net_hr))
    pool.hashrate.push((height, pool_hr))


def _update_network(stats: Stats, pool_doc: Any):
    network = stats.network
    network.difficulty = apply_field(
        extract_float(pool_doc, "pool.networkStats.networkDifficulty"),
        "network_difficulty", network.difficulty, "Network Difficulty"
    )


def _update_price(stats: Stats, markets: Any, sources: Sources):
    price = find_price(markets, sources.native_coin, sources.stable_coin)
    if price is None:
        logger.warning(f"No {sources.native_coin}/{sources.stable_coin} market in price feed")
        return
    stats.network.price = price


def _update_pool(stats: Stats, pool_doc: Any):
    pool = stats.pool
    pool.connected_miners = apply_field(
        extract_int(pool_doc, "pool.poolStats.connectedMiners"),
        "connected_miners", pool.connected_miners, "Connected Miners"
    )
    pool.effort = apply_field(
        extract_float(pool_doc, "pool.poolEffort"),
        "pool_effort", pool.effort, "Pool Effort"
    )
    pool.total_blocks = apply_field(
        extract_int(pool_doc, "pool.totalBlocks"),
        "total_blocks", pool.total_blocks, "Total Blocks"
    )


def _update_confirmation(stats: Stats, blocks: Any):
    pool = stats.pool
    status = extract_str(blocks, "0.status")
    if status is None:
        logger.warning("No data available for latest block status")
        return

    if status == "pending":
        pool.confirming_new_block = apply_field(
            extract_float(blocks, "0.confirmationProgress"),
            "confirmation_progress", pool.confirming_new_block, "Confirmation Progress"
        )
    else:
        pool.confirming_new_block = 100.0


def update_stats(stats: Stats, sources: Optional[Sources] = None, fetch: Fetch = fetch_json) -> bool:
    """
    Run one poll cycle against `stats` in place.

    Returns True when a new block height was observed and the dependent fields were
    refreshed, False when the change gate held everything as-is. Raises
    TransportError when the primary source fails (stats untouched) or when a
    secondary source fails after the new height was committed.
    """
    sources = sources or Sources()

    pool_doc = fetch(sources.pool_url)

    try:
        height = extract_int(pool_doc, "pool.networkStats.blockHeight")
        if height is None:
            logger.warning("No data available for Block Height")
            return False
        if height == stats.network.height:
            return False
        if height < stats.network.height:
            logger.warning(f"Ignoring block height {height} below current {stats.network.height}")
            return False

        logger.info(f"New block height {height} (was {stats.network.height})")
        stats.network.height = height

        markets = fetch(sources.price_url)
        hashrate_doc = fetch(sources.hashrate_url)
        blocks = fetch(sources.blocks_url)

        _update_hashrates(stats, pool_doc, hashrate_doc, height)
        _update_network(stats, pool_doc)
        _update_price(stats, markets, sources)
        _update_pool(stats, pool_doc)
        _update_confirmation(stats, blocks)
        return True
    finally:
        stats.trim_history()
