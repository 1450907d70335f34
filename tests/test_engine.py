import pytest

from conftest import (
    FakeFetch, BLOCKS_URL, HASHRATE_URL, POOL_URL, PRICE_URL,
    blocks, hashrate_doc, markets, pool_doc
)
from pooldash.data import Stats
from pooldash.engine import find_price, update_stats
from pooldash.fetcher import TransportError


def snapshot_of(stats):
    net, pool = stats.network, stats.pool
    return (
        net.hashrate.points(), net.difficulty, net.height, net.price,
        pool.hashrate.points(), pool.connected_miners, pool.effort,
        pool.total_blocks, pool.confirming_new_block,
    )


def test_first_cycle_populates_everything(stats, sources, fetch):
    assert update_stats(stats, sources, fetch) is True

    assert stats.network.height == 1000
    assert stats.network.hashrate.points() == [(1000.0, 9.88)]
    assert stats.network.difficulty == 2.5
    assert stats.network.price == 2.0
    assert stats.pool.hashrate.points() == [(1000.0, 12.34)]
    assert stats.pool.connected_miners == 42
    assert stats.pool.effort == 50.0
    assert stats.pool.total_blocks == 7
    assert stats.pool.confirming_new_block == 100.0
    assert fetch.calls == [POOL_URL, PRICE_URL, HASHRATE_URL, BLOCKS_URL]


def test_unchanged_height_is_a_noop(stats, sources, fetch):
    update_stats(stats, sources, fetch)
    before = snapshot_of(stats)

    fetch.docs[POOL_URL] = pool_doc(height=1000, miners=99, effort=0.9)
    assert update_stats(stats, sources, fetch) is False

    assert snapshot_of(stats) == before
    # only the primary document is fetched when the gate holds
    assert fetch.calls[-1] == POOL_URL
    assert fetch.calls.count(PRICE_URL) == 1


def test_histories_stay_aligned_over_many_cycles(sources):
    stats = Stats(capacity=5)
    fetch = FakeFetch()
    for height in range(1, 12):
        fetch.docs[POOL_URL] = pool_doc(height=height)
        update_stats(stats, sources, fetch)
        assert len(stats.network.hashrate) == len(stats.pool.hashrate) <= 5

    assert [x for x, _ in stats.network.hashrate] == [7.0, 8.0, 9.0, 10.0, 11.0]
    assert [x for x, _ in stats.pool.hashrate] == [7.0, 8.0, 9.0, 10.0, 11.0]


def test_full_history_evicts_oldest(stats, sources, fetch):
    for i in range(720):
        stats.network.hashrate.push((i, 1.0))
        stats.pool.hashrate.push((i, 2.0))
    stats.network.height = 719

    fetch.docs[POOL_URL] = pool_doc(height=720)
    update_stats(stats, sources, fetch)

    assert len(stats.network.hashrate) == 720
    assert len(stats.pool.hashrate) == 720
    assert stats.network.hashrate.points()[0] == (1.0, 1.0)
    assert stats.pool.hashrate.points()[-1] == (720.0, 12.34)


def test_primary_failure_leaves_stats_untouched(stats, sources, fetch):
    update_stats(stats, sources, fetch)
    before = snapshot_of(stats)

    fetch.fail(POOL_URL)
    with pytest.raises(TransportError):
        update_stats(stats, sources, fetch)
    assert snapshot_of(stats) == before


@pytest.mark.parametrize("failing_url", [PRICE_URL, HASHRATE_URL, BLOCKS_URL])
def test_secondary_failure_commits_height_only(stats, sources, fetch, failing_url):
    update_stats(stats, sources, fetch)
    stats.pool.confirming_new_block = 37.5

    fetch.docs[POOL_URL] = pool_doc(height=1001, miners=1)
    fetch.fail(failing_url, "503 Service Unavailable")
    with pytest.raises(TransportError):
        update_stats(stats, sources, fetch)

    assert stats.network.height == 1001
    assert stats.pool.confirming_new_block == 37.5
    assert stats.pool.connected_miners == 42
    assert len(stats.network.hashrate) == len(stats.pool.hashrate) == 1


def test_oversized_hashrate_keeps_histories_aligned(stats, sources):
    # a JSON integer too large for a float is treated as a missing value
    update_stats(stats, sources, FakeFetch(pool=pool_doc(pool_hashrate=10**400)))

    assert len(stats.network.hashrate) == len(stats.pool.hashrate) == 1
    assert stats.network.hashrate.latest() == 9.88
    assert stats.pool.hashrate.latest() == 0.0


def test_effort_ties_round_away_from_zero(stats, sources):
    update_stats(stats, sources, FakeFetch(pool=pool_doc(effort=0.00125)))
    assert stats.pool.effort == 0.13


def test_missing_height_skips_cycle(stats, sources, fetch):
    doc = pool_doc()
    del doc["pool"]["networkStats"]["blockHeight"]
    fetch.docs[POOL_URL] = doc

    assert update_stats(stats, sources, fetch) is False
    assert stats.network.height == 0
    assert len(stats.network.hashrate) == 0


def test_lower_height_is_ignored(stats, sources, fetch):
    update_stats(stats, sources, fetch)
    fetch.docs[POOL_URL] = pool_doc(height=999)

    assert update_stats(stats, sources, fetch) is False
    assert stats.network.height == 1000


def test_missing_fields_are_independent(stats, sources, fetch):
    update_stats(stats, sources, fetch)

    doc = pool_doc(height=1001, miners=50, total_blocks=8)
    del doc["pool"]["poolEffort"]
    doc["pool"]["poolStats"]["poolHashrate"] = None
    fetch.docs[POOL_URL] = doc
    update_stats(stats, sources, fetch)

    assert stats.pool.effort == 50.0
    assert stats.pool.connected_miners == 50
    assert stats.pool.total_blocks == 8
    # missing hashrate repeats the last value to keep the charts aligned
    assert stats.pool.hashrate.points()[-1] == (1001.0, 12.34)
    assert len(stats.network.hashrate) == len(stats.pool.hashrate) == 2


def test_network_hashrate_falls_back_to_pool_document(stats, sources):
    fetch = FakeFetch(
        pool=pool_doc(network_hashrate=5_000_000_000_000),
        hashrate={"unrelated": 1},
    )
    update_stats(stats, sources, fetch)
    assert stats.network.hashrate.latest() == 5.0


def test_wrong_typed_field_keeps_prior_value(stats, sources, fetch):
    update_stats(stats, sources, fetch)
    doc = pool_doc(height=1001)
    doc["pool"]["poolStats"]["connectedMiners"] = "many"
    fetch.docs[POOL_URL] = doc

    update_stats(stats, sources, fetch)
    assert stats.pool.connected_miners == 42


def test_effort_formula(stats, sources):
    update_stats(stats, sources, FakeFetch(pool=pool_doc(effort=0.0123)))
    assert stats.pool.effort == 1.23


def test_pending_block_sets_confirmation_progress(stats, sources):
    update_stats(stats, sources, FakeFetch(blocks=blocks(status="pending", progress=0.4567)))
    assert stats.pool.confirming_new_block == 45.67


@pytest.mark.parametrize("progress", [-0.2, 1.7])
def test_confirmation_progress_is_clamped(stats, sources, progress):
    update_stats(stats, sources, FakeFetch(blocks=blocks(status="pending", progress=progress)))
    assert 0.0 <= stats.pool.confirming_new_block <= 100.0


def test_empty_blocks_keeps_confirmation(stats, sources):
    stats.pool.confirming_new_block = 12.0
    update_stats(stats, sources, FakeFetch(blocks=[]))
    assert stats.pool.confirming_new_block == 12.0


def test_price_without_matching_market_is_retained(stats, sources):
    stats.network.price = 1.5
    update_stats(stats, sources, FakeFetch(prices=[{"base_name": "ERG", "quote_name": "BTC", "last_price": 0.1}]))
    assert stats.network.price == 1.5


def test_find_price():
    assert find_price(markets(0.5), "ERG", "SigUSD") == 2.0
    assert find_price(markets(0.0), "ERG", "SigUSD") is None
    assert find_price({"not": "a list"}, "ERG", "SigUSD") is None
    assert find_price([], "ERG", "SigUSD") is None


def test_scaling_of_network_hashrate(stats, sources):
    update_stats(stats, sources, FakeFetch(hashrate=hashrate_doc(9_876_543_210_000)))
    assert stats.network.hashrate.latest() == 9.88


def test_blocks_url_derived_from_pool_url(sources):
    assert sources.blocks_url == BLOCKS_URL
