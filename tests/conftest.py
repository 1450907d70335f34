import pytest

from pooldash.data import Stats
from pooldash.engine import Sources
from pooldash.fetcher import TransportError

POOL_URL = "http://pool.test/api/pools/TestPool"
PRICE_URL = "http://prices.test/markets"
HASHRATE_URL = "http://explorer.test/info"
BLOCKS_URL = POOL_URL + "/blocks"


def pool_doc(height=1000, difficulty=2_500_000_000_000_000, network_hashrate=None,
             pool_hashrate=12_340_000_000, miners=42, effort=0.5, total_blocks=7):
    network = {"blockHeight": height, "networkDifficulty": difficulty}
    if network_hashrate is not None:
        network["networkHashrate"] = network_hashrate
    return {
        "pool": {
            "networkStats": network,
            "poolStats": {"poolHashrate": pool_hashrate, "connectedMiners": miners},
            "poolEffort": effort,
            "totalBlocks": total_blocks,
        }
    }


def markets(last_price=0.5):
    return [
        {"base_name": "SigUSD", "quote_name": "ERG", "last_price": 2.0},
        {"base_name": "ERG", "quote_name": "SigRSV", "last_price": 900.0},
        {"base_name": "ERG", "quote_name": "SigUSD", "last_price": last_price},
    ]


def hashrate_doc(value=9_876_543_210_000):
    return {"hashRate": value}


def blocks(status="confirmed", progress=1.0):
    return [
        {"status": status, "confirmationProgress": progress},
        {"status": "confirmed", "confirmationProgress": 1.0},
    ]


class FakeFetch:
    # url → document; an Exception value is raised instead of returned
    def __init__(self, **docs):
        self.docs = {
            POOL_URL: docs.get("pool", pool_doc()),
            PRICE_URL: docs.get("prices", markets()),
            HASHRATE_URL: docs.get("hashrate", hashrate_doc()),
            BLOCKS_URL: docs.get("blocks", blocks()),
        }
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        doc = self.docs[url]
        if isinstance(doc, Exception):
            raise doc
        return doc

    def fail(self, url, reason="connection refused"):
        self.docs[url] = TransportError(url, reason)


@pytest.fixture
def sources():
    return Sources(pool_url=POOL_URL, price_url=PRICE_URL, hashrate_url=HASHRATE_URL,
                   native_coin="ERG", stable_coin="SigUSD")


@pytest.fixture
def stats():
    return Stats(capacity=720)


@pytest.fixture
def fetch():
    return FakeFetch()
