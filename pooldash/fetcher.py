"""
Blocking JSON fetcher used by the poll cycle.
Every failure mode (connection, HTTP status, bad body) surfaces as TransportError.
"""
import logging
from typing import Any

import requests

from pooldash.constants import USER_AGENT

logger = logging.getLogger(__name__)


class TransportError(Exception):
    # Raised when a source cannot be reached or returns an unusable body.
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def fetch_json(url: str) -> Any:
    # GET url and decode the body as JSON. No retries: the next tick is the retry.
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TransportError(url, str(e)) from e

    try:
        return resp.json()
    except ValueError as e:
        raise TransportError(url, f"invalid JSON body: {e}") from e
