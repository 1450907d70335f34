from unittest.mock import MagicMock, patch

import pytest
import requests

from pooldash.fetcher import TransportError, fetch_json

URL = "http://pool.test/api/pools/TestPool"


def make_response(payload=None, status_error=None, json_error=None):
    resp = MagicMock()
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


@patch("pooldash.fetcher.requests.get")
def test_returns_decoded_body(mock_get):
    mock_get.return_value = make_response({"pool": {"totalBlocks": 3}})

    assert fetch_json(URL) == {"pool": {"totalBlocks": 3}}
    args, kwargs = mock_get.call_args
    assert args == (URL,)
    assert "User-Agent" in kwargs["headers"]


@patch("pooldash.fetcher.requests.get")
def test_connection_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(TransportError) as exc_info:
        fetch_json(URL)
    assert exc_info.value.url == URL
    assert "refused" in exc_info.value.reason


@patch("pooldash.fetcher.requests.get")
def test_http_status_error(mock_get):
    mock_get.return_value = make_response(status_error=requests.HTTPError("502 Bad Gateway"))

    with pytest.raises(TransportError, match="502"):
        fetch_json(URL)


@patch("pooldash.fetcher.requests.get")
def test_invalid_json_body(mock_get):
    mock_get.return_value = make_response(json_error=ValueError("Expecting value"))

    with pytest.raises(TransportError, match="invalid JSON"):
        fetch_json(URL)
