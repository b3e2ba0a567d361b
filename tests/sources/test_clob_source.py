"""Tests for the CLOB price source."""

import io
import socket
from decimal import Decimal
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from trend_trader.errors import ConfigurationError, FetchError
from trend_trader.sources.clob import ClobPriceSource

from helpers.fakes import FakeClock


def mock_response(body: str) -> MagicMock:
    response = MagicMock()
    response.read.return_value = body.encode("utf-8")
    response.__enter__.return_value = response
    return response


@pytest.fixture
def source(clock) -> ClobPriceSource:
    return ClobPriceSource(
        "https://clob.example.com/",
        {"btc-up": "tok-123"},
        side="BUY",
        api_key="secret",
        clock=clock
    )


class TestClobPriceSource:
    """Test suite for ClobPriceSource."""

    def test_fetch_snapshot(self, source, clock) -> None:
        with patch("trend_trader.sources.clob.urlopen", return_value=mock_response('{"price": "0.53"}')) as mock_open:
            point = source.fetch_snapshot("btc-up", timeout=2.5)

        assert point.market_id == "btc-up"
        assert point.price == Decimal("0.53")
        assert point.ts == clock.now()

        request = mock_open.call_args.args[0]
        assert request.full_url == "https://clob.example.com/price?token_id=tok-123&side=BUY"
        assert request.get_header("Authorization") == "Bearer secret"
        assert mock_open.call_args.kwargs["timeout"] == 2.5

    def test_default_timeout(self, source) -> None:
        with patch("trend_trader.sources.clob.urlopen", return_value=mock_response('{"price": "0.5"}')) as mock_open:
            source.fetch_snapshot("btc-up")

        assert mock_open.call_args.kwargs["timeout"] == 10.0

    def test_numeric_price(self, source) -> None:
        with patch("trend_trader.sources.clob.urlopen", return_value=mock_response('{"price": 0.25}')):
            assert source.fetch_snapshot("btc-up").price == Decimal("0.25")

    def test_unknown_market(self, source) -> None:
        with pytest.raises(FetchError):
            source.fetch_snapshot("eth-up")

    @pytest.mark.parametrize("error", [
        HTTPError("https://clob.example.com/price", 503, "Unavailable", {}, io.BytesIO(b"")),
        URLError("no route"),
        socket.timeout("timed out"),
        ConnectionResetError("reset"),
    ])
    def test_transport_errors(self, source, error) -> None:
        with patch("trend_trader.sources.clob.urlopen", side_effect=error):
            with pytest.raises(FetchError) as exc_info:
                source.fetch_snapshot("btc-up")

        assert exc_info.value.market_id == "btc-up"

    @pytest.mark.parametrize("body", ["not json", "{}", '{"price": "abc"}', '{"price": null}', "[1, 2]"])
    def test_bad_responses(self, source, body) -> None:
        with patch("trend_trader.sources.clob.urlopen", return_value=mock_response(body)):
            with pytest.raises(FetchError):
                source.fetch_snapshot("btc-up")

    def test_invalid_configuration(self) -> None:
        with pytest.raises(ConfigurationError):
            ClobPriceSource("not-a-url", {})

        with pytest.raises(ConfigurationError):
            ClobPriceSource("https://clob.example.com", {}, side="MID")

    def test_sell_side_query(self) -> None:
        source = ClobPriceSource("https://clob.example.com", {"m": "t"}, side="SELL", clock=FakeClock())

        with patch("trend_trader.sources.clob.urlopen", return_value=mock_response('{"price": "0.5"}')) as mock_open:
            source.fetch_snapshot("m")

        assert mock_open.call_args.args[0].full_url.endswith("side=SELL")
