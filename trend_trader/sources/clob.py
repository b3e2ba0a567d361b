"""Price snapshots from a CLOB REST price endpoint."""

import json
import socket
from decimal import Decimal, InvalidOperation
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlparse
from urllib.request import Request, urlopen

import structlog

from ..data.models import PricePoint
from ..errors import ConfigurationError, FetchError
from ..utils.time import Clock, SystemClock

logger = structlog.get_logger(__name__)


class ClobPriceSource:
    """
    Fetches the best price for each market's token.

    Sends ``GET {base_url}/price?token_id=<id>&side=<side>`` and expects
    ``{"price": "<decimal>"}``. BUY quotes the bid and SELL the ask. The
    snapshot is stamped with the local receive time.
    """

    def __init__(
        self,
        base_url: str,
        token_ids: dict[str, str],
        side: str = "BUY",
        api_key: Optional[str] = None,
        default_timeout: float = 10.0,
        clock: Optional[Clock] = None
    ):
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid CLOB URL: {base_url}")
        if side not in ("BUY", "SELL"):
            raise ConfigurationError(f"Invalid quote side: {side}")

        self.base_url = base_url.rstrip("/")
        self.token_ids = dict(token_ids)
        self.side = side
        self.api_key = api_key
        self.default_timeout = default_timeout
        self.clock = clock or SystemClock()
        self.logger = logger

    def fetch_snapshot(self, market_id: str, timeout: Optional[float] = None) -> PricePoint:
        """
        Fetch the latest price for ``market_id``.

        Raises:
            FetchError: unknown market, HTTP or network failure, timeout or
                unparseable response
        """
        token_id = self.token_ids.get(market_id)
        if token_id is None:
            raise FetchError(f"No token id configured for market {market_id}", market_id=market_id)

        query = urlencode({"token_id": token_id, "side": self.side})
        headers = {
            'Accept': 'application/json',
            'User-Agent': 'trend-trader/0.1'
        }
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"

        req = Request(f"{self.base_url}/price?{query}", headers=headers, method="GET")

        try:
            with urlopen(req, timeout=timeout or self.default_timeout) as response:
                body = response.read().decode('utf-8')

        except HTTPError as e:
            self.logger.warning(
                "Price request HTTP error",
                market_id=market_id,
                token_id=token_id,
                error_code=e.code,
                error_reason=str(e.reason)
            )
            raise FetchError(f"HTTP {e.code} fetching price for {market_id}", market_id=market_id) from e

        except (socket.timeout, TimeoutError) as e:
            raise FetchError(f"Timed out fetching price for {market_id}", market_id=market_id) from e

        except (OSError, URLError) as e:
            self.logger.warning(
                "Price request network error",
                market_id=market_id,
                token_id=token_id,
                error=str(e)
            )
            raise FetchError(f"Network error fetching price for {market_id}: {e}", market_id=market_id) from e

        price = self._parse_price(body, market_id)
        return PricePoint(market_id=market_id, ts=self.clock.now(), price=price)

    @staticmethod
    def _parse_price(body: str, market_id: str) -> Decimal:
        try:
            payload = json.loads(body)
            raw = payload["price"]
            if not isinstance(raw, (str, int, float)) or isinstance(raw, bool):
                raise TypeError(f"unexpected price type {type(raw).__name__}")
            return Decimal(str(raw))
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            raise FetchError(
                f"Invalid price response for {market_id}: {body[:200]}",
                market_id=market_id
            ) from e
