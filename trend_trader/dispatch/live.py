"""Live order execution through an order submitter."""

from decimal import Decimal
from typing import Optional

from ..errors import RetryableSubmitError
from ..ports import OrderConfirmation, OrderSide, OrderSubmitter
from ..state.positions import PositionStateManager
from ..utils.time import Clock
from .base import BaseDispatcher
from .journal import TradeJournal


class LiveDispatcher(BaseDispatcher):
    """
    Submits real orders and waits for confirmation.

    Only rejections the submitter marks as retryable are resent. Any other
    failure, including a timeout, leaves the order state unknown, so it is
    reported as failed rather than risking a duplicate order.
    """

    mode = "live"

    def __init__(
        self,
        positions: PositionStateManager,
        submitter: OrderSubmitter,
        submit_timeout_seconds: float = 10.0,
        max_retries: int = 2,
        retry_delay_seconds: float = 1.0,
        journal: Optional[TradeJournal] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(positions, journal=journal, clock=clock)
        self.submitter = submitter
        self.submit_timeout_seconds = submit_timeout_seconds
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

    def _place_order(
        self,
        market_id: str,
        side: OrderSide,
        size: Decimal,
        price: Decimal
    ) -> OrderConfirmation:
        attempt = 0

        while True:
            try:
                confirmation = self.submitter.submit(
                    market_id,
                    side,
                    size,
                    timeout=self.submit_timeout_seconds
                )
            except RetryableSubmitError as e:
                e.retry_count = attempt
                e.max_retries = self.max_retries
                if attempt >= self.max_retries:
                    self.logger.error(
                        "Order rejected, retries exhausted",
                        market_id=market_id,
                        order_side=side.value,
                        attempts=attempt + 1,
                        error=str(e)
                    )
                    raise

                attempt += 1
                self.logger.warning(
                    f"Order attempt {attempt} rejected, retrying in {self.retry_delay_seconds}s",
                    market_id=market_id,
                    order_side=side.value,
                    error=str(e)
                )
                self.clock.sleep(self.retry_delay_seconds)
                continue

            self.logger.info(
                "Live order confirmed",
                market_id=market_id,
                order_side=side.value,
                size=str(size),
                decision_price=str(price),
                order_id=confirmation.order_id,
                attempts=attempt + 1
            )
            return confirmation
