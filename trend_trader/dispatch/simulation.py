"""Simulated order execution."""

import uuid
from decimal import Decimal

from ..ports import OrderConfirmation, OrderSide
from .base import BaseDispatcher


class SimulationDispatcher(BaseDispatcher):
    """
    Fills every order immediately at the decision price.

    No order submitter is involved; the confirmation is fabricated locally.
    """

    mode = "simulation"

    def _place_order(
        self,
        market_id: str,
        side: OrderSide,
        size: Decimal,
        price: Decimal
    ) -> OrderConfirmation:
        confirmation = OrderConfirmation(
            order_id=f"sim-{uuid.uuid4()}",
            market_id=market_id,
            side=side,
            size=size,
            price=price,
            submitted_at=self.clock.now()
        )

        self.logger.info(
            "Simulated order filled",
            market_id=market_id,
            order_side=side.value,
            size=str(size),
            price=str(price),
            order_id=confirmation.order_id
        )
        return confirmation
