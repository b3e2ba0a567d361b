"""Routing of trade actions to simulated or live order execution."""

from .base import BaseDispatcher, DispatchResult, DispatchStatus, order_side_for
from .journal import TradeJournal
from .live import LiveDispatcher
from .simulation import SimulationDispatcher

__all__ = [
    "BaseDispatcher",
    "DispatchResult",
    "DispatchStatus",
    "order_side_for",
    "TradeJournal",
    "LiveDispatcher",
    "SimulationDispatcher",
]
