"""Pytest configuration and shared fixtures."""

from decimal import Decimal

import pytest

from trend_trader.config.defaults import StrategyConfig, StrategyKind
from trend_trader.data.models import PriceWindow
from trend_trader.dispatch.simulation import SimulationDispatcher
from trend_trader.state.positions import PositionStateManager

from helpers.fakes import FakeClock, make_points


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock starting at 2024-01-01 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def rsi_config() -> StrategyConfig:
    """RSI strategy over a 14-point window with a wide take-profit."""
    return StrategyConfig(
        kind=StrategyKind.RSI,
        trend_threshold=70.0,
        profit_threshold=Decimal("0.5"),
        stop_loss_threshold=Decimal("0.05"),
        lookback=14,
        position_size=Decimal("10"),
    )


@pytest.fixture
def positions() -> PositionStateManager:
    return PositionStateManager()


@pytest.fixture
def sim_dispatcher(positions, clock) -> SimulationDispatcher:
    return SimulationDispatcher(positions, clock=clock)


@pytest.fixture
def window_factory():
    """Build a filled price window for a market."""
    def _make(prices, market_id: str = "mkt-1", capacity=None) -> PriceWindow:
        points = make_points(market_id, prices)
        window = PriceWindow(capacity or max(len(points), 1))
        for point in points:
            window.append(point)
        return window

    return _make
