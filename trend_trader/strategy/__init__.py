"""
Strategy decision state machine.

Turns a market's price window and position into one trade action per cycle.
"""

from .machine import evaluate
from .models import Decision, Enter, Exit, ExitReason, Hold, TradeAction

__all__ = ["evaluate", "Decision", "Enter", "Exit", "ExitReason", "Hold", "TradeAction"]
