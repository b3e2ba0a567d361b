"""
Trend Trader - Trending Index Decision Engine

Turns periodic price snapshots of short-lived prediction-market contracts
into enter/exit/hold decisions using RSI, MACD or Momentum thresholds, and
routes them to a simulation recorder or a live order submitter.
"""

__version__ = "0.1.0"
__author__ = "Trend Trader Team"
