"""
Price data module.

Defines the canonical price snapshot, the bounded per-market price window
and the validation applied to snapshots before they enter a window.
"""
