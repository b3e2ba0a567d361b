"""Per-market position state."""
