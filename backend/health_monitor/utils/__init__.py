"""Utility helpers."""
from .stats import Clock, error_rate, format_percent, mean_ms, round_half_up, utc_now

__all__ = ["Clock", "error_rate", "format_percent", "mean_ms", "round_half_up", "utc_now"]
