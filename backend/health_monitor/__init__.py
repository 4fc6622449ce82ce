"""Bounty Board API health monitor."""

__version__ = "1.0.0"
