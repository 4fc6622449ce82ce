"""Pydantic schemas for API responses."""
from .status import HealthResponse, HistoryResponse, StatusSnapshot

__all__ = ["HealthResponse", "HistoryResponse", "StatusSnapshot"]
