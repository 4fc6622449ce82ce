"""JSON API: current status, history and liveness."""
from fastapi import APIRouter, Depends

from ..config import Settings
from ..dependencies import get_aggregator, get_history_store, get_settings
from ..schemas.status import HealthResponse, HistoryResponse, StatusSnapshot
from ..services import AggregatorService, HistoryStore

router = APIRouter(prefix="/api", tags=["status"])

# Raw checks returned by /api/history
HISTORY_RECENT_CHECKS = 100


@router.get("/status", response_model=StatusSnapshot)
async def get_status(aggregator: AggregatorService = Depends(get_aggregator)):
    """Current 24h status snapshot."""
    return aggregator.current_status()


@router.get("/history", response_model=HistoryResponse)
async def get_history(store: HistoryStore = Depends(get_history_store)):
    """Daily rollups and the last 100 checks."""
    state = store.state
    return HistoryResponse(
        daily_stats=state.daily_stats,
        recent_checks=state.checks[-HISTORY_RECENT_CHECKS:],
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    return HealthResponse(status="ok", monitoring=settings.api_base_url)
