"""HTML dashboard route."""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..dashboard import render_dashboard
from ..dependencies import MonitorServices, get_services

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(services: MonitorServices = Depends(get_services)):
    """Serve the monitoring dashboard."""
    state = services.store.state
    html = render_dashboard(
        status=services.aggregator.current_status(),
        daily_stats=state.daily_stats,
        recent_checks=state.checks,
        base_url=services.settings.api_base_url,
    )
    return HTMLResponse(content=html, headers={"Cache-Control": "no-cache"})
