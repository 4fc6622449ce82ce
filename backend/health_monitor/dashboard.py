"""HTML dashboard rendering.

render_dashboard() is a pure function of the status snapshot and history;
it performs no I/O. Charts are drawn client-side with Chart.js.
"""
import json
from datetime import datetime
from html import escape
from typing import Optional, Sequence

from .models import CheckRecord, DailyRollup
from .schemas.status import StatusSnapshot

RECENT_CHECKS_SHOWN = 30
REFRESH_MS = 60_000


def _format_time(value: Optional[datetime]) -> str:
    if value is None:
        return "never"
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def uptime_class(uptime: float) -> str:
    if uptime >= 99:
        return "good"
    if uptime >= 95:
        return "warn"
    return "bad"


def response_time_class(avg_ms: int) -> str:
    if avg_ms < 1000:
        return "good"
    if avg_ms < 3000:
        return "warn"
    return "bad"


def error_rate_class(rate: float) -> str:
    if rate == 0:
        return "good"
    if rate < 5:
        return "warn"
    return "bad"


def _dot(success: bool) -> str:
    return f'<span class="status-dot {"up" if success else "down"}"></span>'


def _endpoint_rows(status: StatusSnapshot) -> str:
    rows = []
    for path, check in status.endpoints.items():
        state = "OK" if check.success else (check.error or "Error")
        rows.append(
            "<tr>"
            f"<td>{_dot(check.success)}{escape(path)}</td>"
            f"<td>{escape(state)}</td>"
            f"<td>{check.response_time_ms}ms</td>"
            f"<td>{_format_time(check.timestamp)}</td>"
            "</tr>"
        )
    return "\n".join(rows)


def _recent_rows(recent_checks: Sequence[CheckRecord]) -> str:
    rows = []
    for check in reversed(list(recent_checks)[-RECENT_CHECKS_SHOWN:]):
        rows.append(
            '<div class="recent-row">'
            f"{_dot(check.success)}{escape(check.endpoint)} - {check.response_time_ms}ms"
            f" - {check.timestamp.strftime('%H:%M:%S')}</div>"
        )
    return "\n".join(rows)


def _js(value) -> str:
    # json.dumps does not escape "</script>", so guard the closing tag
    return json.dumps(value).replace("</", "<\\/")


STYLE = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #0f1117; color: #e1e4e8; padding: 24px; }
h1 { font-size: 1.8rem; margin-bottom: 8px; }
.subtitle { color: #8b949e; margin-bottom: 24px; }
.grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 16px; margin-bottom: 32px; }
.card { background: #161b22; border: 1px solid #30363d; border-radius: 8px; padding: 20px; }
.card .label { color: #8b949e; font-size: 0.85rem; text-transform: uppercase; letter-spacing: 0.05em; }
.card .value { font-size: 2rem; font-weight: 700; margin-top: 4px; }
.card .value.good { color: #3fb950; }
.card .value.warn { color: #d29922; }
.card .value.bad { color: #f85149; }
.chart-container { background: #161b22; border: 1px solid #30363d; border-radius: 8px; padding: 20px; margin-bottom: 24px; }
.chart-container h2 { font-size: 1.1rem; margin-bottom: 16px; }
.chart-row { display: grid; grid-template-columns: 1fr 1fr; gap: 24px; }
.endpoint-table { width: 100%; border-collapse: collapse; margin-top: 16px; }
.endpoint-table th, .endpoint-table td { padding: 12px 16px; text-align: left; border-bottom: 1px solid #30363d; }
.endpoint-table th { color: #8b949e; font-size: 0.8rem; text-transform: uppercase; }
.status-dot { display: inline-block; width: 10px; height: 10px; border-radius: 50%; margin-right: 8px; }
.status-dot.up { background: #3fb950; }
.status-dot.down { background: #f85149; }
.recent { max-height: 250px; overflow-y: auto; font-size: 0.85rem; }
.recent-row { padding: 4px 0; border-bottom: 1px solid #30363d; }
canvas { max-height: 250px; }
@media (max-width: 768px) { .chart-row { grid-template-columns: 1fr; } }
"""

CHART_SCRIPT = """
const chartDefaults = {
  responsive: true,
  plugins: { legend: { display: false } },
  scales: {
    x: { grid: { color: '#30363d' }, ticks: { color: '#8b949e' } },
    y: { grid: { color: '#30363d' }, ticks: { color: '#8b949e' } }
  }
};
const withYRange = (range) => ({ ...chartDefaults, scales: { ...chartDefaults.scales, y: { ...chartDefaults.scales.y, ...range } } });

new Chart(document.getElementById('uptimeChart'), {
  type: 'line',
  data: { labels, datasets: [{ data: dailyUptime, borderColor: '#3fb950', backgroundColor: 'rgba(63,185,80,0.1)', fill: true, tension: 0.3 }] },
  options: withYRange({ min: 0, max: 100 })
});
new Chart(document.getElementById('responseChart'), {
  type: 'line',
  data: { labels, datasets: [{ data: dailyAvgResponse, borderColor: '#58a6ff', backgroundColor: 'rgba(88,166,255,0.1)', fill: true, tension: 0.3 }] },
  options: chartDefaults
});
new Chart(document.getElementById('errorChart'), {
  type: 'bar',
  data: { labels, datasets: [{ data: dailyErrorRates, backgroundColor: '#f85149', borderRadius: 4 }] },
  options: withYRange({ min: 0 })
});
"""


def render_dashboard(
    status: StatusSnapshot,
    daily_stats: Sequence[DailyRollup],
    recent_checks: Sequence[CheckRecord],
    base_url: str,
) -> str:
    """Render the full dashboard page."""
    labels = [r.date.isoformat() for r in daily_stats]
    daily_uptime = [round(r.uptime, 1) for r in daily_stats]
    daily_avg_response = [r.avg_response_time_ms for r in daily_stats]
    daily_error_rates = [r.error_rate for r in daily_stats]

    uptime = float(status.uptime)
    error_rate = float(status.error_rate)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Bounty Board API Health Monitor</title>
  <script src="https://cdn.jsdelivr.net/npm/chart.js@4"></script>
  <style>{STYLE}</style>
</head>
<body>
  <h1>Bounty Board API Health Monitor</h1>
  <p class="subtitle">Monitoring {escape(base_url)} &mdash; Last check: {_format_time(status.last_check)}</p>

  <div class="grid">
    <div class="card">
      <div class="label">Uptime (24h)</div>
      <div class="value {uptime_class(uptime)}">{status.uptime}%</div>
    </div>
    <div class="card">
      <div class="label">Avg Response Time</div>
      <div class="value {response_time_class(status.avg_response_time_ms)}">{status.avg_response_time_ms}ms</div>
    </div>
    <div class="card">
      <div class="label">Error Rate (24h)</div>
      <div class="value {error_rate_class(error_rate)}">{status.error_rate}%</div>
    </div>
    <div class="card">
      <div class="label">Checks (24h)</div>
      <div class="value good">{status.total_checks_last_24h}</div>
    </div>
  </div>

  <div class="chart-container">
    <h2>Endpoint Status</h2>
    <table class="endpoint-table">
      <thead>
        <tr><th>Endpoint</th><th>Status</th><th>Response Time</th><th>Last Checked</th></tr>
      </thead>
      <tbody>
{_endpoint_rows(status)}
      </tbody>
    </table>
  </div>

  <div class="chart-row">
    <div class="chart-container">
      <h2>7-Day Uptime</h2>
      <canvas id="uptimeChart"></canvas>
    </div>
    <div class="chart-container">
      <h2>7-Day Response Times</h2>
      <canvas id="responseChart"></canvas>
    </div>
  </div>
  <div class="chart-row">
    <div class="chart-container">
      <h2>7-Day Error Rate</h2>
      <canvas id="errorChart"></canvas>
    </div>
    <div class="chart-container">
      <h2>Recent Checks</h2>
      <div class="recent">
{_recent_rows(recent_checks)}
      </div>
    </div>
  </div>

  <script>
    const labels = {_js(labels)};
    const dailyUptime = {_js(daily_uptime)};
    const dailyAvgResponse = {_js(daily_avg_response)};
    const dailyErrorRates = {_js(daily_error_rates)};
{CHART_SCRIPT}
    setTimeout(() => location.reload(), {REFRESH_MS});
  </script>
</body>
</html>"""
