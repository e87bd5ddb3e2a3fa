"""Static dashboard (index.html + latest.json) for publishing as a plain site."""
from __future__ import annotations

import json
import shutil
from html import escape
from pathlib import Path

import structlog

from ..alerts.constants import AI_PIE, OL_PIE, REPORT_TITLE
from ..alerts.evaluator import RecommendationSet
from ..config import Thresholds
from ..pipeline.metrics import PieMetric, PortfolioMetrics
from ..utils import fmt_money, fmt_move, format_en_gb

log = structlog.get_logger()

_STYLE = """
  :root { color-scheme: dark; }
  body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif; background:#0b0f14; color:#e6eef8; margin:0; }
  .wrap { max-width: 900px; margin: 0 auto; padding: 24px; }
  .card { background:#121826; border:1px solid #1f2a44; border-radius:14px; padding:18px 20px; margin-bottom:16px; }
  h1 { font-size: 22px; margin: 0 0 12px; }
  h2 { font-size: 18px; margin: 0 0 10px; }
  .grid { display:grid; gap:12px; grid-template-columns: repeat(auto-fit,minmax(250px,1fr)); }
  .muted { color:#9fb0c8; font-size: 13px; }
  .big { font-size: 22px; font-weight: 700; }
  .row { display:flex; justify-content: space-between; margin:6px 0; }
  .pill { display:inline-block; padding:2px 8px; border-radius:999px; background:#1a2336; border:1px solid #2b3b5c; font-size:12px; }
  footer { margin-top: 20px; color:#8190a9; font-size: 12px; }
"""


def _pie_card(title: str, pie: PieMetric) -> str:
    return "\n".join([
        '      <div class="card">',
        f"        <h2>{escape(title)}</h2>",
        f'        <div class="row"><span>Value</span><span class="pill">{escape(fmt_money(pie.value))}</span></div>',
        f'        <div class="row"><span>Allocation</span><span class="pill">{pie.allocation_pct:.1f}%</span></div>',
        f'        <div class="row"><span>Today</span><span class="pill">{escape(fmt_move(pie.daily_move_pct))}</span></div>',
        "      </div>",
    ])


def _list(items, icon: str) -> str:
    return "<ul>" + "".join(f"<li>{icon} {escape(item)}</li>" for item in items) + "</ul>"


def render_html(metrics: PortfolioMetrics, recs: RecommendationSet, thresholds: Thresholds) -> str:
    alerts_html = _list(recs.alerts, "⚠️") if recs.alerts else "<p>✅ No alerts.</p>"
    advice_html = _list(recs.recommendations, "💡")
    updated = format_en_gb(metrics.generated_at)
    parts = [
        "<!doctype html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8"/>',
        '<meta name="viewport" content="width=device-width, initial-scale=1"/>',
        f"<title>{escape(REPORT_TITLE)} Dashboard</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        '  <div class="wrap">',
        f"    <h1>{escape(REPORT_TITLE)} Portfolio</h1>",
        '    <div class="card">',
        f'      <div class="row"><div>Total value</div><div class="big">{escape(fmt_money(metrics.account.total))}</div></div>',
        f'      <div class="row"><div>Free cash</div><div class="big">{escape(fmt_money(metrics.account.free_cash))}</div></div>',
        "    </div>",
        '    <div class="grid">',
        _pie_card(AI_PIE[3], metrics.ai),
        _pie_card(OL_PIE[3], metrics.ol),
        "    </div>",
        '    <div class="card">',
        "      <h2>Alerts</h2>",
        f"      {alerts_html}",
        "    </div>",
        '    <div class="card">',
        "      <h2>Recommendations</h2>",
        f"      {advice_html}",
        "    </div>",
        '    <footer class="muted">',
        f"      Updated: {escape(updated)} • {metrics.lookback_hours:g}h cash flow considered: "
        f"{escape(fmt_money(metrics.flow))} • Target cap: {thresholds.drift_max_pct:g}%",
        "    </footer>",
        "  </div>",
        "</body>",
        "</html>",
    ]
    return "\n".join(parts) + "\n"


def write_site(out_dir: str | Path, metrics: PortfolioMetrics, recs: RecommendationSet, thresholds: Thresholds) -> Path:
    out = Path(out_dir)
    shutil.rmtree(out, ignore_errors=True)
    out.mkdir(parents=True, exist_ok=True)
    (out / "latest.json").write_text(json.dumps(metrics.to_json(), indent=2), encoding="utf-8")
    (out / "index.html").write_text(render_html(metrics, recs, thresholds), encoding="utf-8")
    log.info("pages_built", out_dir=str(out), classification=recs.classification)
    return out
