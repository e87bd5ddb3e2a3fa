from __future__ import annotations

from datetime import datetime

from ..alerts.constants import AI_PIE, OL_PIE, REPORT_TITLE
from ..alerts.evaluator import REPORT_ALERT, RecommendationSet
from ..pipeline.metrics import PortfolioMetrics
from ..pipeline.snapshots import WeeklyWrap, format_weekly_wrap
from ..utils import fmt_money, fmt_move, format_en_gb


def build_subject(classification: str, when: datetime) -> str:
    if classification == REPORT_ALERT:
        return f"{REPORT_TITLE} • {REPORT_ALERT} • {format_en_gb(when)}"
    return f"{REPORT_TITLE} • {classification} • {format_en_gb(when, with_time=False)}"


def error_subject(when: datetime) -> str:
    return f"{REPORT_TITLE} • ERROR • {format_en_gb(when)}"


def build_body(
    metrics: PortfolioMetrics,
    recs: RecommendationSet,
    realised_today: float | None = None,
    realised_total: float | None = None,
    weekly: WeeklyWrap | None = None,
) -> str:
    ai, ol = metrics.ai, metrics.ol
    lines = [
        f"Total: {fmt_money(metrics.account.total)}  |  Free cash: {fmt_money(metrics.account.free_cash)}",
        f"{AI_PIE[1]}: {fmt_money(ai.value)} ({ai.allocation_pct:.1f}%)  •  "
        f"{OL_PIE[1]}: {fmt_money(ol.value)} ({ol.allocation_pct:.1f}%)",
        f"Last {metrics.lookback_hours:g}h cash flow: {fmt_money(metrics.flow)}",
    ]
    if ai.daily_move_pct is not None or ol.daily_move_pct is not None:
        lines.append(f"Moves — {AI_PIE[1]}: {fmt_move(ai.daily_move_pct)}, {OL_PIE[1]}: {fmt_move(ol.daily_move_pct)}")
    if realised_total is not None:
        lines.append(f"Realised: today {fmt_money(realised_today or 0)}  |  all-time {fmt_money(realised_total)}")

    weekly_lines = format_weekly_wrap(weekly)
    if weekly_lines:
        lines.append("")
        lines.extend(weekly_lines)

    body = "\n".join(lines) + "\n\n"
    if recs.alerts:
        body += "⚠️ Alerts:\n- " + "\n- ".join(recs.alerts) + "\n\n"
    body += "💡 Recommendations:\n- " + "\n- ".join(recs.recommendations) + "\n"
    return body
