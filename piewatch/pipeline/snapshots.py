from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..alerts.constants import AI_PIE, OL_PIE, SNAPSHOT_MAX_DAYS
from ..utils import fmt_money, is_friday, utc_date
from .metrics import PortfolioMetrics
from .schemas import DailySnapshot, SnapshotDocument


@dataclass(frozen=True)
class WeeklyWrap:
    prior_date: str
    total_delta: float
    ai_delta: float
    ol_delta: float
    best_mover: str


def _parse_date(val) -> date | None:
    if isinstance(val, date):
        return val
    try:
        return date.fromisoformat(str(val)[:10])
    except ValueError:
        return None


def snapshot_from_metrics(metrics: PortfolioMetrics) -> DailySnapshot:
    return DailySnapshot(
        date=utc_date(metrics.generated_at).isoformat(),
        total=metrics.account.total,
        ai_value=metrics.ai.value,
        ol_value=metrics.ol.value,
    )


def write_snapshot(store: SnapshotDocument, snap: DailySnapshot, max_days: int = SNAPSHOT_MAX_DAYS) -> SnapshotDocument:
    days = [d for d in store.days if d.date != snap.date]
    days.append(snap)
    days.sort(key=lambda d: d.date)
    if len(days) > max_days:
        days = days[-max_days:]
    return store.model_copy(update={"days": days})


def find_prior_friday(store: SnapshotDocument, today: date) -> DailySnapshot | None:
    for snap in reversed(store.days):
        d = _parse_date(snap.date)
        if d is None or d >= today:
            continue
        if is_friday(d):
            return snap
    return None


def weekly_wrap(current: DailySnapshot, prior: DailySnapshot | None) -> WeeklyWrap | None:
    if prior is None:
        return None
    ai_delta = current.ai_value - prior.ai_value
    ol_delta = current.ol_value - prior.ol_value
    best = OL_PIE[0] if abs(ol_delta) > abs(ai_delta) else AI_PIE[0]
    return WeeklyWrap(
        prior_date=prior.date,
        total_delta=current.total - prior.total,
        ai_delta=ai_delta,
        ol_delta=ol_delta,
        best_mover=best,
    )


def weekly_section(store: SnapshotDocument, current: DailySnapshot, now: datetime) -> WeeklyWrap | None:
    """Week-over-week comparison, produced on Fridays (UTC) only."""
    today = utc_date(now)
    if not is_friday(today):
        return None
    return weekly_wrap(current, find_prior_friday(store, today))


def _signed_money(x: float) -> str:
    return ("+" if x >= 0 else "-") + fmt_money(abs(x))


def format_weekly_wrap(wrap: WeeklyWrap | None) -> list[str]:
    if wrap is None:
        return []
    return [
        f"Weekly wrap (vs {wrap.prior_date}):",
        f"Total {_signed_money(wrap.total_delta)}  •  "
        f"{AI_PIE[1]} {_signed_money(wrap.ai_delta)}  •  {OL_PIE[1]} {_signed_money(wrap.ol_delta)}",
        f"Best mover: {wrap.best_mover}",
    ]
