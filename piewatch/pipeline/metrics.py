from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from ..alerts.constants import AI_PIE, OL_PIE
from ..config import Thresholds
from ..utils import now_utc, percent_of, to_safe_number
from .transactions import cash_flow, recent_transactions, transaction_items


@dataclass(frozen=True)
class AccountSnapshot:
    total: float
    free_cash: float


@dataclass(frozen=True)
class PieMetric:
    value: float
    allocation_pct: float
    daily_move_pct: float | None


@dataclass(frozen=True)
class PortfolioMetrics:
    account: AccountSnapshot
    ai: PieMetric
    ol: PieMetric
    flow: float
    lookback_hours: float
    generated_at: datetime

    @property
    def invested(self) -> float:
        return self.ai.value + self.ol.value

    def to_json(self) -> dict:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "total": self.account.total,
            "freeCash": self.account.free_cash,
            "aiVal": self.ai.value,
            "olVal": self.ol.value,
            "aiPct": self.ai.allocation_pct,
            "olPct": self.ol.allocation_pct,
            "aiMove": self.ai.daily_move_pct,
            "olMove": self.ol.daily_move_pct,
            "flow": self.flow,
        }


def pie_name(pie: dict) -> str:
    settings = pie.get("settings")
    name = settings.get("name") if isinstance(settings, dict) else None
    return str(name or pie.get("name") or "")


def pick_pie(pies, keyword: str) -> dict | None:
    k = keyword.lower()
    for pie in pies or []:
        if not isinstance(pie, dict):
            continue
        if k in pie_name(pie).lower():
            return pie
    return None


def _result(pie: dict | None) -> dict:
    if not pie:
        return {}
    result = pie.get("result")
    return result if isinstance(result, dict) else {}


def pie_value(pie: dict | None) -> float:
    return to_safe_number(_result(pie).get("priceAvgValue"))


def pie_move_pct(pie: dict | None) -> float | None:
    coef = _result(pie).get("priceAvgResultCoef")
    if isinstance(coef, bool) or not isinstance(coef, (int, float)) or not math.isfinite(coef):
        return None
    return coef * 100


def pie_metric(pie: dict | None, invested: float) -> PieMetric:
    value = pie_value(pie)
    return PieMetric(value=value, allocation_pct=percent_of(value, invested), daily_move_pct=pie_move_pct(pie))


def account_snapshot(cash: dict | None, invested: float) -> AccountSnapshot:
    cash = cash if isinstance(cash, dict) else {}
    free_cash = to_safe_number(cash.get("free"))
    # API total wins when present; the sum only covers partial payloads.
    total = to_safe_number(cash.get("total")) or invested + free_cash
    return AccountSnapshot(total=total, free_cash=free_cash)


def derive_metrics(cash, pies, transactions, thresholds: Thresholds, now: datetime | None = None) -> PortfolioMetrics:
    now = now or now_utc()
    ai_pie = pick_pie(pies, AI_PIE[2])
    ol_pie = pick_pie(pies, OL_PIE[2])
    invested = pie_value(ai_pie) + pie_value(ol_pie)
    recent = recent_transactions(transaction_items(transactions), thresholds.lookback_hours, now)
    return PortfolioMetrics(
        account=account_snapshot(cash, invested),
        ai=pie_metric(ai_pie, invested),
        ol=pie_metric(ol_pie, invested),
        flow=cash_flow(recent),
        lookback_hours=thresholds.lookback_hours,
        generated_at=now,
    )
