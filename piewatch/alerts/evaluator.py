from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..config import Thresholds
from ..utils import CURRENCY_SYMBOL, fmt_money
from .constants import AI_PIE, CASH_BUFFER_MAX, CASH_BUFFER_MIN, OL_PIE

REPORT_ALERT = "ALERT"
REPORT_DAILY = "Daily"


@dataclass(frozen=True)
class RecommendationSet:
    recommendations: List[str]
    alerts: List[str] = field(default_factory=list)

    @property
    def classification(self) -> str:
        return classify_report(self.alerts)


def _num(x) -> str:
    # 60.0 -> "60", 2.5 -> "2.5"
    return f"{x:g}"


def _pies(ai_pct, ol_pct, ai_move, ol_move):
    return (
        (AI_PIE, ai_pct, ai_move),
        (OL_PIE, ol_pct, ol_move),
    )


def build_recommendations(
    ai_pct: float,
    ol_pct: float,
    ai_move: Optional[float],
    ol_move: Optional[float],
    flow: float,
    thresholds: Thresholds,
) -> List[str]:
    cap = thresholds.drift_max_pct
    recs: List[str] = []

    # 1) Allocation: first breach wins, AI before OuterLimits
    if ai_pct > cap:
        recs.append(f"{AI_PIE[0]} is {ai_pct:.1f}% (> {_num(cap)}%). Prefer new contributions to {OL_PIE[0]}.")
    elif ol_pct > cap:
        recs.append(f"{OL_PIE[0]} is {ol_pct:.1f}% (> {_num(cap)}%). Prefer new contributions to {AI_PIE[0]}.")
    else:
        recs.append(f"Allocation healthy at {AI_PIE[1]} {ai_pct:.1f}% / {OL_PIE[1]} {ol_pct:.1f}%.")

    pies = _pies(ai_pct, ol_pct, ai_move, ol_move)

    # 2) Dips
    for (label, *_), _pct, move in pies:
        if move is not None and move <= thresholds.buy_dip_pct:
            recs.append(f"{label} moved {move:.2f}% → consider a small top-up.")

    # 3) Pops
    for (label, *_), _pct, move in pies:
        if move is not None and move >= thresholds.consider_skim_pct:
            recs.append(f"{label} jumped {move:.2f}% → optional light skim.")

    # 4) Cash flow
    if abs(flow) > thresholds.cash_flow_abs_limit:
        recs.append(
            f"Cash flow {fmt_money(flow)} (> {CURRENCY_SYMBOL}{_num(thresholds.cash_flow_abs_limit)}). "
            "Review deposits/withdrawals."
        )

    recs.append(
        f"Maintain {CURRENCY_SYMBOL}{CASH_BUFFER_MIN}–{CURRENCY_SYMBOL}{CASH_BUFFER_MAX} cash buffer. "
        f"Rebalance if >{_num(cap)}% cap breached."
    )
    return recs


def evaluate_alerts(
    ai_pct: float,
    ol_pct: float,
    ai_move: Optional[float],
    ol_move: Optional[float],
    flow: float,
    thresholds: Thresholds,
) -> List[str]:
    alerts: List[str] = []
    if ai_pct > thresholds.drift_max_pct or ol_pct > thresholds.drift_max_pct:
        alerts.append("Allocation drift.")
    if abs(flow) > thresholds.cash_flow_abs_limit:
        alerts.append("Large cash flow.")
    for (_label, short, *_), _pct, move in _pies(ai_pct, ol_pct, ai_move, ol_move):
        if move is not None and abs(move) >= thresholds.move_alert_pct:
            alerts.append(f"{short} move {move:.2f}%.")
    return alerts


def classify_report(alerts: List[str]) -> str:
    return REPORT_ALERT if alerts else REPORT_DAILY


def evaluate(metrics, thresholds: Thresholds) -> RecommendationSet:
    args = (
        metrics.ai.allocation_pct,
        metrics.ol.allocation_pct,
        metrics.ai.daily_move_pct,
        metrics.ol.daily_move_pct,
        metrics.flow,
        thresholds,
    )
    return RecommendationSet(recommendations=build_recommendations(*args), alerts=evaluate_alerts(*args))
