from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..utils import parse_timestamp, to_safe_number

# Upstream payload versions disagree on where the timestamp lives.
TIMESTAMP_KEYS = ("time", "timestamp", "dateTime", "createdAt", "date")
ID_KEYS = ("id", "reference")

# (substring of upper-cased type, sign)
FLOW_TYPE_RULES: tuple[tuple[str, int], ...] = (
    ("DEPOSIT", 1),
    ("WITHDRAW", -1),
)


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str
    amount: float
    timestamp: str


def transaction_items(payload) -> list:
    if isinstance(payload, dict):
        items = payload.get("items")
        return items if isinstance(items, list) else []
    if isinstance(payload, list):
        return payload
    return []


def _raw_timestamp(tx: dict):
    for key in TIMESTAMP_KEYS:
        val = tx.get(key)
        if val not in (None, ""):
            return val
    return None


def transaction_time(tx: dict) -> datetime | None:
    if not isinstance(tx, dict):
        return None
    return parse_timestamp(_raw_timestamp(tx))


def normalize_transaction(tx: dict) -> Transaction | None:
    if not isinstance(tx, dict):
        return None
    tx_type = str(tx.get("type") or "")
    raw_ts = _raw_timestamp(tx)
    timestamp = "" if raw_ts is None else str(raw_ts)
    tx_id = None
    for key in ID_KEYS:
        val = tx.get(key)
        if val not in (None, ""):
            tx_id = str(val)
            break
    if tx_id is None:
        tx_id = f"{tx_type}{timestamp}"
    return Transaction(id=tx_id, type=tx_type, amount=to_safe_number(tx.get("amount")), timestamp=timestamp)


def normalize_transactions(items: list) -> list[Transaction]:
    out = []
    for item in items:
        tx = normalize_transaction(item)
        if tx is not None:
            out.append(tx)
    return out


def recent_transactions(items: list, lookback_hours: float, now: datetime) -> list[dict]:
    since = now - timedelta(hours=lookback_hours)
    out = []
    for tx in items:
        ts = transaction_time(tx)
        if ts is None:
            continue
        if ts >= since:
            out.append(tx)
    return out


def flow_direction(tx_type, rules=FLOW_TYPE_RULES) -> int:
    ty = str(tx_type or "").upper()
    for needle, sign in rules:
        if needle in ty:
            return sign
    return 0


def cash_flow(items: list, rules=FLOW_TYPE_RULES) -> float:
    flow = 0
    for tx in items:
        if not isinstance(tx, dict):
            continue
        sign = flow_direction(tx.get("type"), rules)
        if sign:
            flow += sign * to_safe_number(tx.get("amount"))
    return flow
