import math
from datetime import datetime, date, timezone
from dateutil import parser as dt_parser, tz

CURRENCY_SYMBOL = "£"

# Epoch values above this are milliseconds.
_EPOCH_MS_CUTOFF = 1e11

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def now_utc_iso() -> str:
    return now_utc().isoformat()

def utc_date(dt: datetime) -> date:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()

def is_friday(d: date) -> bool:
    return d.weekday() == 4

def to_safe_number(v):
    """Return v when it is a finite number, otherwise 0."""
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0
    if not math.isfinite(v):
        return 0
    return v

def percent_of(part, whole) -> float:
    if not whole:
        return 0
    return (part / whole) * 100

def fmt_money(n) -> str:
    return f"{CURRENCY_SYMBOL}{float(n):.2f}"

def fmt_move(v, precision: int = 2) -> str:
    if v is None:
        return "n/a"
    return f"{v:.{precision}f}%"

def parse_timestamp(value) -> datetime | None:
    """Parse an upstream timestamp (ISO string or epoch seconds/millis) to aware UTC."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        seconds = value / 1000.0 if abs(value) > _EPOCH_MS_CUTOFF else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = dt_parser.isoparse(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    try:
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # offsets outside +-24h survive parsing but not conversion
        return None

def format_en_gb(dt: datetime, with_time: bool = True) -> str:
    """Mimic the en-GB locale short form: 19/10/2026, 07:30:00."""
    if with_time:
        return dt.strftime("%d/%m/%Y, %H:%M:%S")
    return dt.strftime("%d/%m/%Y")
