from __future__ import annotations

# Thresholds and knobs (unit: percent unless noted)
DRIFT_MAX_PCT = 60.0          # max % any single pie should occupy
MOVE_ALERT_PCT = 2.0          # daily move alert (±%)
BUY_DIP_PCT = -3.0            # suggest top-up if daily move <= this
CONSIDER_SKIM_PCT = 5.0       # suggest skimming if daily move >= this
CASH_FLOW_ABS_LIMIT = 200.0   # money; alert if |cash flow| > this
LOOKBACK_HOURS = 24.0

# Cash buffer guidance (money)
CASH_BUFFER_MIN = 100
CASH_BUFFER_MAX = 300

# Tracked pies: (label, short label, name keyword, dashboard title)
AI_PIE = ("AI", "AI", "ai", "AI Stocks – Main")
OL_PIE = ("OuterLimits", "OL", "outerlimits", "OuterLimits")

REPORT_TITLE = "OuterLimits"

# Retention
LEDGER_MAX_ENTRIES = 500
SNAPSHOT_MAX_DAYS = 120
