from datetime import datetime, timedelta, timezone

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def pie(name, value, coef=None, nested=True):
    result = {"priceAvgValue": value}
    if coef is not None:
        result["priceAvgResultCoef"] = coef
    if nested:
        return {"settings": {"name": name}, "result": result}
    return {"name": name, "result": result}


def txn(tx_type, amount, hours_ago, now=NOW, key="dateTime", **extra):
    row = {"type": tx_type, "amount": amount, key: (now - timedelta(hours=hours_ago)).isoformat()}
    row.update(extra)
    return row


SCENARIO_CASH = {"free": 50, "total": 1050}
SCENARIO_PIES = [pie("AI Stocks – Main", 600, -0.04), pie("OuterLimits", 400, 0.06)]
SCENARIO_TXNS = {"items": [txn("DEPOSIT", 50, 2)]}


class FakeClient:
    def __init__(self, cash=None, pies=None, transactions=None, fail_on=None, error=None):
        self.cash = SCENARIO_CASH if cash is None else cash
        self.pies = SCENARIO_PIES if pies is None else pies
        self.transactions = SCENARIO_TXNS if transactions is None else transactions
        self.fail_on = fail_on
        self.error = error
        self.calls = []

    def _maybe_fail(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise self.error

    def get_cash(self):
        self._maybe_fail("cash")
        return self.cash

    def get_pies(self):
        self._maybe_fail("pies")
        return self.pies

    def get_transactions(self, limit=50):
        self._maybe_fail("transactions")
        return self.transactions


class FakeMailer:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, subject, body):
        if self.error is not None:
            raise self.error
        self.sent.append((subject, body))
