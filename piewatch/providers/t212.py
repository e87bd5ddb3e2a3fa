from __future__ import annotations

import httpx
import structlog

from ..errors import UpstreamError

log = structlog.get_logger()

CASH_PATH = "/api/v0/equity/account/cash"
PIES_PATH = "/api/v0/equity/pies"
TRANSACTIONS_PATH = "/api/v0/history/transactions"


class T212Client:
    """Read-only Trading 212 client. Any failure is fatal for the run; no retries."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 30.0, transport: httpx.BaseTransport | None = None):
        self.base = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self):
        return {"Authorization": self.api_key, "Accept": "application/json"}

    def _get(self, path: str, params: dict | None = None):
        url = f"{self.base}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            log.error("t212_transport_failed", path=path, err=str(exc))
            raise UpstreamError(path, reason=f"transport error: {exc}") from exc
        if r.status_code < 200 or r.status_code >= 300:
            log.error("t212_fetch_failed", path=path, status=r.status_code)
            raise UpstreamError(path, status=r.status_code, body=r.text[:500], reason=f"{r.status_code} {r.reason_phrase}")
        try:
            payload = r.json()
        except ValueError as exc:
            log.error("t212_non_json", path=path, status=r.status_code)
            raise UpstreamError(path, status=r.status_code, body=r.text[:200], reason="non-JSON response") from exc
        log.debug("t212_fetch_done", path=path, status=r.status_code)
        return payload

    def get_cash(self) -> dict:
        payload = self._get(CASH_PATH)
        return payload if isinstance(payload, dict) else {}

    def get_pies(self) -> list:
        payload = self._get(PIES_PATH)
        return payload if isinstance(payload, list) else []

    def get_transactions(self, limit: int = 50):
        # The history endpoint does not filter by time server-side; callers filter.
        return self._get(TRANSACTIONS_PATH, params={"limit": limit})
