from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

import structlog

from ..alerts.evaluator import RecommendationSet, evaluate
from ..config import Settings, Thresholds
from ..providers.t212 import T212Client
from ..services.dashboard import write_site
from ..services.digest import build_body, build_subject, error_subject
from ..services.mailer import SmtpMailer
from ..utils import now_utc
from .ledger import upsert_ledger
from .metrics import PortfolioMetrics, derive_metrics, pie_name
from .schemas import DailySnapshot, LedgerDocument, SnapshotDocument
from .snapshots import WeeklyWrap, snapshot_from_metrics, weekly_section, write_snapshot
from .state import StateRepository, ledger_repository, snapshot_repository
from .transactions import normalize_transactions, transaction_items

log = structlog.get_logger()


@dataclass(frozen=True)
class RunResult:
    run_id: str
    metrics: PortfolioMetrics
    recs: RecommendationSet
    snapshot: DailySnapshot
    realised_today: float
    realised_total: float
    weekly: WeeklyWrap | None = None

    @property
    def classification(self) -> str:
        return self.recs.classification


def run_once(
    client,
    thresholds: Thresholds,
    ledger_repo: StateRepository[LedgerDocument],
    snapshot_repo: StateRepository[SnapshotDocument],
    now: datetime | None = None,
    transactions_limit: int = 50,
    persist_ledger: bool = True,
) -> RunResult:
    """Fetch, derive, update ledger and snapshots, evaluate rules. One pass.

    With persist_ledger=False the ledger is read but not updated, so the
    realisations stay new for the next run that reports them.
    """
    now = now or now_utc()
    run_id = str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(run_id=run_id)
    log.info("run_started", as_of=now.isoformat())

    cash = client.get_cash()
    pies = client.get_pies()
    log.info("pies_detected", names=[pie_name(p) for p in pies if isinstance(p, dict)])
    txns = client.get_transactions(limit=transactions_limit)

    metrics = derive_metrics(cash, pies, txns, thresholds, now=now)
    log.info(
        "metrics_derived",
        total=metrics.account.total,
        ai_pct=round(metrics.ai.allocation_pct, 2),
        ol_pct=round(metrics.ol.allocation_pct, 2),
        flow=metrics.flow,
    )

    ledger = ledger_repo.load()
    realised_today = 0.0
    if persist_ledger:
        ledger, realised_today = upsert_ledger(ledger, normalize_transactions(transaction_items(txns)))
        ledger_repo.save(ledger)

    snap = snapshot_from_metrics(metrics)
    store = write_snapshot(snapshot_repo.load(), snap)
    snapshot_repo.save(store)
    weekly = weekly_section(store, snap, now)

    recs = evaluate(metrics, thresholds)
    log.info("rules_evaluated", classification=recs.classification, alerts=len(recs.alerts), recommendations=len(recs.recommendations))
    return RunResult(
        run_id=run_id,
        metrics=metrics,
        recs=recs,
        snapshot=snap,
        realised_today=realised_today,
        realised_total=ledger.realised_total,
        weekly=weekly,
    )


def _client(settings: Settings) -> T212Client:
    return T212Client(settings.t212_base, settings.t212_api_key, timeout=settings.http_timeout_seconds)


def _run_from_settings(settings: Settings, client=None, now: datetime | None = None, persist_ledger: bool = True) -> RunResult:
    return run_once(
        client or _client(settings),
        settings.thresholds(),
        ledger_repository(settings.resolved_ledger_path),
        snapshot_repository(settings.resolved_snapshots_path),
        now=now,
        transactions_limit=settings.transactions_page_limit,
        persist_ledger=persist_ledger,
    )


def notify_failure(mailer, err: BaseException, when: datetime | None = None) -> bool:
    """Best effort: a failing failure-notification is logged, never raised."""
    try:
        mailer.send(error_subject(when or now_utc()), str(err))
        return True
    except Exception as exc:
        log.error("failure_notification_failed", err=repr(exc))
        return False


def run_daily_email(settings: Settings, client=None, mailer=None, now: datetime | None = None) -> RunResult:
    mailer = mailer or SmtpMailer.from_settings(settings)
    try:
        result = _run_from_settings(settings, client=client, now=now)
        subject = build_subject(result.classification, result.metrics.generated_at)
        body = build_body(
            result.metrics,
            result.recs,
            realised_today=result.realised_today,
            realised_total=result.realised_total,
            weekly=result.weekly,
        )
    except Exception as exc:
        log.error("run_failed", err=str(exc), error_type=type(exc).__name__)
        notify_failure(mailer, exc, now)
        raise
    mailer.send(subject, body)
    log.info("run_done", classification=result.classification)
    return result


def run_pages(settings: Settings, client=None, now: datetime | None = None) -> RunResult:
    # Realisations are only consumed by the email digest.
    result = _run_from_settings(settings, client=client, now=now, persist_ledger=False)
    write_site(settings.pages_out_dir, result.metrics, result.recs, settings.thresholds())
    log.info("run_done", classification=result.classification)
    return result
