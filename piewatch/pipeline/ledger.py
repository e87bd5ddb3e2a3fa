from __future__ import annotations

import structlog

from ..alerts.constants import LEDGER_MAX_ENTRIES
from .schemas import LedgerDocument, LedgerEntry
from .transactions import Transaction

log = structlog.get_logger()

# Upstream type names for "invested money came back as cash". Broad on purpose:
# the taxonomy differs between API versions, so some false positives slip in.
REALISATION_TYPE_SUBSTRINGS: tuple[str, ...] = (
    "WITHDRAW",
    "SELL",
    "CASH_OUT",
    "REALIS",
    "REALIZ",
)


def is_realisation_type(tx_type, substrings=REALISATION_TYPE_SUBSTRINGS) -> bool:
    ty = str(tx_type or "").upper()
    return any(s in ty for s in substrings)


def upsert_ledger(
    ledger: LedgerDocument,
    transactions: list[Transaction],
    substrings=REALISATION_TYPE_SUBSTRINGS,
    max_entries: int = LEDGER_MAX_ENTRIES,
) -> tuple[LedgerDocument, float]:
    """
    Append realised transactions not seen before.
    Returns the new ledger and the amount added by this call. The running
    total is cumulative; trimming old entries never reduces it.
    """
    # Trimmed entries fall out of this set, so ids older than the retained
    # window could in principle be counted again.
    seen = {e.id for e in ledger.entries}
    entries = list(ledger.entries)
    added = 0.0
    for tx in transactions:
        if tx.id in seen:
            continue
        seen.add(tx.id)
        if not is_realisation_type(tx.type, substrings):
            continue
        amount = abs(float(tx.amount))
        entries.append(LedgerEntry(id=tx.id, type=tx.type, amount=amount, timestamp=tx.timestamp))
        added += amount
    if len(entries) > max_entries:
        entries = entries[-max_entries:]
    updated = ledger.model_copy(
        update={"realised_total": ledger.realised_total + added, "entries": entries}
    )
    if added:
        log.info("ledger_upserted", added=round(added, 2), realised_total=round(updated.realised_total, 2), entries=len(entries))
    return updated, added
