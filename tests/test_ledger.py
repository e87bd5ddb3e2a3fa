import unittest

from piewatch.pipeline.ledger import is_realisation_type, upsert_ledger
from piewatch.pipeline.schemas import LedgerDocument
from piewatch.pipeline.transactions import Transaction, normalize_transactions


def _tx(i, tx_type="WITHDRAW", amount=-10.0):
    return Transaction(id=f"t{i}", type=tx_type, amount=amount, timestamp=f"2026-10-19T08:{i % 60:02d}:00Z")


class RealisationTypeTests(unittest.TestCase):
    def test_classifier(self):
        for ty in ("WITHDRAW", "pie_withdrawal", "SELL", "Market sell", "CASH_OUT", "REALISED_GAIN", "realized"):
            self.assertTrue(is_realisation_type(ty), ty)
        for ty in ("DEPOSIT", "BUY", "FEE", "", None):
            self.assertFalse(is_realisation_type(ty), ty)

    def test_custom_table(self):
        self.assertTrue(is_realisation_type("DIVIDEND", substrings=("DIVIDEND",)))
        self.assertFalse(is_realisation_type("SELL", substrings=("DIVIDEND",)))


class UpsertLedgerTests(unittest.TestCase):
    def test_amount_sign_normalized_and_total(self):
        ledger, added = upsert_ledger(LedgerDocument(), [_tx(1, amount=-10), _tx(2, amount=15), _tx(3, "DEPOSIT", 99)])
        self.assertEqual(added, 25)
        self.assertEqual(ledger.realised_total, 25)
        self.assertEqual([e.amount for e in ledger.entries], [10, 15])

    def test_idempotent_replay(self):
        batch = [_tx(i) for i in range(5)]
        once, added_once = upsert_ledger(LedgerDocument(), batch)
        twice, added_twice = upsert_ledger(once, batch)
        self.assertEqual(added_once, 50)
        self.assertEqual(added_twice, 0)
        self.assertEqual(twice.realised_total, once.realised_total)
        self.assertEqual(len(twice.entries), len(once.entries))

    def test_input_not_mutated(self):
        start = LedgerDocument()
        upsert_ledger(start, [_tx(1)])
        self.assertEqual(start.entries, [])
        self.assertEqual(start.realised_total, 0)

    def test_synthesized_duplicate_ids_recorded_once(self):
        rows = [
            {"type": "WITHDRAW", "amount": -20, "dateTime": "2026-10-19T08:00:00Z"},
            {"type": "WITHDRAW", "amount": -20, "dateTime": "2026-10-19T08:00:00Z"},
        ]
        ledger, added = upsert_ledger(LedgerDocument(), normalize_transactions(rows))
        self.assertEqual(len(ledger.entries), 1)
        self.assertEqual(added, 20)

    def test_trim_keeps_running_total(self):
        ledger = LedgerDocument()
        total = 0.0
        for start in range(0, 600, 100):
            batch = [_tx(i, amount=1) for i in range(start, start + 100)]
            ledger, added = upsert_ledger(ledger, batch)
            total += added
            self.assertEqual(ledger.realised_total, total)
        self.assertEqual(len(ledger.entries), 500)
        self.assertEqual(ledger.entries[0].id, "t100")
        self.assertEqual(ledger.entries[-1].id, "t599")
        self.assertEqual(ledger.realised_total, 600)

    def test_small_max_entries(self):
        ledger, _ = upsert_ledger(LedgerDocument(), [_tx(i) for i in range(5)], max_entries=2)
        self.assertEqual([e.id for e in ledger.entries], ["t3", "t4"])
        self.assertEqual(ledger.realised_total, 50)


if __name__ == "__main__":
    unittest.main()
