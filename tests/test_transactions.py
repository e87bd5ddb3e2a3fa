import unittest

from piewatch.pipeline.transactions import (
    cash_flow,
    flow_direction,
    normalize_transaction,
    recent_transactions,
    transaction_items,
)
from tests.fixtures import NOW, txn


class TransactionItemsTests(unittest.TestCase):
    def test_shapes(self):
        self.assertEqual(transaction_items({"items": [1]}), [1])
        self.assertEqual(transaction_items([1, 2]), [1, 2])
        self.assertEqual(transaction_items({"items": None}), [])
        self.assertEqual(transaction_items({}), [])
        self.assertEqual(transaction_items("junk"), [])


class RecentTransactionsTests(unittest.TestCase):
    def test_all_timestamp_keys_are_tried(self):
        rows = [txn("DEPOSIT", 1, 1, key=k) for k in ("time", "timestamp", "dateTime", "createdAt", "date")]
        self.assertEqual(len(recent_transactions(rows, 24, NOW)), 5)

    def test_old_and_unparsable_are_excluded(self):
        rows = [
            txn("DEPOSIT", 1, 25),
            {"type": "DEPOSIT", "amount": 1, "dateTime": "garbage"},
            {"type": "DEPOSIT", "amount": 1, "time": "2026-10-19T08:00:00+2500"},
            {"type": "DEPOSIT", "amount": 1},
            "not-a-dict",
            txn("DEPOSIT", 2, 23),
        ]
        kept = recent_transactions(rows, 24, NOW)
        self.assertEqual([r["amount"] for r in kept], [2])


class CashFlowTests(unittest.TestCase):
    def test_direction_is_substring_and_case_insensitive(self):
        self.assertEqual(flow_direction("DEPOSIT"), 1)
        self.assertEqual(flow_direction("deposit_card"), 1)
        self.assertEqual(flow_direction("WITHDRAW"), -1)
        self.assertEqual(flow_direction("withdrawal"), -1)
        self.assertEqual(flow_direction("FEE"), 0)
        self.assertEqual(flow_direction(None), 0)

    def test_fold(self):
        rows = [
            {"type": "DEPOSIT", "amount": 300},
            {"type": "Withdraw", "amount": 50},
            {"type": "FEE", "amount": 5},
            {"type": "DEPOSIT", "amount": "bad"},
        ]
        self.assertEqual(cash_flow(rows), 250)

    def test_custom_rules(self):
        rows = [{"type": "TRANSFER_IN", "amount": 10}, {"type": "DEPOSIT", "amount": 5}]
        self.assertEqual(cash_flow(rows, rules=(("TRANSFER_IN", 1),)), 10)


class NormalizeTransactionTests(unittest.TestCase):
    def test_upstream_id_kept(self):
        tx = normalize_transaction({"id": 42, "type": "SELL", "amount": -10, "time": "2026-10-19T08:00:00Z"})
        self.assertEqual(tx.id, "42")
        self.assertEqual(tx.timestamp, "2026-10-19T08:00:00Z")

    def test_reference_used_as_id(self):
        tx = normalize_transaction({"reference": "abc", "type": "WITHDRAW", "amount": 1})
        self.assertEqual(tx.id, "abc")

    def test_id_synthesized_from_type_and_time(self):
        tx = normalize_transaction({"type": "WITHDRAW", "amount": "x", "dateTime": "2026-10-19T08:00:00Z"})
        self.assertEqual(tx.id, "WITHDRAW2026-10-19T08:00:00Z")
        self.assertEqual(tx.amount, 0)

    def test_non_dict(self):
        self.assertIsNone(normalize_transaction(None))


if __name__ == "__main__":
    unittest.main()
