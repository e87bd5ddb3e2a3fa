import json
import tempfile
import unittest
from pathlib import Path

from piewatch.pipeline.schemas import DailySnapshot, LedgerDocument, LedgerEntry, SnapshotDocument
from piewatch.pipeline.state import InMemoryRepository, ledger_repository, snapshot_repository


class JsonFileRepositoryTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_is_empty_document(self):
        self.assertEqual(snapshot_repository(self.dir / "nope.json").load(), SnapshotDocument())
        self.assertEqual(ledger_repository(self.dir / "nope.json").load().realised_total, 0)

    def test_empty_file_is_empty_document(self):
        path = self.dir / "ledger.json"
        path.write_text("  \n", encoding="utf-8")
        self.assertEqual(ledger_repository(path).load(), LedgerDocument())

    def test_snapshot_wire_format_round_trip(self):
        path = self.dir / "state" / "snapshots.json"
        repo = snapshot_repository(path)
        doc = SnapshotDocument(days=[DailySnapshot(date="2026-10-16", total=1050.5, ai_value=600.25, ol_value=400.25)])
        repo.save(doc)
        raw = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(raw, {"days": [{"date": "2026-10-16", "total": 1050.5, "aiValue": 600.25, "olValue": 400.25}]})
        self.assertEqual(repo.load(), doc)

    def test_ledger_wire_format_round_trip(self):
        path = self.dir / "ledger.json"
        path.write_text(json.dumps({
            "realisedTotal": 42.5,
            "entries": [{"id": "WITHDRAW2026", "type": "WITHDRAW", "amount": 42.5, "timestamp": "2026-10-19T08:00:00Z"}],
        }), encoding="utf-8")
        repo = ledger_repository(path)
        doc = repo.load()
        self.assertEqual(doc.realised_total, 42.5)
        self.assertEqual(doc.entries[0], LedgerEntry(id="WITHDRAW2026", type="WITHDRAW", amount=42.5, timestamp="2026-10-19T08:00:00Z"))
        repo.save(doc)
        self.assertEqual(repo.load(), doc)
        self.assertIn("realisedTotal", json.loads(path.read_text(encoding="utf-8")))

    def test_no_temp_files_left(self):
        repo = snapshot_repository(self.dir / "snapshots.json")
        repo.save(SnapshotDocument())
        self.assertEqual(sorted(p.name for p in self.dir.iterdir()), ["snapshots.json"])


class InMemoryRepositoryTests(unittest.TestCase):
    def test_load_save(self):
        repo = InMemoryRepository(LedgerDocument)
        self.assertEqual(repo.load(), LedgerDocument())
        doc = LedgerDocument(realised_total=5)
        repo.save(doc)
        self.assertIs(repo.load(), doc)
        self.assertEqual(repo.saves, 1)


if __name__ == "__main__":
    unittest.main()
