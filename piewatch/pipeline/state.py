from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Generic, Type, TypeVar

import structlog
from pydantic import BaseModel

from .schemas import LedgerDocument, SnapshotDocument

log = structlog.get_logger()

DocT = TypeVar("DocT", bound=BaseModel)


class StateRepository(Generic[DocT]):
    """load() -> document, save(document). One read-modify-write per run."""

    def load(self) -> DocT:
        raise NotImplementedError

    def save(self, doc: DocT) -> None:
        raise NotImplementedError


class JsonFileRepository(StateRepository[DocT]):
    def __init__(self, path: str | Path, model: Type[DocT]):
        self.path = Path(path)
        self.model = model

    def load(self) -> DocT:
        if not self.path.exists():
            return self.model()
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return self.model()
        return self.model.model_validate(json.loads(raw))

    def save(self, doc: DocT) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(doc.model_dump(by_alias=True), indent=2)
        # atomic replace
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        log.debug("state_saved", path=str(self.path))


class InMemoryRepository(StateRepository[DocT]):
    def __init__(self, model: Type[DocT], initial: DocT | None = None):
        self.model = model
        self.doc = initial if initial is not None else model()
        self.saves = 0

    def load(self) -> DocT:
        return self.doc

    def save(self, doc: DocT) -> None:
        self.doc = doc
        self.saves += 1


def ledger_repository(path: str | Path) -> JsonFileRepository[LedgerDocument]:
    return JsonFileRepository(path, LedgerDocument)


def snapshot_repository(path: str | Path) -> JsonFileRepository[SnapshotDocument]:
    return JsonFileRepository(path, SnapshotDocument)
