from pydantic import BaseModel, ConfigDict, Field
from typing import List


class _Doc(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class LedgerEntry(_Doc):
    id: str
    type: str = ""
    amount: float = Field(default=0.0, ge=0)
    timestamp: str = ""


class LedgerDocument(_Doc):
    realised_total: float = Field(default=0.0, alias="realisedTotal")
    entries: List[LedgerEntry] = Field(default_factory=list)


class DailySnapshot(_Doc):
    date: str
    total: float = 0.0
    ai_value: float = Field(default=0.0, alias="aiValue")
    ol_value: float = Field(default=0.0, alias="olValue")


class SnapshotDocument(_Doc):
    days: List[DailySnapshot] = Field(default_factory=list)
