"""
Structured ledger records validated at every load/store boundary.
"""
from __future__ import annotations

import json
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EntryKind = Literal["incomes", "expenses"]


class Entry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    amount: float = Field(gt=0, allow_inf_nan=False)

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.lower()


class Ledger(BaseModel):
    """Per-user document holding the income and expense lists."""

    model_config = ConfigDict(extra="ignore")

    incomes: List[Entry]
    expenses: List[Entry]

    @classmethod
    def empty(cls) -> "Ledger":
        return cls(incomes=[], expenses=[])

    def entries(self, kind: EntryKind) -> List[Entry]:
        return getattr(self, kind)

    def find(self, kind: EntryKind, name: str) -> Optional[Entry]:
        return next((entry for entry in self.entries(kind) if entry.matches(name)), None)

    def totals(self) -> dict:
        income = sum(entry.amount for entry in self.incomes)
        expenses = sum(entry.amount for entry in self.expenses)
        return {
            "income": income,
            "expenses": expenses,
            "balance": income - expenses,
        }

    def to_document(self) -> dict:
        return self.model_dump(mode="json")

    def byte_size(self) -> int:
        return len(json.dumps(self.to_document(), separators=(",", ":")).encode("utf-8"))
