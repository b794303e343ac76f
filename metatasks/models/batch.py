"""Batch operation models"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class ItemOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BatchItem(BaseModel):
    """One identifier's result. Assigned once, never mutated."""
    model_config = ConfigDict(frozen=True)

    identifier: str
    outcome: ItemOutcome
    value: Any = None
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == ItemOutcome.SUCCEEDED


class BatchOutcome(BaseModel):
    """Per-item results of a batch, in input order"""
    model_config = ConfigDict(frozen=True)

    items: List[BatchItem]

    @property
    def succeeded(self) -> List[Any]:
        return [item.value for item in self.items if item.succeeded]

    @property
    def succeeded_ids(self) -> List[str]:
        return [item.identifier for item in self.items if item.succeeded]

    @property
    def failed(self) -> List[str]:
        return [item.identifier for item in self.items if not item.succeeded]

    @property
    def total_succeeded(self) -> int:
        return len(self.succeeded_ids)

    @property
    def total_failed(self) -> int:
        return len(self.failed)

    @property
    def all_success(self) -> bool:
        return not self.failed
