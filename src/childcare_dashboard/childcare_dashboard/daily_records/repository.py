from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DailyRecord


class DailyRecordRepository(Protocol):
    def list_all(self) -> Sequence[DailyRecord]:
        raise NotImplementedError

    def list_for_child(self, child_id: str) -> Sequence[DailyRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[DailyRecord]:
        """Newest first by date."""

        raise NotImplementedError

    def insert(self, record: DailyRecord) -> DailyRecord:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[DailyRecord]:
        raise NotImplementedError
