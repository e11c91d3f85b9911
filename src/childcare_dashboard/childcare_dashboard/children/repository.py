from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Child


class ChildRepository(Protocol):
    """Repository interface for children.

    Note: services depend on this interface, not on a concrete database.
    """

    def list_all(self) -> Sequence[Child]:
        raise NotImplementedError

    def get_by_id(self, child_id: str) -> Optional[Child]:
        raise NotImplementedError

    def insert(self, child: Child) -> Child:
        raise NotImplementedError

    def update(self, child_id: str, changes: dict) -> Optional[Child]:
        """Apply a partial update; ``changes`` uses domain field names.

        Returns the stored child after the update, None when the id is unknown.
        """

        raise NotImplementedError
