from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Contract


class ContractRepository(Protocol):
    def list_all(self) -> Sequence[Contract]:
        raise NotImplementedError

    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        raise NotImplementedError

    def insert(self, contract: Contract) -> Contract:
        raise NotImplementedError

    def update(self, contract_id: str, changes: dict) -> Optional[Contract]:
        """Partial update using domain field names; None when the id is unknown."""

        raise NotImplementedError

    def delete(self, contract_id: str) -> bool:
        raise NotImplementedError
