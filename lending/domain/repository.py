"""Persistence port for the equipment aggregate."""
from abc import ABC, abstractmethod
from typing import Optional

from lending.domain.equipment import Equipment
from lending.domain.identifiers import BorrowingId, EquipmentId


class RepositoryError(Exception):
    """Raised when the storage backend fails or holds unreadable data."""


class EquipmentRepository(ABC):
    """Stores whole Equipment snapshots and hands out fresh identifiers.

    ``save`` replaces the stored snapshot as a unit. Callers serialize
    writes per equipment id; the repository does no version checking.
    """

    @abstractmethod
    def next_id(self) -> EquipmentId:
        ...

    @abstractmethod
    def next_borrowing_id(self) -> BorrowingId:
        ...

    @abstractmethod
    def save(self, equipment: Equipment) -> None:
        ...

    @abstractmethod
    def find_by_id(self, equipment_id: EquipmentId) -> Optional[Equipment]:
        ...
