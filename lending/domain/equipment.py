"""Equipment aggregate root.

Equipment owns its borrowings and is the only place they change. Every
transition returns a new snapshot; the receiver is never modified, so a
rejected operation leaves the caller holding the previous, still valid
snapshot.

Status rules:
- BORROWED while some borrowing's period contains "today", else AVAILABLE.
- DISPOSED is terminal: once set, borrow, return and dispose are refused.
- A reservation that starts in the future does not change current status.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Tuple
from pydantic import BaseModel

from lending.core.result import Err, Ok, Result
from lending.domain.borrowing import Borrowing
from lending.domain.identifiers import BorrowingId, EquipmentId, EquipmentName


class EquipmentStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BORROWED = "BORROWED"
    DISPOSED = "DISPOSED"


class EquipmentError:
    """Base for equipment state conflicts."""


@dataclass(frozen=True)
class AlreadyDisposed(EquipmentError):
    pass


@dataclass(frozen=True)
class PeriodOverlap(EquipmentError):
    existing_borrowing: Borrowing
    new_borrowing: Borrowing


@dataclass(frozen=True)
class BorrowingNotFound(EquipmentError):
    borrowing_id: BorrowingId


@dataclass(frozen=True)
class CannotDisposeWhileBorrowed(EquipmentError):
    pass


class Equipment(BaseModel):
    """Lendable equipment item and its reservations, in insertion order."""

    id: EquipmentId
    name: EquipmentName
    status: EquipmentStatus
    borrowings: Tuple[Borrowing, ...] = ()

    class Config:
        frozen = True

    @classmethod
    def create(cls, id: EquipmentId, name: EquipmentName) -> "Equipment":
        return cls(id=id, name=name, status=EquipmentStatus.AVAILABLE, borrowings=())

    @classmethod
    def reconstitute(
        cls,
        id: EquipmentId,
        name: EquipmentName,
        status: EquipmentStatus,
        borrowings: Iterable[Borrowing],
    ) -> "Equipment":
        """Rebuild a snapshot from stored state without re-running any rule.

        Only repository adapters (and tests seeding a known state) should
        call this; everything else goes through ``create`` and the
        transitions below.
        """
        return cls(id=id, name=name, status=status, borrowings=tuple(borrowings))

    @property
    def is_disposed(self) -> bool:
        return self.status == EquipmentStatus.DISPOSED

    def find_borrowing(self, borrowing_id: BorrowingId) -> Optional[Borrowing]:
        return next((b for b in self.borrowings if b.id == borrowing_id), None)

    def borrow(self, borrowing: Borrowing, today: date) -> Result["Equipment", EquipmentError]:
        if self.is_disposed:
            return Err(AlreadyDisposed())

        # First overlapping reservation in insertion order is reported
        existing = next((b for b in self.borrowings if b.overlaps(borrowing)), None)
        if existing is not None:
            return Err(PeriodOverlap(existing_borrowing=existing, new_borrowing=borrowing))

        status = EquipmentStatus.BORROWED if borrowing.contains(today) else self.status
        return Ok(self.model_copy(update={
            "borrowings": self.borrowings + (borrowing,),
            "status": status,
        }))

    def return_borrowing(
        self,
        borrowing_id: BorrowingId,
        today: date,
    ) -> Result["Equipment", EquipmentError]:
        if self.is_disposed:
            return Err(AlreadyDisposed())
        if self.find_borrowing(borrowing_id) is None:
            return Err(BorrowingNotFound(borrowing_id=borrowing_id))

        # The returned borrowing is evicted, not flagged
        remaining = tuple(b for b in self.borrowings if b.id != borrowing_id)
        if any(b.contains(today) for b in remaining):
            status = EquipmentStatus.BORROWED
        else:
            status = EquipmentStatus.AVAILABLE

        return Ok(self.model_copy(update={"borrowings": remaining, "status": status}))

    def dispose(self, today: date) -> Result["Equipment", EquipmentError]:
        if self.is_disposed:
            return Err(AlreadyDisposed())
        if any(b.is_active_or_future(today) for b in self.borrowings):
            return Err(CannotDisposeWhileBorrowed())

        # Borrowing history is kept on the disposed snapshot
        return Ok(self.model_copy(update={"status": EquipmentStatus.DISPOSED}))
