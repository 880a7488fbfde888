"""Borrowing entity: one employee reserving one piece of equipment."""
from dataclasses import dataclass
from datetime import date
from pydantic import BaseModel

from lending.core.result import Err, Ok, Result
from lending.domain.identifiers import BorrowingId, EmployeeId, EquipmentId
from lending.domain.period import Period


class BorrowingError:
    """Base for borrowing state failures."""


@dataclass(frozen=True)
class AlreadyReturned(BorrowingError):
    borrowing_id: BorrowingId


class Borrowing(BaseModel):
    """Reservation of an equipment item by an employee for a period.

    Identity is the borrowing id: two snapshots of the same borrowing
    compare equal even when one of them has been marked returned.
    """

    id: BorrowingId
    employee_id: EmployeeId
    equipment_id: EquipmentId
    period: Period
    is_returned: bool = False

    class Config:
        frozen = True

    @classmethod
    def create(
        cls,
        id: BorrowingId,
        employee_id: EmployeeId,
        equipment_id: EquipmentId,
        period: Period,
    ) -> "Borrowing":
        return cls(
            id=id,
            employee_id=employee_id,
            equipment_id=equipment_id,
            period=period,
            is_returned=False,
        )

    def mark_as_returned(self) -> Result["Borrowing", BorrowingError]:
        if self.is_returned:
            return Err(AlreadyReturned(borrowing_id=self.id))
        return Ok(self.model_copy(update={"is_returned": True}))

    def is_active_or_future(self, today: date) -> bool:
        return self.period.is_ongoing_or_future(today)

    def overlaps(self, other: "Borrowing") -> bool:
        return self.period.overlaps(other.period)

    def contains(self, day: date) -> bool:
        return self.period.contains(day)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Borrowing):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
