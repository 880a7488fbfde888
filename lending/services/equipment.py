"""Equipment application service.

Turns raw command input into domain calls: parses identifiers, loads the
aggregate, applies one transition and saves the new snapshot. Every step
short-circuits on its first failure and nothing is saved unless the
whole operation succeeded.

"Today" comes from the injected clock; the domain never reads one and
receives it as an argument.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

from lending.core.logging import get_logger
from lending.core.result import Err, Ok, Result
from lending.domain.borrowing import Borrowing
from lending.domain.equipment import Equipment, EquipmentError
from lending.domain.identifiers import (
    BorrowingId,
    EmployeeId,
    EquipmentId,
    EquipmentName,
    IdentifierError,
    NameValueError,
)
from lending.domain.period import Period, PeriodError
from lending.domain.repository import EquipmentRepository

logger = get_logger(__name__)


# -----------------
# COMMANDS
# -----------------

class RegisterEquipmentCommand(BaseModel):
    name: Optional[str] = None


class BorrowEquipmentCommand(BaseModel):
    equipment_id: Optional[str] = None
    employee_id: Optional[str] = None
    from_: Optional[date] = None
    to: Optional[date] = None


class ReturnEquipmentCommand(BaseModel):
    equipment_id: Optional[str] = None
    borrowing_id: Optional[str] = None


class DisposeEquipmentCommand(BaseModel):
    equipment_id: Optional[str] = None


# -----------------
# DTOs
# -----------------

class BorrowingDto(BaseModel):
    id: str
    employee_id: str
    from_: date
    to: date
    is_returned: bool

    @classmethod
    def from_domain(cls, borrowing: Borrowing) -> "BorrowingDto":
        return cls(
            id=borrowing.id.value,
            employee_id=borrowing.employee_id.value,
            from_=borrowing.period.from_,
            to=borrowing.period.to,
            is_returned=borrowing.is_returned,
        )


class EquipmentDto(BaseModel):
    id: str
    name: str
    status: str
    borrowings: List[BorrowingDto] = []

    @classmethod
    def from_domain(cls, equipment: Equipment) -> "EquipmentDto":
        return cls(
            id=equipment.id.value,
            name=equipment.name.value,
            status=equipment.status.value,
            borrowings=[BorrowingDto.from_domain(b) for b in equipment.borrowings],
        )


# -----------------
# ERRORS
# -----------------

class EquipmentServiceError:
    """Base for application service failures."""


@dataclass(frozen=True)
class InvalidName(EquipmentServiceError):
    error: NameValueError


@dataclass(frozen=True)
class InvalidEquipmentId(EquipmentServiceError):
    error: IdentifierError


@dataclass(frozen=True)
class InvalidEmployeeId(EquipmentServiceError):
    error: IdentifierError


@dataclass(frozen=True)
class InvalidBorrowingId(EquipmentServiceError):
    error: IdentifierError


@dataclass(frozen=True)
class InvalidPeriod(EquipmentServiceError):
    error: PeriodError


@dataclass(frozen=True)
class EquipmentNotFound(EquipmentServiceError):
    equipment_id: EquipmentId


@dataclass(frozen=True)
class Rejected(EquipmentServiceError):
    """The aggregate refused the transition."""

    error: EquipmentError


# Registration can only fail on the name
RegisterEquipmentError = InvalidName


class EquipmentAppService:
    """Use cases over the Equipment aggregate.

    Args:
        repository: Where snapshots are loaded from and saved to
        clock: Supplies "today" for date-sensitive rules
    """

    def __init__(
        self,
        repository: EquipmentRepository,
        clock: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.clock = clock

    def register_equipment(
        self,
        command: RegisterEquipmentCommand,
    ) -> Result[EquipmentDto, RegisterEquipmentError]:
        name = EquipmentName.parse(command.name)
        if name.is_err:
            logger.info(f"Equipment registration rejected: {name.error!r}")
            return Err(InvalidName(name.error))

        equipment = Equipment.create(self.repository.next_id(), name.value)
        self.repository.save(equipment)

        logger.info(
            f"Equipment registered: {equipment.id} ({equipment.name})",
            extra={"equipment_id": equipment.id.value, "operation": "register_equipment"}
        )
        return Ok(EquipmentDto.from_domain(equipment))

    def get_equipment(self, equipment_id: Optional[str]) -> Result[EquipmentDto, EquipmentServiceError]:
        return self._load(equipment_id).map(EquipmentDto.from_domain)

    def borrow_equipment(
        self,
        command: BorrowEquipmentCommand,
    ) -> Result[EquipmentDto, EquipmentServiceError]:
        today = self.clock()

        equipment_id = EquipmentId.parse(command.equipment_id).map_err(InvalidEquipmentId)
        if equipment_id.is_err:
            return equipment_id

        employee_id = EmployeeId.parse(command.employee_id).map_err(InvalidEmployeeId)
        if employee_id.is_err:
            return employee_id

        period = Period.create(command.from_, command.to, today).map_err(InvalidPeriod)
        if period.is_err:
            return period

        loaded = self._find(equipment_id.value)
        if loaded.is_err:
            return loaded
        equipment = loaded.value

        borrowing = Borrowing.create(
            id=self.repository.next_borrowing_id(),
            employee_id=employee_id.value,
            equipment_id=equipment.id,
            period=period.value,
        )
        return self._apply(
            "borrow_equipment",
            equipment,
            equipment.borrow(borrowing, today),
            borrowing_id=borrowing.id.value,
            employee_id=borrowing.employee_id.value,
            days=borrowing.period.days,
        )

    def return_equipment(
        self,
        command: ReturnEquipmentCommand,
    ) -> Result[EquipmentDto, EquipmentServiceError]:
        today = self.clock()

        equipment_id = EquipmentId.parse(command.equipment_id).map_err(InvalidEquipmentId)
        if equipment_id.is_err:
            return equipment_id

        borrowing_id = BorrowingId.parse(command.borrowing_id).map_err(InvalidBorrowingId)
        if borrowing_id.is_err:
            return borrowing_id

        loaded = self._find(equipment_id.value)
        if loaded.is_err:
            return loaded
        equipment = loaded.value

        return self._apply(
            "return_equipment",
            equipment,
            equipment.return_borrowing(borrowing_id.value, today),
            borrowing_id=borrowing_id.value.value,
        )

    def dispose_equipment(
        self,
        command: DisposeEquipmentCommand,
    ) -> Result[EquipmentDto, EquipmentServiceError]:
        today = self.clock()

        loaded = self._load(command.equipment_id)
        if loaded.is_err:
            return loaded
        equipment = loaded.value

        return self._apply("dispose_equipment", equipment, equipment.dispose(today))

    def _load(self, raw_id: Optional[str]) -> Result[Equipment, EquipmentServiceError]:
        return EquipmentId.parse(raw_id).map_err(InvalidEquipmentId).and_then(self._find)

    def _find(self, equipment_id: EquipmentId) -> Result[Equipment, EquipmentServiceError]:
        equipment = self.repository.find_by_id(equipment_id)
        if equipment is None:
            return Err(EquipmentNotFound(equipment_id))
        return Ok(equipment)

    def _apply(
        self,
        operation: str,
        before: Equipment,
        outcome: Result[Equipment, EquipmentError],
        **context: Any,
    ) -> Result[EquipmentDto, EquipmentServiceError]:
        log = get_logger(__name__, {"equipment_id": before.id.value, "operation": operation})

        if outcome.is_err:
            log.info(f"{operation} rejected: {type(outcome.error).__name__}", extra=context)
            return Err(Rejected(outcome.error))

        after = outcome.value
        self.repository.save(after)
        log.info(f"{operation} applied: {before.status.value} -> {after.status.value}", extra=context)
        return Ok(EquipmentDto.from_domain(after))
