"""Unit tests for the equipment application service."""
import logging
from datetime import date
from unittest.mock import Mock

import pytest

from lending.domain.equipment import (
    AlreadyDisposed,
    BorrowingNotFound,
    CannotDisposeWhileBorrowed,
    Equipment,
    EquipmentStatus,
    PeriodOverlap,
)
from lending.domain.identifiers import (
    EquipmentId,
    IdentifierIsNull,
    InvalidIdentifierFormat,
    NameIsEmpty,
    NameIsNull,
)
from lending.domain.period import InvalidRange, PastDate
from lending.domain.repository import EquipmentRepository
from lending.services.equipment import (
    BorrowEquipmentCommand,
    DisposeEquipmentCommand,
    EquipmentAppService,
    EquipmentNotFound,
    InvalidBorrowingId,
    InvalidEmployeeId,
    InvalidEquipmentId,
    InvalidName,
    InvalidPeriod,
    Rejected,
    RegisterEquipmentCommand,
    ReturnEquipmentCommand,
)
from conftest import TODAY


@pytest.fixture
def mock_repository():
    repo = Mock(spec=EquipmentRepository)
    repo.next_id.return_value = EquipmentId.parse("eq-001").unwrap()
    return repo


def register(service, name="Projector"):
    return service.register_equipment(RegisterEquipmentCommand(name=name)).unwrap()


def borrow(service, equipment_id, start, end, employee_id="emp-001"):
    return service.borrow_equipment(BorrowEquipmentCommand(
        equipment_id=equipment_id,
        employee_id=employee_id,
        from_=start,
        to=end,
    ))


class TestRegisterEquipment:
    """Registration against a mocked repository."""

    def test_register_with_valid_name(self, mock_repository):
        service = EquipmentAppService(mock_repository, clock=lambda: TODAY)

        result = service.register_equipment(RegisterEquipmentCommand(name="Projector"))

        assert result.is_ok
        dto = result.value
        assert dto.id == "eq-001"
        assert dto.name == "Projector"
        assert dto.status == "AVAILABLE"
        assert dto.borrowings == []

        mock_repository.next_id.assert_called_once()
        mock_repository.save.assert_called_once()
        saved = mock_repository.save.call_args.args[0]
        assert isinstance(saved, Equipment)
        assert saved.status == EquipmentStatus.AVAILABLE

    def test_register_with_null_name(self, mock_repository):
        service = EquipmentAppService(mock_repository, clock=lambda: TODAY)

        result = service.register_equipment(RegisterEquipmentCommand(name=None))

        assert result.error == InvalidName(NameIsNull())
        mock_repository.save.assert_not_called()
        mock_repository.next_id.assert_not_called()

    def test_register_with_empty_name(self, mock_repository):
        service = EquipmentAppService(mock_repository, clock=lambda: TODAY)

        result = service.register_equipment(RegisterEquipmentCommand(name=""))

        assert isinstance(result.error, InvalidName)
        assert result.error.error == NameIsEmpty(value="")
        mock_repository.save.assert_not_called()


class TestGetEquipment:

    def test_get_registered(self, service):
        dto = register(service)

        assert service.get_equipment(dto.id).value == dto

    def test_get_unknown(self, service):
        result = service.get_equipment("eq-999")

        assert result.error == EquipmentNotFound(EquipmentId(value="eq-999"))

    def test_get_with_invalid_id(self, service):
        result = service.get_equipment("999")

        assert result.error == InvalidEquipmentId(InvalidIdentifierFormat(value="999", prefix="eq-"))


class TestBorrowEquipment:

    def test_borrow_today_marks_borrowed_and_saves(self, service, repository):
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 20), date(2025, 10, 25))

        assert result.value.status == "BORROWED"
        assert [b.id for b in result.value.borrowings] == ["brw-001"]
        stored = repository.find_by_id(EquipmentId(value=dto.id))
        assert stored.status == EquipmentStatus.BORROWED
        assert len(stored.borrowings) == 1

    def test_future_borrow_stays_available(self, service):
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 25), date(2025, 10, 30))

        assert result.value.status == "AVAILABLE"

    def test_overlap_is_rejected_and_not_saved(self, service, repository):
        dto = register(service)
        borrow(service, dto.id, date(2025, 10, 20), date(2025, 10, 25)).unwrap()

        result = borrow(service, dto.id, date(2025, 10, 23), date(2025, 10, 28), employee_id="emp-002")

        assert isinstance(result.error, Rejected)
        overlap = result.error.error
        assert isinstance(overlap, PeriodOverlap)
        assert overlap.existing_borrowing.id.value == "brw-001"
        assert overlap.new_borrowing.employee_id.value == "emp-002"
        assert len(repository.find_by_id(EquipmentId(value=dto.id)).borrowings) == 1

    def test_period_in_past(self, service):
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 19), date(2025, 10, 25))

        assert result.error == InvalidPeriod(PastDate(from_=date(2025, 10, 19), today=TODAY))

    def test_invalid_range(self, service):
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 25), date(2025, 10, 25))

        assert isinstance(result.error.error, InvalidRange)

    def test_invalid_employee(self, service):
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 20), date(2025, 10, 25), employee_id=None)

        assert result.error == InvalidEmployeeId(IdentifierIsNull())

    def test_input_validated_before_lookup(self, mock_repository):
        service = EquipmentAppService(mock_repository, clock=lambda: TODAY)

        result = borrow(service, "eq-001", date(2025, 10, 19), date(2025, 10, 25))

        assert isinstance(result.error, InvalidPeriod)
        mock_repository.find_by_id.assert_not_called()
        mock_repository.next_borrowing_id.assert_not_called()

    def test_unknown_equipment(self, service):
        result = borrow(service, "eq-404", date(2025, 10, 20), date(2025, 10, 25))

        assert isinstance(result.error, EquipmentNotFound)

    def test_uses_clock_for_today(self, repository):
        service = EquipmentAppService(repository, clock=lambda: date(2025, 10, 27))
        dto = register(service)

        result = borrow(service, dto.id, date(2025, 10, 25), date(2025, 10, 30))

        assert isinstance(result.error, InvalidPeriod)

    def test_accepted_borrow_is_logged_with_context(self, service, caplog):
        dto = register(service)

        with caplog.at_level(logging.INFO, logger="lending.services.equipment"):
            borrow(service, dto.id, date(2025, 10, 20), date(2025, 10, 25)).unwrap()

        record = caplog.records[-1]
        assert "borrow_equipment applied: AVAILABLE -> BORROWED" in record.getMessage()
        assert record.equipment_id == dto.id
        assert record.operation == "borrow_equipment"
        assert record.borrowing_id == "brw-001"
        assert record.days == 6


class TestReturnEquipment:

    def test_return_makes_available(self, service):
        dto = register(service)
        borrow(service, dto.id, date(2025, 10, 20), date(2025, 10, 25)).unwrap()

        result = service.return_equipment(ReturnEquipmentCommand(equipment_id=dto.id, borrowing_id="brw-001"))

        assert result.value.status == "AVAILABLE"
        assert result.value.borrowings == []

    def test_return_unknown_borrowing(self, service):
        dto = register(service)

        result = service.return_equipment(ReturnEquipmentCommand(equipment_id=dto.id, borrowing_id="brw-404"))

        assert isinstance(result.error, Rejected)
        assert isinstance(result.error.error, BorrowingNotFound)

    def test_return_invalid_borrowing_id(self, service):
        dto = register(service)

        result = service.return_equipment(ReturnEquipmentCommand(equipment_id=dto.id, borrowing_id="404"))

        assert isinstance(result.error, InvalidBorrowingId)


class TestDisposeEquipment:

    def test_dispose_and_reject_afterwards(self, service):
        dto = register(service)

        disposed = service.dispose_equipment(DisposeEquipmentCommand(equipment_id=dto.id))
        again = service.dispose_equipment(DisposeEquipmentCommand(equipment_id=dto.id))
        late_borrow = borrow(service, dto.id, date(2025, 10, 25), date(2025, 10, 30))

        assert disposed.value.status == "DISPOSED"
        assert again.error == Rejected(AlreadyDisposed())
        assert late_borrow.error == Rejected(AlreadyDisposed())

    def test_dispose_with_future_reservation(self, service, repository):
        dto = register(service)
        borrow(service, dto.id, date(2025, 10, 25), date(2025, 10, 30)).unwrap()

        result = service.dispose_equipment(DisposeEquipmentCommand(equipment_id=dto.id))

        assert result.error == Rejected(CannotDisposeWhileBorrowed())
        assert repository.find_by_id(EquipmentId(value=dto.id)).status == EquipmentStatus.AVAILABLE
