"""FastAPI routes for equipment registration, lending and disposal.

Routes are thin: they build a command, call the application service
and translate its result. Failures come back as values and are mapped
to status codes here:

- 422 for rejected input (identifiers, names, periods)
- 404 for unknown equipment or borrowings
- 409 for state conflicts (overlap, disposed, still borrowed)
"""
from typing import Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from lending.api.dependencies import get_equipment_service
from lending.api.schemas import (
    BorrowEquipmentRequest,
    EquipmentResponse,
    ErrorResponse,
    RegisterEquipmentRequest,
)
from lending.core.logging import LogTimer, get_logger
from lending.core.result import Result
from lending.domain.equipment import (
    AlreadyDisposed,
    BorrowingNotFound,
    CannotDisposeWhileBorrowed,
    PeriodOverlap,
)
from lending.domain.identifiers import (
    IdentifierIsNull,
    InvalidIdentifierFormat,
    NameIsEmpty,
    NameIsNull,
)
from lending.domain.period import FromIsNull, InvalidRange, PastDate, ToIsNull
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

logger = get_logger(__name__)
router = APIRouter()

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def _describe_value_error(error) -> str:
    if isinstance(error, (IdentifierIsNull, NameIsNull)):
        return "value is required"
    if isinstance(error, InvalidIdentifierFormat):
        return f"'{error.value}' must start with '{error.prefix}'"
    if isinstance(error, NameIsEmpty):
        return "value must not be empty"
    if isinstance(error, FromIsNull):
        return "'from' is required"
    if isinstance(error, ToIsNull):
        return "'to' is required"
    if isinstance(error, InvalidRange):
        return f"'from' ({error.from_}) must be before 'to' ({error.to})"
    if isinstance(error, PastDate):
        return f"'from' ({error.from_}) is before today ({error.today})"
    return repr(error)


def describe_error(error) -> Tuple[int, str, str]:
    """Map a service error value to (status code, error code, detail)."""
    if isinstance(error, InvalidName):
        return 422, "invalid_name", f"name: {_describe_value_error(error.error)}"
    if isinstance(error, InvalidEquipmentId):
        return 422, "invalid_equipment_id", f"equipment_id: {_describe_value_error(error.error)}"
    if isinstance(error, InvalidEmployeeId):
        return 422, "invalid_employee_id", f"employee_id: {_describe_value_error(error.error)}"
    if isinstance(error, InvalidBorrowingId):
        return 422, "invalid_borrowing_id", f"borrowing_id: {_describe_value_error(error.error)}"
    if isinstance(error, InvalidPeriod):
        return 422, "invalid_period", _describe_value_error(error.error)
    if isinstance(error, EquipmentNotFound):
        return 404, "equipment_not_found", f"No equipment with id '{error.equipment_id}'"

    if isinstance(error, Rejected):
        cause = error.error
        if isinstance(cause, AlreadyDisposed):
            return 409, "already_disposed", "Equipment has been disposed"
        if isinstance(cause, PeriodOverlap):
            existing = cause.existing_borrowing
            return 409, "period_overlap", (
                f"Requested period {cause.new_borrowing.period} overlaps "
                f"borrowing '{existing.id}' ({existing.period})"
            )
        if isinstance(cause, BorrowingNotFound):
            return 404, "borrowing_not_found", f"No borrowing with id '{cause.borrowing_id}'"
        if isinstance(cause, CannotDisposeWhileBorrowed):
            return 409, "cannot_dispose_while_borrowed", (
                "Equipment has a current or future borrowing"
            )

    raise ValueError(f"Unmapped service error: {error!r}")


def _respond(result: Result, success_status: int = 200) -> JSONResponse:
    if result.is_err:
        status_code, code, detail = describe_error(result.error)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=code, detail=detail).model_dump()
        )

    body = EquipmentResponse.from_dto(result.value)
    return JSONResponse(
        status_code=success_status,
        content=body.model_dump(mode="json", by_alias=True)
    )


# -----------------
# EQUIPMENT ENDPOINTS
# -----------------

@router.post(
    "/equipment",
    status_code=201,
    response_model=EquipmentResponse,
    responses=ERROR_RESPONSES,
)
def register_equipment(
    req: RegisterEquipmentRequest,
    service: EquipmentAppService = Depends(get_equipment_service),
):
    """Register a new equipment item. It starts AVAILABLE with no borrowings.

    Example:
        POST /equipment
        {"name": "Projector"}
    """
    with LogTimer(logger, "register_equipment"):
        result = service.register_equipment(RegisterEquipmentCommand(name=req.name))
        return _respond(result, success_status=201)


@router.get(
    "/equipment/{equipment_id}",
    response_model=EquipmentResponse,
    responses=ERROR_RESPONSES,
)
def get_equipment(
    equipment_id: str,
    service: EquipmentAppService = Depends(get_equipment_service),
):
    """Return the current snapshot of an equipment item."""
    return _respond(service.get_equipment(equipment_id))


@router.post(
    "/equipment/{equipment_id}/borrowings",
    status_code=201,
    response_model=EquipmentResponse,
    responses=ERROR_RESPONSES,
)
def borrow_equipment(
    equipment_id: str,
    req: BorrowEquipmentRequest,
    service: EquipmentAppService = Depends(get_equipment_service),
):
    """Reserve equipment for an inclusive date range.

    Example:
        POST /equipment/eq-001/borrowings
        {"employee_id": "emp-001", "from": "2025-10-20", "to": "2025-10-25"}
    """
    with LogTimer(logger, "borrow_equipment", equipment_id=equipment_id):
        command = BorrowEquipmentCommand(
            equipment_id=equipment_id,
            employee_id=req.employee_id,
            from_=req.from_,
            to=req.to,
        )
        return _respond(service.borrow_equipment(command), success_status=201)


@router.delete(
    "/equipment/{equipment_id}/borrowings/{borrowing_id}",
    response_model=EquipmentResponse,
    responses=ERROR_RESPONSES,
)
def return_equipment(
    equipment_id: str,
    borrowing_id: str,
    service: EquipmentAppService = Depends(get_equipment_service),
):
    """Return a borrowing. It is removed from the equipment's borrowings."""
    with LogTimer(logger, "return_equipment", equipment_id=equipment_id, borrowing_id=borrowing_id):
        command = ReturnEquipmentCommand(equipment_id=equipment_id, borrowing_id=borrowing_id)
        return _respond(service.return_equipment(command))


@router.post(
    "/equipment/{equipment_id}/dispose",
    response_model=EquipmentResponse,
    responses=ERROR_RESPONSES,
)
def dispose_equipment(
    equipment_id: str,
    service: EquipmentAppService = Depends(get_equipment_service),
):
    """Dispose of equipment that has no current or future borrowing."""
    with LogTimer(logger, "dispose_equipment", equipment_id=equipment_id):
        command = DisposeEquipmentCommand(equipment_id=equipment_id)
        return _respond(service.dispose_equipment(command))
