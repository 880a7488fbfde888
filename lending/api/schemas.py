"""Request and response bodies for the lending API."""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from lending.services.equipment import BorrowingDto, EquipmentDto


class RegisterEquipmentRequest(BaseModel):
    """Register a new equipment item."""
    name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {"name": "Projector"}
        }


class BorrowEquipmentRequest(BaseModel):
    """Reserve an equipment item for an inclusive date range."""
    employee_id: Optional[str] = None
    from_: Optional[date] = Field(default=None, alias="from")
    to: Optional[date] = None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "employee_id": "emp-001",
                "from": "2025-10-20",
                "to": "2025-10-25"
            }
        }


class BorrowingResponse(BaseModel):
    id: str
    employee_id: str
    from_: date = Field(serialization_alias="from")
    to: date
    is_returned: bool

    @classmethod
    def from_dto(cls, dto: BorrowingDto) -> "BorrowingResponse":
        return cls(**dto.model_dump())


class EquipmentResponse(BaseModel):
    id: str
    name: str
    status: str
    borrowings: List[BorrowingResponse] = Field(default_factory=list)

    @classmethod
    def from_dto(cls, dto: EquipmentDto) -> "EquipmentResponse":
        return cls(
            id=dto.id,
            name=dto.name,
            status=dto.status,
            borrowings=[BorrowingResponse.from_dto(b) for b in dto.borrowings],
        )


class ErrorResponse(BaseModel):
    """Machine-readable error code plus a human-readable explanation."""
    error: str
    detail: str
