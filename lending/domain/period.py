"""Borrowing period value object.

A period is an inclusive range of whole calendar days. Two periods that
share an endpoint overlap: equipment returned on day X cannot be handed
to the next borrower on the same day X.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from lending.core.result import Err, Ok, Result


class PeriodError:
    """Base for period validation failures."""


@dataclass(frozen=True)
class FromIsNull(PeriodError):
    pass


@dataclass(frozen=True)
class ToIsNull(PeriodError):
    pass


@dataclass(frozen=True)
class InvalidRange(PeriodError):
    from_: date
    to: date


@dataclass(frozen=True)
class PastDate(PeriodError):
    from_: date
    today: date


class Period(BaseModel):
    """Inclusive date range ``[from_, to]`` with ``from_ < to``.

    New periods go through ``Period.create``, which also rejects a start
    date earlier than ``today``. Constructing the model directly skips
    that check and is reserved for reloading persisted periods, which
    may legitimately lie in the past.
    """

    from_: date = Field(alias="from")
    to: date

    class Config:
        frozen = True
        populate_by_name = True

    @model_validator(mode="after")
    def check_range(self) -> "Period":
        if self.from_ >= self.to:
            raise ValueError(f"Period start {self.from_} must be before end {self.to}")
        return self

    @classmethod
    def create(
        cls,
        from_: Optional[date],
        to: Optional[date],
        today: date,
    ) -> Result["Period", PeriodError]:
        """Validate and build a period starting today or later.

        Checks run in order and the first failure is returned: missing
        start, missing end, start not before end, start in the past.
        """
        if from_ is None:
            return Err(FromIsNull())
        if to is None:
            return Err(ToIsNull())
        if from_ >= to:
            return Err(InvalidRange(from_=from_, to=to))
        if from_ < today:
            return Err(PastDate(from_=from_, today=today))
        return Ok(cls(from_=from_, to=to))

    def is_ongoing_or_future(self, today: date) -> bool:
        return self.to >= today

    def overlaps(self, other: "Period") -> bool:
        # Touching endpoints count as an overlap
        return self.from_ <= other.to and self.to >= other.from_

    def contains(self, day: date) -> bool:
        return self.from_ <= day <= self.to

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.to - self.from_).days + 1

    def __str__(self) -> str:
        return f"{self.from_.isoformat()}..{self.to.isoformat()}"
