"""Identifier and name value objects.

Identifiers are plain strings with a fixed prefix; names are non-empty
strings. Parsing returns a result instead of raising so callers can
report every rejected input precisely.
"""
from dataclasses import dataclass
from typing import ClassVar, Optional
from pydantic import BaseModel

from lending.core.result import Err, Ok, Result


class IdentifierError:
    """Base for identifier parsing failures."""


@dataclass(frozen=True)
class IdentifierIsNull(IdentifierError):
    pass


@dataclass(frozen=True)
class InvalidIdentifierFormat(IdentifierError):
    value: str
    prefix: str


class NameValueError:
    """Base for name parsing failures."""


@dataclass(frozen=True)
class NameIsNull(NameValueError):
    pass


@dataclass(frozen=True)
class NameIsEmpty(NameValueError):
    value: str


class _PrefixedIdentifier(BaseModel):
    """String identifier that must start with ``PREFIX``."""

    PREFIX: ClassVar[str] = ""

    value: str

    class Config:
        frozen = True

    @classmethod
    def parse(cls, value: Optional[str]) -> Result["_PrefixedIdentifier", IdentifierError]:
        if value is None:
            return Err(IdentifierIsNull())
        if not isinstance(value, str) or not value.startswith(cls.PREFIX):
            return Err(InvalidIdentifierFormat(value=value, prefix=cls.PREFIX))
        return Ok(cls(value=value))

    def __str__(self) -> str:
        return self.value


class EmployeeId(_PrefixedIdentifier):
    PREFIX: ClassVar[str] = "emp-"


class EquipmentId(_PrefixedIdentifier):
    PREFIX: ClassVar[str] = "eq-"


class BorrowingId(_PrefixedIdentifier):
    PREFIX: ClassVar[str] = "brw-"


class _NonEmptyName(BaseModel):
    value: str

    class Config:
        frozen = True

    @classmethod
    def parse(cls, value: Optional[str]) -> Result["_NonEmptyName", NameValueError]:
        if value is None:
            return Err(NameIsNull())
        if value == "":
            return Err(NameIsEmpty(value=value))
        return Ok(cls(value=value))

    def __str__(self) -> str:
        return self.value


class EquipmentName(_NonEmptyName):
    pass


class EmployeeName(_NonEmptyName):
    pass
