"""Unit tests for identifier and name value objects."""
import pytest

from lending.domain.identifiers import (
    BorrowingId,
    EmployeeId,
    EmployeeName,
    EquipmentId,
    EquipmentName,
    IdentifierIsNull,
    InvalidIdentifierFormat,
    NameIsEmpty,
    NameIsNull,
)


@pytest.mark.parametrize("cls,value", [
    (EmployeeId, "emp-001"),
    (EquipmentId, "eq-001"),
    (BorrowingId, "brw-001"),
])
def test_identifier_with_prefix(cls, value):
    result = cls.parse(value)

    assert result.is_ok
    assert result.value.value == value
    assert str(result.value) == value


@pytest.mark.parametrize("cls", [EmployeeId, EquipmentId, BorrowingId])
def test_identifier_null(cls):
    assert cls.parse(None).error == IdentifierIsNull()


@pytest.mark.parametrize("cls,value,prefix", [
    (EmployeeId, "001", "emp-"),
    (EquipmentId, "brw-001", "eq-"),
    (BorrowingId, "", "brw-"),
])
def test_identifier_wrong_prefix(cls, value, prefix):
    assert cls.parse(value).error == InvalidIdentifierFormat(value=value, prefix=prefix)


def test_non_string_identifier_is_format_error():
    assert EquipmentId.parse(7).error == InvalidIdentifierFormat(value=7, prefix="eq-")


def test_identifiers_of_different_kinds_are_not_equal():
    assert EquipmentId(value="eq-1") != BorrowingId(value="eq-1")


def test_identifier_usable_as_dict_key():
    a = EquipmentId.parse("eq-001").unwrap()
    b = EquipmentId.parse("eq-001").unwrap()

    assert {a: "projector"}[b] == "projector"


@pytest.mark.parametrize("cls", [EquipmentName, EmployeeName])
class TestNames:

    def test_valid(self, cls):
        assert cls.parse("Projector").value.value == "Projector"

    def test_null(self, cls):
        assert cls.parse(None).error == NameIsNull()

    def test_empty(self, cls):
        result = cls.parse("")

        assert result.error == NameIsEmpty(value="")

    def test_whitespace_is_not_empty(self, cls):
        assert cls.parse(" ").is_ok
