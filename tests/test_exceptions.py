"""Tests for exception hierarchy."""

from smarttab.exceptions import (
    FocusModeError,
    HostError,
    ImportValidationError,
    SmartTabError,
    StorageError,
    ValidationError,
)


def test_all_inherit_from_base():
    for exc_class in [
        StorageError,
        HostError,
        ValidationError,
        ImportValidationError,
        FocusModeError,
    ]:
        assert issubclass(exc_class, SmartTabError)


def test_import_validation_is_validation():
    assert issubclass(ImportValidationError, ValidationError)


def test_exception_message():
    e = StorageError("test error")
    assert str(e) == "test error"
