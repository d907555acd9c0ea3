"""Unified exception hierarchy for smarttab."""


class SmartTabError(Exception):
    """Base exception for all smarttab errors."""


# Storage
class StorageError(SmartTabError):
    """The persistent store could not be read or written."""


# Browser host
class HostError(SmartTabError):
    """A call into the browser host failed."""


# Commands
class ValidationError(SmartTabError):
    """A command payload is missing fields or carries bad values."""


class ImportValidationError(ValidationError):
    """A backup payload does not have the expected shape."""


# Policy
class FocusModeError(SmartTabError):
    """Focus mode could not be started."""
