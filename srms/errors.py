class RecordSystemError(Exception):
    """Base class for record system failures."""


class DuplicateKey(RecordSystemError):
    """A username or roll number is already present."""


class CapacityExceeded(RecordSystemError):
    """A store is at its fixed limit."""


class NotFound(RecordSystemError):
    """Lookup miss on a username or roll number."""


class LockedOut(RecordSystemError):
    """Too many failed logins during this run."""


class ParseTruncation(RecordSystemError):
    """A persisted line could not be parsed; loading stops there."""


class BackupError(RecordSystemError):
    """The student file could not be copied."""


class InvalidField(RecordSystemError):
    """A credential field is empty or contains whitespace."""
