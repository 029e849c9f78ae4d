"""Exception hierarchy and error reporting for Hinged.

The catalog-number parser, comparator, range filter and gap analyzer are
total functions and never raise. Everything that touches files or user
supplied records raises a subclass of HingedError instead.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path


class HingedError(Exception):
    """Base exception for all Hinged errors."""

    pass


class HingedValueError(HingedError):
    """A user supplied value was rejected (bad range, unknown enum value...)."""

    pass


class LibraryError(HingedError):
    """Base class for library store errors."""

    pass


class LibraryLoadError(LibraryError):
    """The library file exists but could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load library {path}: {reason}")


class RecordNotFoundError(LibraryError):
    """A record ID did not resolve to a record of the expected kind.

    Attributes:
        kind: Record kind ("country", "collection", "album", "stamp").
        record_id: The ID that was looked up.
    """

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"No {kind} with id {record_id!r}")


class ConfigError(HingedError):
    """A config file exists but could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read config {path}: {reason}")


class CSVImportError(HingedError):
    """A CSV file could not be imported."""

    pass


class BackupError(HingedError):
    """Base class for backup and restore errors."""

    pass


class InvalidBackupError(BackupError):
    """The backup file is corrupted or not a Hinged backup."""

    pass


class UnsupportedBackupVersionError(BackupError):
    """The backup was written by a newer version of Hinged."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unsupported backup version {version}")


def get_friendly_message(error: Exception) -> str:
    """Turn an exception into a message suitable for end users.

    Args:
        error: The exception to describe.

    Returns:
        A short, human readable explanation.
    """
    if isinstance(error, UnsupportedBackupVersionError):
        return (
            "This backup file was created with a newer version of Hinged "
            f"(backup version {error.version}). Please update Hinged to import this file."
        )
    if isinstance(error, InvalidBackupError):
        return "The backup file is corrupted or invalid."
    if isinstance(error, LibraryLoadError):
        return f"The library file {error.path} could not be read ({error.reason})."
    if isinstance(error, RecordNotFoundError):
        return f"No {error.kind} found with id {error.record_id}."
    if isinstance(error, HingedError):
        return str(error)
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error.filename}"
    if isinstance(error, PermissionError):
        return f"Permission denied: {error.filename}"
    if isinstance(error, OSError):
        return f"File system error: {error.strerror or error}"
    return f"Unexpected error: {error}"


def _get_log_file_path() -> Path:
    """Get the path to the error log file (in exe folder or cwd)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / "hinged_errors.log"
    return Path.cwd() / "hinged_errors.log"


def log_error(error: Exception | str, context: str = "") -> None:
    """Append an error to the log file.

    Args:
        error: The error (exception or string).
        context: Optional context about where the error occurred.
    """
    try:
        log_path = _get_log_file_path()
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        if isinstance(error, str):
            message = error
            error_type = "Message"
        else:
            message = str(error)
            error_type = type(error).__name__

        log_entry = f"[{timestamp}] {error_type}"
        if context:
            log_entry += f" ({context})"
        log_entry += f": {message}\n"

        with open(log_path, "a", encoding="utf-8") as f:
            f.write(log_entry)
    except OSError:
        # Don't let logging errors crash the app
        pass
