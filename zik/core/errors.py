"""
Exception hierarchy for zik.

Every error surfaced to the user derives from ZikError; the CLI prints
``str(err)`` and exits with a non-zero status.
"""

from pathlib import Path


class ZikError(Exception):
    """Base class for all zik errors."""


# Setup errors


class SetupError(ZikError):
    """Raised when the application environment cannot be prepared."""


class DataDirectoryNotFoundError(SetupError):
    def __init__(self) -> None:
        super().__init__("data folder for Zik not found")


class DatabaseOpenError(SetupError):
    def __init__(self, db_path: Path, reason: Exception):
        self.db_path = db_path
        super().__init__(
            f"SQLite error while opening database \"{db_path}\": {reason}"
        )


# Config errors


class ConfigError(ZikError):
    """Raised by the config command."""


class InvalidKeyError(ConfigError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key name `{key}` is invalid")


class NoValueError(ConfigError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"no value for key name `{key}`")


class LibraryPathError(ConfigError):
    """The value given for `library` cannot be used."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(f"could not resolve library path: {detail}")


class LibraryPathDoesNotExistError(LibraryPathError):
    def __init__(self, path: Path):
        super().__init__(path, f'path "{path}" does not exist')


class LibraryPathNotADirectoryError(LibraryPathError):
    def __init__(self, path: Path):
        super().__init__(path, f'path "{path}" is not a directory')


class LibraryPathUnreadableError(LibraryPathError):
    def __init__(self, path: Path, reason: OSError):
        super().__init__(path, f"unable to access path, err: {reason}")


class InvalidScanParallelismError(ConfigError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f'`scan_parallelism` value "{value}" is invalid')


class ConfigStorageError(ConfigError):
    def __init__(self, reason: Exception):
        self.reason = reason
        super().__init__(f"SQLite error, {reason}")


# Scan errors


class ScanError(ZikError):
    """Raised when a scan aborts; the catalogue is left untouched."""


class LibraryNotConfiguredError(ScanError):
    def __init__(self) -> None:
        super().__init__(
            "library path is not configured, set it with `zik config library <path>`"
        )


class LibraryWalkError(ScanError):
    def __init__(self, reason: OSError):
        self.reason = reason
        super().__init__(f"unable to walk library, err: {reason}")


class MetadataReadError(ScanError):
    def __init__(self, path: Path, reason: OSError):
        self.path = path
        self.reason = reason
        super().__init__(
            f'unable to open or read file "{path}", err: {reason}'
        )


class PersistenceError(ScanError):
    def __init__(self, reason: Exception):
        self.reason = reason
        super().__init__(f"SQLite error, {reason}")
