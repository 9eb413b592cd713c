"""Exception hierarchy for tag-commander."""

from pathlib import Path


class TagCommanderError(Exception):
    """Base exception for all tag-commander errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all tag-commander errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(TagCommanderError):
    """Configuration-related errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Configuration file not found (non-fatal, defaults used)."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Config file not found: {path}")


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Query Errors
class QueryError(TagCommanderError):
    """Search query errors."""

    pass


class QuerySyntaxError(QueryError):
    """Query text does not match the query grammar.

    ``position`` is the 0-based character offset of the offending input.
    Errors at end of input report ``len(query)``.
    """

    def __init__(self, query: str, position: int, reason: str) -> None:
        self.query = query
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid query at position {position}: {reason}")


class UnknownKeyError(QuerySyntaxError):
    """A ``key:value`` term uses a key the query language does not know."""

    def __init__(self, query: str, position: int, key: str) -> None:
        self.key = key
        super().__init__(query, position, f"unknown key '{key}'")


class InvalidTermError(QueryError):
    """A term payload is empty after trimming whitespace."""

    def __init__(self, kind: str, value: str) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} term: {value!r} is empty")


# Index Errors
class IndexDatabaseError(TagCommanderError):
    """Index database errors."""

    pass


class FileNotIndexedError(IndexDatabaseError):
    """File is not part of the index."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not indexed: {path}")


# Scan Errors
class ScanError(TagCommanderError):
    """Directory scanning errors."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot scan {path}: {reason}")


class RootNotADirectoryError(ScanError):
    """Scan root is not a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "not a directory")
