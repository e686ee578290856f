"""
Keyward error taxonomy.

Every failure that a caller is expected to act on derives from KeywardError.
Adapters translate library exceptions (httpx, OS errors) into one of these
with ``raise ... from exc`` so the original cause stays attached.
"""

from __future__ import annotations


class KeywardError(Exception):
    """Base exception for all Keyward errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | {self.details}"
        return self.message


class MappingFileError(KeywardError):
    """The declarative mapping file could not be read or validated."""


class UnknownProviderError(KeywardError):
    """No registered provider matches the name (or its kind alias)."""

    def __init__(self, name: str, kind: str = ""):
        details = {"provider": name}
        if kind:
            details["kind"] = kind
        super().__init__(f"provider '{name}' does not exist", details)
        self.name = name
        self.kind = kind


class UnresolvedReferenceError(KeywardError):
    """A location still holds a {{placeholder}} after resolution."""

    def __init__(self, path: str, provider: str = ""):
        super().__init__(
            f"unresolved placeholder in path '{path}'",
            {"provider": provider} if provider else None,
        )
        self.path = path
        self.provider = provider


class BackendUnavailableError(KeywardError):
    """Connectivity, permission, or malformed-response failure from a backend."""


class SecretNotFoundError(KeywardError):
    """A named key does not exist in the backend."""


class UnsupportedOperationError(KeywardError):
    """The backend does not implement the requested operation."""

    def __init__(self, provider: str, operation: str):
        super().__init__(f"provider '{provider}' does not implement {operation}")
        self.provider = provider
        self.operation = operation


class LineTooLongError(KeywardError):
    """A streamed line exceeded the configured buffer limit."""

    def __init__(self, limit: int):
        super().__init__(f"line exceeds maximum length of {limit} bytes")
        self.limit = limit
