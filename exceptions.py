class LibraryError(Exception):
    """Base exception for library lending errors."""


class NotFoundError(LibraryError):
    """No record matches the given ISBN or email."""

    def __init__(self, entity: str, key: str = ""):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found")


class InvalidArgumentError(LibraryError, ValueError):
    """Unrecognized search/report type or otherwise malformed input."""
