"""Error taxonomy for charset conversion.

Only resource, catalog and I/O problems are errors. Characters that cannot be
decoded or encoded are repaired with a replacement unit and never raise.
"""

from typing import Optional


class CharsetError(Exception):
    """Base exception for all charset conversion errors."""


class NotFoundError(CharsetError, LookupError):
    """Raised when a charset name or alias is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"charset not found: {name!r}")
        self.name = name


class BadClassError(CharsetError):
    """Raised when a catalog entry names a codec class that is not registered."""

    def __init__(
        self,
        class_name: str,
        charset: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        if message is None:
            if charset is None:
                message = f"unknown codec class: {class_name!r}"
            else:
                message = (
                    f"charset {charset!r} uses unknown codec class {class_name!r}"
                )
        super().__init__(message)
        self.class_name = class_name
        self.charset = charset


class DirectionError(BadClassError):
    """Raised when a codec class cannot translate in the requested direction."""

    def __init__(self, class_name: str, direction: str) -> None:
        super().__init__(
            class_name,
            message=f"codec class {class_name!r} has no {direction} direction",
        )
        self.direction = direction


class ResourceError(CharsetError):
    """Raised when a backing resource is missing, unreadable or malformed."""

    def __init__(self, message: str, resource: Optional[str] = None) -> None:
        super().__init__(message)
        self.resource = resource


class ResourceNotFoundError(ResourceError):
    """Raised when no resource exists under the requested name."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"resource not found: {resource!r}", resource)


class ShortWriteError(CharsetError):
    """Raised when a sink accepts fewer bytes than it was given."""

    def __init__(self, written: int, expected: int) -> None:
        super().__init__(f"short write: sink accepted {written} of {expected} bytes")
        self.written = written
        self.expected = expected
