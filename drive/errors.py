"""Error taxonomy for the storage core.

Every failure the core surfaces is one of these types. Each carries a stable
``code`` that the HTTP layer maps to a status code; the core itself never
deals in status codes.
"""

from __future__ import annotations


class DriveError(Exception):
    """Base class for all storage-core errors."""

    code = "internal"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class NotFoundError(DriveError):
    """Object does not exist or is not owned by the caller."""

    code = "not_found"


class ContentNotFoundError(DriveError):
    """Metadata exists but the stored bytes are missing."""

    code = "content_not_found"


class InvalidArgumentError(DriveError):
    """Empty or missing required input."""

    code = "invalid_argument"


class WouldCreateCycleError(InvalidArgumentError):
    """Placing the folder there would make it its own ancestor."""

    code = "would_create_cycle"


class UnauthorizedError(DriveError):
    """Missing, invalid, expired or mismatched credential or token."""

    code = "unauthorized"


class AlreadyExistsError(DriveError):
    """A unique identity is already taken."""

    code = "already_exists"


class InternalError(DriveError):
    """Storage-layer or otherwise unexpected failure."""

    code = "internal"
