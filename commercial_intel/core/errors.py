"""Error taxonomy shared by services and the HTTP layer."""


class ServiceError(Exception):
    """Base class for caller-visible, non-retried failures."""

    code = "internal"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class Unauthenticated(ServiceError):
    """No verified caller on the request."""
    code = "unauthenticated"
    status_code = 401


class PermissionDenied(ServiceError):
    """Caller's tenant role is not in the allow-set."""
    code = "permission-denied"
    status_code = 403


class InvalidArgument(ServiceError):
    """Required input fields are missing."""
    code = "invalid-argument"
    status_code = 400


class NotFound(ServiceError):
    """Target document does not exist."""
    code = "not-found"
    status_code = 404


class DocumentStoreError(Exception):
    """A document store read or write failed."""
