"""Error taxonomy shared by services and routers.

Services raise these; ``main`` registers a single handler that turns them
into ``{"detail": message}`` JSON responses with the matching status code.
"""


class CMSError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CMSError):
    status_code = 400
    default_message = "Invalid input"


class DuplicateEntity(CMSError):
    status_code = 400
    default_message = "An entry with these values already exists"


class NotFound(CMSError):
    status_code = 404
    default_message = "Not found"


class InvalidCredentials(CMSError):
    status_code = 401
    default_message = "Invalid credentials."


class PermissionDenied(CMSError):
    status_code = 403
    default_message = "Not authorized to perform this action"


class TokenInvalidOrExpired(CMSError):
    status_code = 400
    default_message = "Password reset token is invalid or has expired."


class UpstreamFailure(CMSError):
    """A media store or notifier call failed and nothing compensated for it."""

    status_code = 500
    default_message = "An upstream service failed"
