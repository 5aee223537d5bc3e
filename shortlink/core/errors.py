"""Error taxonomy shared by services and routes; rendered as {"error": message}."""


class ShortlinkError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers
        super().__init__(message)


class ValidationError(ShortlinkError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(ShortlinkError):
    """Missing bearer token (401) or invalid/expired token (403)."""

    status_code = 401


class AuthorizationError(ShortlinkError):
    """Authenticated, but role or ownership does not allow the action."""

    status_code = 403


class NotFoundError(ShortlinkError):
    status_code = 404


class ConflictError(ShortlinkError):
    """Uniqueness violation (duplicate email, exhausted short-code retries)."""

    status_code = 400


class RateLimitError(ShortlinkError):
    status_code = 429
