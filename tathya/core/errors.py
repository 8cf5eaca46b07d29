"""Error taxonomy shared by the API, the services and the client."""


class TathyaError(Exception):
    """Base error. Rendered by the API as ``{"detail": ...}`` with ``status_code``."""

    status_code: int = 400

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TathyaError):
    """Missing or empty required field."""

    status_code = 400


class UnauthenticatedError(TathyaError):
    """No token, or a token that does not resolve to a user."""

    status_code = 401


class UnauthorizedError(TathyaError):
    """Authenticated, but not permitted to act on the target."""

    status_code = 403


class NotFoundError(TathyaError):
    """Post, comment, reply or other id does not resolve."""

    status_code = 404
