"""Error kinds raised by services and gates.

Routes never catch these; the handler registered in ``main`` turns them into
JSON responses carrying ``status_code``.
"""


class SchedulingError(Exception):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(SchedulingError):
    status_code = 400


class AuthError(SchedulingError):
    status_code = 401


class MissingTokenError(AuthError):
    pass


class InvalidTokenError(AuthError):
    pass


class ExpiredTokenError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class RoleMismatchError(AuthError):
    status_code = 403


class PermissionDeniedError(SchedulingError):
    status_code = 403


class NotFoundError(SchedulingError):
    status_code = 404


class ConflictError(SchedulingError):
    status_code = 409


class MailDeliveryError(SchedulingError):
    status_code = 502


class StorageError(SchedulingError):
    status_code = 503
