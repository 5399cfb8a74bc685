"""
Typed failures raised by the services and rendered by the API boundary.

Every error carries a stable machine-readable ``code``. ``EMPLOYER_NOT_VERIFIED``
is kept separate from generic validation so a client can tell "fix your form"
apart from "wait for verification".
"""


class DomainError(Exception):
    code = "ERROR"
    status_code = 400

    def __init__(self, detail: str, **extra):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.detail, **self.extra}


class ValidationError(DomainError):
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthorizationError(DomainError):
    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(DomainError):
    code = "CONFLICT"
    status_code = 409


class StateError(DomainError):
    code = "INVALID_STATE"
    status_code = 409


class EmployerNotVerifiedError(StateError):
    code = "EMPLOYER_NOT_VERIFIED"
    status_code = 403

    def __init__(self, detail: str, verification_status: str):
        super().__init__(detail, verification_status=verification_status)
        self.verification_status = verification_status


class MessagingNotAllowedError(AuthorizationError):
    code = "MESSAGING_NOT_ALLOWED"


class DependencyError(DomainError):
    """A notification write failed. Producers log and drop it."""

    code = "DEPENDENCY_ERROR"
    status_code = 502
