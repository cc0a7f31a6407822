class MeliMouError(Exception):
    """Base exception for the MeliMou application."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthenticatedError(MeliMouError):
    """Raised when a protected operation is called without a session."""

    status_code = 401


class UnauthorizedError(MeliMouError):
    """Raised when the session does not own or may not touch the target resource."""

    status_code = 403


class NotFoundError(MeliMouError):
    """Raised when a referenced plan, lesson, resource, etc. does not exist."""

    status_code = 404


class ConflictError(MeliMouError):
    """Raised when a write collides with existing state (duplicate, lock held)."""

    status_code = 409


class ValidationError(MeliMouError):
    """Raised when required input is missing or malformed."""

    status_code = 422

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class OnboardingStepError(ValidationError):
    """Raised on an illegal onboarding wizard transition."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(message, fields=[step])
