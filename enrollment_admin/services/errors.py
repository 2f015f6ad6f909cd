class EnrollmentError(Exception):
    """Base class for errors raised by the enrollment services."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EnrollmentError):
    """Malformed or missing input; the operation was not attempted."""

    status_code = 400


class NotFoundError(EnrollmentError):
    status_code = 404


class InvalidTransitionError(EnrollmentError):
    """The request's current status does not allow the operation."""

    status_code = 400


class ConflictError(EnrollmentError):
    """The request changed since it was read (version mismatch)."""

    status_code = 409


class StoreError(EnrollmentError):
    """The database transaction failed and was rolled back."""

    status_code = 500
