"""Domain errors raised by the service layer.

Each subclass carries the HTTP status it maps to; ``main.py`` registers a
single handler that renders them as ``{"detail": message}``.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class InternalError(ServiceError):
    status_code = 500
