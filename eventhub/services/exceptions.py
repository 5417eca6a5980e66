class ServiceError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Something went wrong."

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"


class ValidationError(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input data."


class DuplicateError(ServiceError):
    status_code = 400
    code = "DUPLICATE"
    default_message = "Duplicate field value entered."


class InvalidTokenError(ServiceError):
    status_code = 400
    code = "INVALID_RESET_TOKEN"
    default_message = "Invalid or expired reset token"


class NotRegisteredError(ServiceError):
    status_code = 400
    code = "NOT_REGISTERED"
    default_message = "You are not registered for this event"


class AuthError(ServiceError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Not authorized"


class ForbiddenError(ServiceError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found."


class MethodNotAllowedError(ServiceError):
    status_code = 405
    code = "METHOD_NOT_ALLOWED"
    default_message = "This method is not allowed for the requested endpoint."


class DeliveryError(ServiceError):
    status_code = 500
    code = "DELIVERY_FAILED"
    default_message = "Failed to send password reset email"


class InternalError(ServiceError):
    pass
