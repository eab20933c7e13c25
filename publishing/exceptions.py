"""
Failure taxonomy for publishing operations.

Each error carries the result ``kind`` reported to clients and the HTTP
status the transport layer maps it to. Services raise them; the ``api_view``
decorator turns them into ``Result`` records.
"""


class ServiceError(Exception):
    kind = "Error"
    status = 400
    default_message = "Request failed"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class NotFound(ServiceError):
    kind = "NotFound"
    status = 404
    default_message = "Not found"


class Forbidden(ServiceError):
    kind = "Forbidden"
    status = 403
    default_message = "You do not have permission to modify this resource"


class Unauthorized(ServiceError):
    kind = "Unauthorized"
    status = 401
    default_message = "Authentication required"


class InvalidInput(ServiceError):
    kind = "InvalidInput"
    status = 400
    default_message = "Invalid input"

    @classmethod
    def from_form(cls, form):
        return cls("Invalid input", errors={
            field: [str(message) for message in messages]
            for field, messages in form.errors.items()
        })


class InvalidOperation(ServiceError):
    kind = "InvalidOperation"
    status = 400
    default_message = "Operation not allowed"


class Conflict(ServiceError):
    kind = "Conflict"
    status = 409
    default_message = "Resource already exists"
