class ApiError(Exception):
    """Base for failures that are turned into a JSON error envelope."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None, errors=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors

    def to_dict(self):
        body = {"status": "error"}
        if self.errors:
            body["errors"] = self.errors
        else:
            body["message"] = self.message
        return body


class BadRequest(ApiError):
    status_code = 400
    message = "Bad request"


class ValidationError(BadRequest):
    message = "Validation failed"

    def __init__(self, errors):
        super().__init__(errors=dict(errors))


class AuthenticationError(ApiError):
    status_code = 401
    message = "Invalid credentials"


class Unauthorized(ApiError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"
