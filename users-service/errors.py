"""
Error taxonomy of the users service.

Client errors (MissingField, InvalidFormat, NotFound) are answered by the
handler that detects them. InternalFault is left to the boundary layer.
"""


class UserServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(UserServiceError):
    status_code = 400

    def __init__(self, field: str):
        super().__init__(f"{field} required")
        self.field = field


class InvalidFormat(UserServiceError):
    status_code = 400

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule


class NotFound(UserServiceError):
    status_code = 404

    def __init__(self, resource_id: str):
        super().__init__("User not found")
        self.resource_id = resource_id


class InternalFault(UserServiceError):
    status_code = 500
