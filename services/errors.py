"""
services/errors.py

Named error conditions raised by the store and the action handlers.
Every one of them is caught at the dispatch boundary and turned into
`{"status": "error", "message": ...}`.
"""


class SchoolError(Exception):
    """Base class for business / store errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(SchoolError):
    """Malformed request body"""
    pass


class UnknownActionError(SchoolError):
    """Action name not present in the dispatch table"""

    def __init__(self, action):
        super().__init__(f"Unknown action: {action}")
        self.action = action


class ValidationFailedError(SchoolError):
    """Payload rejected (duplicate username, bad field values ...)"""
    pass


class MissingColumnError(SchoolError):
    """A sheet lacks a column the operation needs"""
    pass


class SheetNotFoundError(SchoolError):
    def __init__(self, sheet_name: str):
        super().__init__(f"Sheet '{sheet_name}' not found.")
        self.sheet_name = sheet_name


class NotFoundError(SchoolError):
    """Row with the requested id does not exist"""
    pass


class AccountStateError(SchoolError):
    """Login matched an account that is pending or disabled"""
    pass


class LockTimeoutError(SchoolError):
    def __init__(self, timeout: float):
        super().__init__(
            f"Could not acquire the store lock within {timeout:g} seconds. Please try again."
        )
        self.timeout = timeout
