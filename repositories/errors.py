"""
Repository errors.

Raised for malformed input or missing rows; the API maps them to 4xx.
"""


class ReportingError(Exception):
    """Base class for request-level errors."""
    pass


class InvalidIdentifierError(ReportingError, ValueError):
    """An id could not be parsed as a UUID."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class PostNotFoundError(ReportingError, LookupError):
    """No post with the given id."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id}")


class UserNotFoundError(ReportingError, LookupError):
    """No user with the given id or email."""

    def __init__(self, user_ref: str):
        self.user_ref = user_ref
        super().__init__(f"User not found: {user_ref}")


class InvalidStatusError(ReportingError, ValueError):
    """Status is not one of the known post statuses."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Invalid status: {status!r}")
