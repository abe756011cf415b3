"""Error taxonomy for activity retrieval and parsing."""
from typing import Optional


class ActivityError(RuntimeError):
    """Base class for errors that abort an activity run."""

    kind = 'activity_error'


class UserNotFoundError(ActivityError):
    """Raised when the origin reports that the user does not exist."""

    kind = 'user_not_found'

    def __init__(self, username: str):
        """
        Initialize with the username that was looked up.

        Args:
            username: GitHub username that the origin did not recognize
        """
        self.username = username
        super().__init__(f"user not found: {username}")


class TransportError(ActivityError):
    """Raised when the origin or the cache store cannot be reached."""

    kind = 'transport_failure'

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize with a message and an optional HTTP status code.

        Args:
            message: Description of the failure
            status_code: HTTP status returned by the origin, if any
        """
        self.status_code = status_code
        super().__init__(message)


class CacheInconsistencyError(ActivityError):
    """Raised when a reachable cache store fails a write or a non-miss read."""

    kind = 'cache_inconsistency'


class MalformedResponseError(ActivityError):
    """Raised when a payload cannot be parsed into a list of events."""

    kind = 'malformed_response'
