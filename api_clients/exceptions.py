class SnapshotError(Exception):
    """Base exception for snapshot pipeline errors."""
    pass


class FetchError(SnapshotError):
    """Raised when an upstream API cannot be reached or returns a non-JSON body."""
    pass


class ShapeError(SnapshotError):
    """Raised when an upstream response is missing a required top-level field."""
    pass


class PublishError(SnapshotError):
    """Raised when committing, pushing or uploading to the remote store fails."""
    pass
