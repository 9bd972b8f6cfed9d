class StorageError(Exception):
    """Raised when a snapshot file cannot be read or written."""
    pass
