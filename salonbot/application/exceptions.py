class StorageError(RuntimeError):
    """Raised when the persistence layer fails (connection loss, constraint or driver errors)."""
    pass


class DeliveryError(RuntimeError):
    """Raised when an outbound channel rejects or fails to deliver a message."""
    pass
