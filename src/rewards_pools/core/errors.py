"""Exceptions raised by rewards pool operations."""


class NoSignerError(PermissionError):
    """Raised when a mutating pool call runs on a connection without a signer."""
