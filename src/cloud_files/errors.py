# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/errors.py

"""Domain errors raised by cloud_files operations."""


class CloudFilesError(Exception):
    """Base exception for cloud_files operations."""
    pass


class NotFoundError(CloudFilesError):
    """Raised when the server reports a path as missing (HTTP 404)."""

    def __init__(self, path: str):
        super().__init__(f"Path not found: {path}")
        self.path = path


class ForbiddenError(CloudFilesError):
    """Raised when the server refuses access to a path (HTTP 403)."""

    def __init__(self, path: str):
        super().__init__(f"Access forbidden: {path}")
        self.path = path


class NotReadyError(CloudFilesError):
    """Raised when a folder listing comes back malformed."""

    def __init__(self, message: str = "Remote resource is not ready to be listed"):
        super().__init__(message)


class NotConnectedError(CloudFilesError):
    """Raised when an operation is issued on a closed transport."""

    def __init__(self, message: str = "Not connected: transport is closed"):
        super().__init__(message)
