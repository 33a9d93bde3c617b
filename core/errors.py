"""Exception types raised by the directory service and surfaced to view-models."""

from __future__ import annotations


class PhotoBrowserError(Exception):
    """Base class for recoverable application errors."""


class DirectoryReadError(PhotoBrowserError):
    """A directory could not be listed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read directory {path}: {reason}")
        self.path = path
        self.reason = reason


class StartupInfoError(PhotoBrowserError):
    """No usable startup folder could be determined."""


class FolderSelectionCancelled(PhotoBrowserError):
    """The user dismissed the folder picker."""
