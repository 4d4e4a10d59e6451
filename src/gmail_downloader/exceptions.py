"""Errors raised by the downloader.

Every error is fatal to a run: it propagates to the command line entry
point, which logs it and exits non-zero. The one deliberate exception is a
missing or unreadable token cache, which is treated as a cache miss.
"""

from typing import Any


class DownloaderError(Exception):
    """Base class for all downloader errors."""

    pass


class ConfigurationError(DownloaderError):
    """Credentials file missing, unreadable or not a valid OAuth client config."""

    pass


class AuthorizationError(DownloaderError):
    """Interactive authorization or token exchange failed."""

    pass


class LabelNotFoundError(DownloaderError):
    """No label has the requested display name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Label {name} not found")
        self.name = name


class TransientAPIError(DownloaderError):
    """A Gmail API call failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class MessageListingError(TransientAPIError):
    """Fetching a listed message failed.

    ``partial`` holds the full messages fetched before the failure.
    """

    def __init__(
        self, message_id: str, message: str, partial: list[dict[str, Any]]
    ) -> None:
        super().__init__("messages.get", f"message {message_id}: {message}")
        self.message_id = message_id
        self.partial = partial


class AttachmentDecodeError(DownloaderError):
    """Attachment data is not valid base64url."""

    pass


class StorageError(DownloaderError):
    """Local file read or write failed."""

    pass
