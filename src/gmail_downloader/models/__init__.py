"""Data models for the Gmail attachment downloader."""

from .attachment import Attachment, DownloadReport
from .label import Label

__all__ = [
    "Attachment",
    "DownloadReport",
    "Label",
]
