"""Download Gmail attachments by label."""

__version__ = "1.0.0"
