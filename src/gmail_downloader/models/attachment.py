"""Attachment models."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, model_validator


class Attachment(BaseModel):
    """Local projection of one MIME part carrying an attachment.

    Built empty while scanning a message, then either filled with the
    decoded content or marked as skipped when the destination already
    exists and overwriting is disabled.
    """

    attachment_id: str
    filename: str
    content: Optional[bytes] = None
    skip: bool = False

    @model_validator(mode="after")
    def check_skip_has_no_content(self) -> "Attachment":
        """A skipped attachment is never fetched."""
        if self.skip and self.content is not None:
            raise ValueError(f"skipped attachment {self.filename} carries content")
        return self

    @property
    def size_bytes(self) -> int:
        return len(self.content) if self.content is not None else 0


class DownloadReport(BaseModel):
    """Outcome of a download run."""

    label: str
    label_id: str
    messages: int = 0
    written: list[Path] = []
    skipped: list[Path] = []
