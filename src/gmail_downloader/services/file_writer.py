"""Persist decoded attachments."""

import os
from pathlib import Path

from gmail_downloader.exceptions import StorageError
from gmail_downloader.models import Attachment
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FILE_MODE = 0o644


def destination_path(directory: Path, filename: str) -> Path:
    """
    Where an attachment named ``filename`` is stored under ``directory``.

    Only the final path component of the MIME filename is kept, so absolute
    names and ``..`` segments stay inside ``directory``.

    Raises:
        StorageError: The filename has no usable final component
    """
    name = Path(filename).name
    if name in ("", ".", ".."):
        raise StorageError(f"Attachment filename {filename!r} is not a file name")
    return directory / name


def write_attachment(path: Path, attachment: Attachment, mode: int = DEFAULT_FILE_MODE) -> Path:
    """
    Write attachment content to ``path``, creating or truncating it.

    Args:
        path: Destination file
        attachment: Resolved attachment with content
        mode: Permission bits of the written file

    Returns:
        Path of the written file
    """
    if attachment.skip or attachment.content is None:
        raise ValueError(f"Attachment {attachment.filename} has no content to write")

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as f:
            f.write(attachment.content)
        os.chmod(path, mode)
    except OSError as e:
        raise StorageError(f"Unable to write {path}: {e}") from e

    logger.info(
        "Attachment written",
        filename=attachment.filename,
        path=str(path),
        size_bytes=attachment.size_bytes,
    )
    return path
