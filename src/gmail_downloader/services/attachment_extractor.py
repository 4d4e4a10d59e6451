"""Find attachments in a message and fetch the ones that need downloading.

Extraction is two explicit steps: scanning the MIME parts never touches the
network, and resolving checks the destination before fetching so an
attachment that will be skipped costs no API call.
"""

import base64
import binascii
from pathlib import Path
from typing import Any

from gmail_downloader.exceptions import AttachmentDecodeError
from gmail_downloader.models import Attachment
from gmail_downloader.services.file_writer import destination_path
from gmail_downloader.services.gmail_client import MailClient
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)


def decode_attachment(data: str) -> bytes:
    """Decode base64url attachment data, padded or not."""
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentDecodeError(f"Invalid attachment data: {e}") from e


def scan_attachments(message: dict[str, Any]) -> list[Attachment]:
    """Attachments among the top-level parts of a message, content not fetched."""
    payload = message.get("payload")
    if not payload:
        return []

    attachments = []
    for part in payload.get("parts") or []:
        attachment_id = (part.get("body") or {}).get("attachmentId")
        if attachment_id:
            filename = part.get("filename", "")
            logger.info("Attachment found", message_id=message.get("id"), filename=filename)
            attachments.append(Attachment(attachment_id=attachment_id, filename=filename))
    return attachments


def resolve_attachments(
    client: MailClient,
    message_id: str,
    attachments: list[Attachment],
    directory: Path,
    overwrite: bool = True,
) -> list[Attachment]:
    """
    Fetch and decode attachment content, or mark it skipped.

    An attachment is skipped when its destination under ``directory`` exists and
    ``overwrite`` is False. Any fetch or decode failure aborts the whole
    message.
    """
    resolved = []
    for attachment in attachments:
        destination = destination_path(directory, attachment.filename)
        if destination.exists() and not overwrite:
            resolved.append(attachment.model_copy(update={"skip": True, "content": None}))
            continue

        data = client.get_attachment_data(message_id, attachment.attachment_id)
        content = decode_attachment(data)
        resolved.append(attachment.model_copy(update={"content": content, "skip": False}))

    return resolved


def extract_attachments(
    client: MailClient,
    message: dict[str, Any],
    directory: Path,
    overwrite: bool = True,
) -> list[Attachment]:
    """Scan a message for attachments, then resolve them against ``directory``."""
    attachments = scan_attachments(message)
    if not attachments:
        return []
    return resolve_attachments(client, message["id"], attachments, directory, overwrite)
