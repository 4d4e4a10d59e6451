"""Map label display names to Gmail label ids."""

from gmail_downloader.exceptions import LabelNotFoundError
from gmail_downloader.models import Label
from gmail_downloader.services.gmail_client import MailClient
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)


def list_labels(client: MailClient) -> list[Label]:
    """All labels of the authenticated user, sorted by name."""
    labels = [Label(**label) for label in client.list_labels()]
    return sorted(labels, key=lambda label: label.name)


def resolve_label_id(client: MailClient, name: str) -> str:
    """
    Find the id of the label whose display name is exactly ``name``.

    Matching is case-sensitive; the first match wins.

    Raises:
        LabelNotFoundError: No label has that name
    """
    for label in client.list_labels():
        if label.get("name") == name:
            logger.info("Label resolved", label=name, label_id=label["id"])
            return label["id"]

    raise LabelNotFoundError(name)
