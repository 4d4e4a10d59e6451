"""Fetch the messages carrying a label."""

from typing import Any

from gmail_downloader.exceptions import MessageListingError, TransientAPIError
from gmail_downloader.services.gmail_client import MailClient
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)

# Gmail's maximum page size; larger labels are truncated, not paginated
MAX_RESULTS = 500


def list_messages_by_label(
    client: MailClient, label_id: str, max_results: int = MAX_RESULTS
) -> list[dict[str, Any]]:
    """
    List up to ``max_results`` messages for a label and fetch each one in full.

    Args:
        client: Gmail client
        label_id: Provider label id
        max_results: Listing cap, at most 500

    Returns:
        Full messages in the order the listing returned them

    Raises:
        TransientAPIError: The listing call failed
        MessageListingError: Fetching a message failed; ``partial`` holds
            the messages fetched before it
    """
    message_ids = client.list_message_ids(label_id, min(max_results, MAX_RESULTS))
    logger.info("Messages listed", label_id=label_id, found_messages=len(message_ids))

    messages: list[dict[str, Any]] = []
    for message_id in message_ids:
        try:
            messages.append(client.get_message(message_id))
        except TransientAPIError as e:
            raise MessageListingError(message_id, str(e), messages) from e

    return messages
