"""Download every attachment of the messages under a label."""

from pathlib import Path

from gmail_downloader.exceptions import MessageListingError, StorageError
from gmail_downloader.models import DownloadReport
from gmail_downloader.services.attachment_extractor import extract_attachments
from gmail_downloader.services.file_writer import (
    DEFAULT_FILE_MODE,
    destination_path,
    write_attachment,
)
from gmail_downloader.services.gmail_client import MailClient
from gmail_downloader.services.label_resolver import resolve_label_id
from gmail_downloader.services.message_lister import MAX_RESULTS, list_messages_by_label
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)


class AttachmentDownloader:
    """
    Single linear pass: resolve label, list messages, extract and write.

    Any error ends the run. Partial message listings are reported in the
    log and then propagated like every other failure.
    """

    def __init__(
        self,
        client: MailClient,
        file_mode: int = DEFAULT_FILE_MODE,
        max_results: int = MAX_RESULTS,
    ) -> None:
        self.client = client
        self.file_mode = file_mode
        self.max_results = max_results

    def download(self, label: str, directory: Path, overwrite: bool = True) -> DownloadReport:
        """
        Download attachments of all messages labelled ``label`` into ``directory``.

        Args:
            label: Label display name, matched exactly
            directory: Existing target directory
            overwrite: Replace files that already exist

        Returns:
            DownloadReport listing written and skipped paths
        """
        if not directory.is_dir():
            raise StorageError(f"Target directory {directory} does not exist")

        label_id = resolve_label_id(self.client, label)
        report = DownloadReport(label=label, label_id=label_id)

        try:
            messages = list_messages_by_label(self.client, label_id, self.max_results)
        except MessageListingError as e:
            logger.error(
                "Message listing stopped early",
                label=label,
                fetched=len(e.partial),
                message_id=e.message_id,
            )
            raise

        for message in messages:
            attachments = extract_attachments(self.client, message, directory, overwrite)
            for attachment in attachments:
                path = destination_path(directory, attachment.filename)
                if attachment.skip:
                    logger.info(
                        "Overwrite disabled, attachment already present, not overwritten",
                        path=str(path),
                    )
                    report.skipped.append(path)
                    continue
                write_attachment(path, attachment, self.file_mode)
                report.written.append(path)
            report.messages += 1

        logger.info(
            "Download complete",
            label=label,
            messages=report.messages,
            written=len(report.written),
            skipped=len(report.skipped),
        )
        return report
