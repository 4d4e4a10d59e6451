"""Gmail API client bootstrap and the narrow interface the downloader needs."""

import json
from pathlib import Path
from typing import Any, Optional, Protocol

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError

from gmail_downloader.config.settings import GmailConfig
from gmail_downloader.exceptions import AuthorizationError, ConfigurationError, TransientAPIError
from gmail_downloader.services.token_store import FileTokenStore, TokenStore, get_credentials
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)

CLIENT_TYPES = ("installed", "web")


class MailClient(Protocol):
    """Gmail operations consumed by label resolution, listing and extraction."""

    def list_labels(self) -> list[dict[str, Any]]: ...

    def list_message_ids(self, label_id: str, max_results: int) -> list[str]: ...

    def get_message(self, message_id: str) -> dict[str, Any]: ...

    def get_attachment_data(self, message_id: str, attachment_id: str) -> str: ...


class GmailClient:
    """MailClient backed by a googleapiclient Gmail v1 resource."""

    def __init__(self, service: Any, user_id: str = "me") -> None:
        self.service = service
        self.user_id = user_id

    def _execute(self, operation: str, request: Any) -> dict[str, Any]:
        try:
            return request.execute()
        except GoogleAuthError as e:
            # Token refresh during the request failed, e.g. revoked grant
            logger.error("Gmail authorization failed", operation=operation, error=str(e))
            raise AuthorizationError(f"{operation} failed: {e}") from e
        except (GoogleApiError, httplib2.HttpLib2Error, OSError) as e:
            logger.error("Gmail API call failed", operation=operation, error=str(e))
            raise TransientAPIError(operation, str(e)) from e

    def list_labels(self) -> list[dict[str, Any]]:
        results = self._execute(
            "labels.list", self.service.users().labels().list(userId=self.user_id)
        )
        return results.get("labels", [])

    def list_message_ids(self, label_id: str, max_results: int) -> list[str]:
        """Single page of message ids carrying the label, no pagination."""
        results = self._execute(
            "messages.list",
            self.service.users()
            .messages()
            .list(userId=self.user_id, labelIds=[label_id], maxResults=max_results),
        )
        return [msg["id"] for msg in results.get("messages", [])]

    def get_message(self, message_id: str) -> dict[str, Any]:
        return self._execute(
            "messages.get",
            self.service.users()
            .messages()
            .get(userId=self.user_id, id=message_id, format="full"),
        )

    def get_attachment_data(self, message_id: str, attachment_id: str) -> str:
        """Raw base64url attachment data."""
        attachment = self._execute(
            "attachments.get",
            self.service.users()
            .messages()
            .attachments()
            .get(userId=self.user_id, messageId=message_id, id=attachment_id),
        )
        return attachment.get("data", "")


def load_client_config(credentials_path: Path) -> dict[str, Any]:
    """Read and check an OAuth client secrets file."""
    try:
        client_config = json.loads(credentials_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Unable to read client secret file: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Unable to parse client secret file to config: {e}") from e

    if not isinstance(client_config, dict) or not any(t in client_config for t in CLIENT_TYPES):
        raise ConfigurationError(
            "Unable to parse client secret file to config: "
            f"expected an 'installed' or 'web' client in {credentials_path}"
        )

    client_type = next(t for t in CLIENT_TYPES if t in client_config)
    client = client_config[client_type]
    missing = [k for k in ("client_id", "client_secret", "auth_uri", "token_uri") if k not in client]
    if missing:
        raise ConfigurationError(
            f"Unable to parse client secret file to config: missing {', '.join(missing)}"
        )
    return {client_type: client}


def init_service(
    config: GmailConfig,
    token_store: Optional[TokenStore] = None,
) -> GmailClient:
    """
    Build an authorized Gmail client.

    Args:
        config: Gmail settings, locates credentials.json and token.json
        token_store: Token cache, defaults to token.json under the home directory

    Returns:
        GmailClient for the authenticated user
    """
    client_config = load_client_config(config.credentials_path)
    store = token_store or FileTokenStore(config.token_path, config.scopes)
    creds = get_credentials(store, client_config, config.scopes)

    service = build("gmail", "v1", credentials=creds, cache_discovery=False)
    logger.info("Gmail service initialized", home=str(config.home_dir))
    return GmailClient(service, config.user_id)
