"""Pytest configuration and fixtures for all tests."""

import base64
import os
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

# Set test environment variables before importing settings
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ.pop("GDOWN_HOME", None)

from gmail_downloader.config.settings import get_settings  # noqa: E402
from gmail_downloader.exceptions import TransientAPIError  # noqa: E402


def encode(content: bytes) -> str:
    """Encode bytes the way Gmail returns attachment data."""
    return base64.urlsafe_b64encode(content).decode("ascii")


class FakeMailClient:
    """In-memory MailClient recording every call."""

    def __init__(
        self,
        labels: Optional[list[dict[str, Any]]] = None,
        messages: Optional[dict[str, dict[str, Any]]] = None,
        attachments: Optional[dict[tuple[str, str], str]] = None,
    ) -> None:
        self.labels = labels or []
        self.messages = messages or {}
        self.attachments = attachments or {}
        self.failing_messages: set[str] = set()
        self.failing_attachments: set[tuple[str, str]] = set()
        self.calls: list[tuple] = []

    def list_labels(self) -> list[dict[str, Any]]:
        self.calls.append(("list_labels",))
        return list(self.labels)

    def list_message_ids(self, label_id: str, max_results: int) -> list[str]:
        self.calls.append(("list_message_ids", label_id, max_results))
        ids = [
            message_id
            for message_id, message in self.messages.items()
            if label_id in message.get("labelIds", [])
        ]
        return ids[:max_results]

    def get_message(self, message_id: str) -> dict[str, Any]:
        self.calls.append(("get_message", message_id))
        if message_id in self.failing_messages:
            raise TransientAPIError("messages.get", f"HttpError 500 for {message_id}")
        return self.messages[message_id]

    def get_attachment_data(self, message_id: str, attachment_id: str) -> str:
        self.calls.append(("get_attachment_data", message_id, attachment_id))
        if (message_id, attachment_id) in self.failing_attachments:
            raise TransientAPIError("attachments.get", f"HttpError 500 for {attachment_id}")
        return self.attachments[(message_id, attachment_id)]

    def attachment_fetches(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "get_attachment_data"]


def make_message(
    message_id: str,
    parts: Optional[list[dict[str, Any]]] = None,
    label_ids: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Full-format Gmail message with the given top-level parts."""
    return {
        "id": message_id,
        "labelIds": label_ids or [],
        "payload": {
            "mimeType": "multipart/mixed",
            "headers": [{"name": "Subject", "value": f"Message {message_id}"}],
            "parts": [
                {"partId": "0", "mimeType": "text/plain", "filename": "", "body": {"size": 5, "data": "aGVsbG8="}},
                *(parts or []),
            ],
        },
    }


def attachment_part(filename: str, attachment_id: str) -> dict[str, Any]:
    return {
        "mimeType": "application/octet-stream",
        "filename": filename,
        "body": {"attachmentId": attachment_id, "size": 42},
    }


@pytest.fixture
def fake_client() -> FakeMailClient:
    """Account with an Invoices label holding two messages."""
    return FakeMailClient(
        labels=[
            {"id": "INBOX", "name": "INBOX", "type": "system"},
            {"id": "L1", "name": "Invoices", "type": "user"},
            {"id": "L2", "name": "Work", "type": "user"},
        ],
        messages={
            "msg_001": make_message("msg_001", [attachment_part("a.pdf", "att_a")], ["L1"]),
            "msg_002": make_message("msg_002", [attachment_part("b.pdf", "att_b")], ["L1"]),
        },
        attachments={
            ("msg_001", "att_a"): encode(b"%PDF-1.4 invoice a"),
            ("msg_002", "att_b"): encode(b"%PDF-1.4 invoice b"),
        },
    )


@pytest.fixture
def client_config() -> dict[str, Any]:
    """Desktop OAuth client as downloaded from Google Cloud Console."""
    return {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "project_id": "test-project",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "client_secret": "test-client-secret",
            "redirect_uris": ["http://localhost"],
        }
    }


@pytest.fixture
def mock_gmail_service() -> MagicMock:
    """googleapiclient Gmail resource with chained calls mocked."""
    service = MagicMock()
    service.users().labels().list().execute.return_value = {"labels": []}
    service.users().messages().list().execute.return_value = {"messages": []}
    return service


@pytest.fixture
def make_client():
    return FakeMailClient


@pytest.fixture
def encode_data():
    return encode


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def part_factory():
    return attachment_part


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings re-read from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
