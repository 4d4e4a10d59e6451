"""OAuth token cache and interactive authorization."""

import json
import os
from pathlib import Path
from typing import Any, Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gmail_downloader.exceptions import AuthorizationError, StorageError
from gmail_downloader.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_REDIRECT_URI = "http://localhost"


class TokenStore:
    """Where the OAuth token is cached between runs."""

    def load(self) -> Optional[Credentials]:
        """Return the cached token, or None on any kind of miss."""
        raise NotImplementedError

    def save(self, credentials: Credentials) -> None:
        """Persist the token, replacing any previous one."""
        raise NotImplementedError


class FileTokenStore(TokenStore):
    """Token cached as authorized-user JSON in a file readable by the owner only."""

    def __init__(self, path: Path, scopes: Optional[list[str]] = None) -> None:
        self.path = path
        self.scopes = scopes

    def load(self) -> Optional[Credentials]:
        try:
            info = json.loads(self.path.read_text(encoding="utf-8"))
            creds = Credentials.from_authorized_user_info(info, self.scopes)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            # Unreadable or malformed cache is a miss, the user re-authorizes
            logger.debug("No usable cached token", path=str(self.path), error=str(e))
            return None

        logger.debug("Loaded cached token", path=str(self.path))
        return creds

    def save(self, credentials: Credentials) -> None:
        logger.info("Saving credential file", path=str(self.path))
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(credentials.to_json())
            # O_CREAT mode does not apply to a file that already exists
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise StorageError(f"Unable to cache oauth token: {e}") from e


def acquire_interactive(
    client_config: dict[str, Any],
    scopes: list[str],
    prompt: Optional[Callable[[], str]] = None,
) -> Credentials:
    """
    Run the authorization-code exchange on the console.

    Prints an authorization URL requesting offline access, blocks for the
    code the user pastes back, then exchanges it for a token.

    Args:
        client_config: Parsed credentials.json ("installed" or "web" client)
        scopes: OAuth scopes to request
        prompt: Reads one line of user input, defaults to input()

    Returns:
        Credentials carrying access and refresh tokens
    """
    prompt = prompt or input
    flow = InstalledAppFlow.from_client_config(client_config, scopes)
    client_type = next(iter(client_config))
    redirect_uris = client_config[client_type].get("redirect_uris") or [DEFAULT_REDIRECT_URI]
    flow.redirect_uri = redirect_uris[0]

    auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
    print(
        "Go to the following link in your browser then type the "
        f"authorization code: \n{auth_url}",
        flush=True,
    )

    try:
        auth_code = prompt().strip()
    except (EOFError, KeyboardInterrupt) as e:
        raise AuthorizationError("Unable to read authorization code") from e

    if not auth_code:
        raise AuthorizationError("Unable to read authorization code: empty input")

    try:
        flow.fetch_token(code=auth_code)
    except Exception as e:
        raise AuthorizationError(f"Unable to retrieve token from web: {e}") from e

    logger.info("Authorization successful")
    return flow.credentials


def get_credentials(
    store: TokenStore,
    client_config: dict[str, Any],
    scopes: list[str],
    prompt: Optional[Callable[[], str]] = None,
) -> Credentials:
    """Cached token first, refreshed when expired, interactive exchange otherwise."""
    creds = store.load()

    if creds and creds.valid:
        return creds

    if creds and creds.refresh_token:
        try:
            creds.refresh(Request())
            logger.info("Gmail token refreshed")
            store.save(creds)
            return creds
        except GoogleAuthError as e:
            logger.warning("Failed to refresh Gmail token, reauthorizing", error=str(e))

    creds = acquire_interactive(client_config, scopes, prompt)
    store.save(creds)
    return creds
