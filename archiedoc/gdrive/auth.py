"""
Google Drive authorization for reading a project's ArchieML document.

Two ways in:
- An OAuth2 client (clientId/clientSecret/redirectUrl). The first run opens
  the consent page and waits for the user to paste the `code=` value; the
  resulting token is cached on disk and reused afterwards.
- A service account key file, for CI and other non-interactive runs.
"""

from pathlib import Path
from typing import Callable, Optional

import click
from oauth2client.client import Credentials, FlowExchangeError, OAuth2WebServerFlow
from oauth2client.file import Storage
from oauth2client.service_account import ServiceAccountCredentials

from ..config import SCOPES, ArchieSettings, get_logger
from ..errors import AuthorizationError, OutputWriteError

logger = get_logger(__name__)

CODE_PROMPT = 'Enter the code in the URL param "code=" here'


def prompt_for_code(auth_url: str) -> str:
    """Open the consent page and block until the user pastes the code."""
    try:
        click.launch(auth_url)
    except Exception as e:
        logger.warning(f"Could not open a browser: {e}")
    return click.prompt(CODE_PROMPT, type=str).strip()


class GoogleDocAuthorizer:
    """Produces oauth2client credentials that can read the document."""

    def __init__(self, settings: ArchieSettings, token_file: Optional[Path] = None,
                 code_prompt: Callable[[str], str] = prompt_for_code):
        """
        Initialize the authorizer.

        Args:
            settings: Project settings holding the OAuth2 client or service account
            token_file: Token cache path, defaults to settings.token_file
            code_prompt: Called with the consent URL, returns the pasted code
        """
        self.settings = settings
        self.token_file = Path(token_file or settings.token_file)
        self.code_prompt = code_prompt

    def authorize(self) -> Credentials:
        """Return credentials, running the interactive flow only when needed."""
        if self.settings.uses_service_account:
            return self._load_service_account()

        credentials = self.load_token()
        if credentials is not None:
            logger.info(f"Using stored token from {self.token_file}")
            return credentials

        credentials = self._get_new_token()
        self.store_token(credentials)
        return credentials

    def _load_service_account(self) -> Credentials:
        key_file = self.settings.service_account_file
        try:
            credentials = ServiceAccountCredentials.from_json_keyfile_name(key_file, scopes=SCOPES)
        except (OSError, ValueError, KeyError) as e:
            raise AuthorizationError(
                f"Could not load service account key {key_file}: {e}",
                doc_id=self.settings.doc_id,
                recovery_suggestion="Check serviceAccountFile points at a JSON key"
            ) from e
        logger.info("Authenticated with service account credentials")
        return credentials

    def load_token(self) -> Optional[Credentials]:
        """Read the cached token, or None if it is missing, unreadable or revoked."""
        if not self.token_file.exists():
            return None
        try:
            credentials = Storage(str(self.token_file)).get()
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable token cache {self.token_file}: {e}")
            return None
        if credentials is None or credentials.invalid:
            logger.warning(f"Stored token in {self.token_file} is not usable")
            return None
        return credentials

    def build_flow(self) -> OAuth2WebServerFlow:
        return OAuth2WebServerFlow(
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            scope=SCOPES,
            redirect_uri=self.settings.redirect_url,
            access_type='offline',
            prompt='consent',
        )

    def _get_new_token(self) -> Credentials:
        flow = self.build_flow()
        auth_url = flow.step1_get_authorize_url()
        logger.info(f"Authorize this app by visiting this url: {auth_url}")
        code = self.code_prompt(auth_url)
        if not code:
            raise AuthorizationError("No authorization code entered", doc_id=self.settings.doc_id)
        try:
            credentials = flow.step2_exchange(code)
        except FlowExchangeError as e:
            raise AuthorizationError(
                f"Error while trying to retrieve access token: {e}",
                doc_id=self.settings.doc_id,
                recovery_suggestion="Run `archiedoc auth` again and paste a fresh code"
            ) from e
        return credentials

    def store_token(self, credentials: Credentials):
        """Write the token cache, creating its directory if needed."""
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            Storage(str(self.token_file)).put(credentials)
        except OSError as e:
            raise OutputWriteError(f"Could not store token to {self.token_file}: {e}") from e
        logger.info(f"Token stored to {self.token_file}")
