"""
Google Drive v2 access for the HTML export of a document.
"""

from typing import Any, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import HTML_MIME_TYPE, get_logger
from ..errors import DocumentFetchError

logger = get_logger(__name__)


class GoogleDocFetcher:
    """Fetches the HTML export of a Google Doc with authorized credentials."""

    def __init__(self, credentials: Any, http: Optional[httplib2.Http] = None):
        """
        Args:
            credentials: oauth2client credentials from GoogleDocAuthorizer
            http: Pre-authorized transport, built from the credentials if omitted
        """
        self.credentials = credentials
        self.http = http or credentials.authorize(httplib2.Http())
        self._service = None

    @property
    def service(self):
        if self._service is None:
            self._service = build('drive', 'v2', http=self.http, cache_discovery=False)
        return self._service

    def get_export_link(self, doc_id: str) -> str:
        """Look up the document and return its text/html export link."""
        try:
            doc = self.service.files().get(fileId=doc_id).execute()
        except HttpError as e:
            raise DocumentFetchError(f"Error accessing gdoc: {e}", doc_id=doc_id,
                                     recovery_suggestion="Check docId and that the account can read it") from e
        except httplib2.HttpLib2Error as e:
            raise DocumentFetchError(f"Error accessing gdoc: {e}", doc_id=doc_id) from e

        logger.info(f"Found document '{doc.get('title', doc_id)}' ({doc.get('mimeType', 'unknown type')})")
        export_link = (doc.get('exportLinks') or {}).get(HTML_MIME_TYPE)
        if not export_link:
            raise DocumentFetchError(f"Document has no {HTML_MIME_TYPE} export link", doc_id=doc_id,
                                     recovery_suggestion="Only native Google Docs can be exported")
        return export_link

    def download(self, export_link: str) -> str:
        """Download an export link with a single GET."""
        try:
            response, content = self.http.request(export_link, 'GET')
        except (httplib2.HttpLib2Error, OSError) as e:
            raise DocumentFetchError(f"Error downloading gdoc: {e}") from e
        if response.status >= 400:
            raise DocumentFetchError(f"Error downloading gdoc: HTTP {response.status}")
        logger.info(f"Downloaded {len(content)} bytes of exported HTML")
        if not isinstance(content, bytes):
            return content
        try:
            return content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DocumentFetchError(f"Error downloading gdoc: export is not valid UTF-8 ({e})") from e

    def fetch_html(self, doc_id: str) -> str:
        """Return the HTML export of a document."""
        return self.download(self.get_export_link(doc_id))
