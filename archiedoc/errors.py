"""
Error taxonomy for the Google Doc to ArchieML pipeline.

Every failure the pipeline can hit falls in one of these buckets:
- ConfigurationError: settings missing or malformed.
- AuthorizationError: no usable credentials, or the code exchange failed.
- DocumentFetchError: the Drive API or the export download failed.
- DocumentParseError: the HTML or the ArchieML could not be parsed.
- OutputWriteError: the token cache or the JSON output could not be written.

Pipeline stages catch these, log them and abort the run. Nothing is retried.
"""

from typing import Optional


class ArchieDocException(Exception):
    """Base class for all archiedoc exceptions."""
    def __init__(self, message: str, doc_id: Optional[str] = None, recovery_suggestion: Optional[str] = None):
        self.message = message
        self.doc_id = doc_id
        self.recovery_suggestion = recovery_suggestion
        super().__init__(self.message)

    def __str__(self):
        text = self.message
        if self.doc_id:
            text = f"{text} (doc: {self.doc_id})"
        if self.recovery_suggestion:
            text = f"{text}. {self.recovery_suggestion}"
        return text


class ConfigurationError(ArchieDocException):
    """Indicates an error in archie.json or the ARCHIE_* environment."""
    pass

class AuthorizationError(ArchieDocException):
    """Indicates missing or rejected Google credentials."""
    pass

class DocumentFetchError(ArchieDocException):
    """Indicates a failure to look up or download the document export."""
    pass

class DocumentParseError(ArchieDocException):
    """Indicates a failure to parse the exported HTML or its ArchieML text."""
    pass

class OutputWriteError(ArchieDocException):
    """Indicates a failure writing the token cache or the JSON output."""
    pass
