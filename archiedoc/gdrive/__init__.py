"""
Google Drive access: authorization and document export.
"""

from .auth import GoogleDocAuthorizer, prompt_for_code
from .drive import GoogleDocFetcher

__all__ = [
    'GoogleDocAuthorizer',
    'prompt_for_code',
    'GoogleDocFetcher'
]
