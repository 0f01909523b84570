from pathlib import Path
import dotenv
import json
import logging
import os
import yaml
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ConfigurationError


dotenv.load_dotenv(Path.cwd() / '.env')

# Logging configuration
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    return logger


# Google Drive settings
SCOPES = ['https://www.googleapis.com/auth/drive.readonly']
HTML_MIME_TYPE = 'text/html'

# Project-relative default paths
DEFAULT_CONFIG_FILE = 'archie.json'
DEFAULT_TOKEN_FILE = 'google-token.json'
DEFAULT_OUTPUT_FILE = 'src/templates/data.json'

# Environment variable overrides for the settings file
ENV_OVERRIDES = {
    'docId': 'ARCHIE_DOC_ID',
    'clientId': 'ARCHIE_CLIENT_ID',
    'clientSecret': 'ARCHIE_CLIENT_SECRET',
    'redirectUrl': 'ARCHIE_REDIRECT_URL',
    'serviceAccountFile': 'ARCHIE_SERVICE_ACCOUNT_FILE',
}


class ArchieSettings(BaseModel):
    """Settings for pulling a Google Doc, as stored in a project's archie.json"""
    model_config = ConfigDict(populate_by_name=True)

    doc_id: str = Field(..., alias='docId', description="Google Drive file id of the document")
    client_id: Optional[str] = Field(None, alias='clientId', description="OAuth2 client id")
    client_secret: Optional[str] = Field(None, alias='clientSecret', description="OAuth2 client secret")
    redirect_url: Optional[str] = Field(None, alias='redirectUrl', description="OAuth2 redirect URL")
    service_account_file: Optional[str] = Field(None, alias='serviceAccountFile',
                                                description="Service account key file, skips the interactive flow")
    output_file: str = Field(default=DEFAULT_OUTPUT_FILE, alias='outputFile', description="Where the JSON is written")
    token_file: str = Field(default=DEFAULT_TOKEN_FILE, alias='tokenFile', description="OAuth2 token cache")

    @model_validator(mode='after')
    def validate_credentials(self):
        """Either a service account or a complete OAuth2 client is required."""
        if self.service_account_file:
            return self
        missing = [name for name, value in (
            ('clientId', self.client_id),
            ('clientSecret', self.client_secret),
            ('redirectUrl', self.redirect_url),
        ) if not value]
        if missing:
            raise ValueError(f"Missing OAuth2 settings: {', '.join(missing)} (or set serviceAccountFile)")
        return self

    @property
    def uses_service_account(self) -> bool:
        return bool(self.service_account_file)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], apply_env: bool = True) -> 'ArchieSettings':
        """
        Create settings from a dictionary, letting environment variables win.

        Args:
            data: Raw settings using the archie.json (camelCase) keys
            apply_env: Whether ARCHIE_* environment variables override the values

        Returns:
            ArchieSettings instance
        """
        merged = dict(data)
        if apply_env:
            for key, env_name in ENV_OVERRIDES.items():
                value = os.environ.get(env_name)
                if value:
                    merged[key] = value
        return cls(**merged)

    @classmethod
    def load(cls, config_file: Optional[Path] = None, apply_env: bool = True) -> 'ArchieSettings':
        """
        Load settings from a JSON or YAML file.

        A missing file is allowed when the environment supplies every
        required value.
        """
        config_file = Path(config_file or DEFAULT_CONFIG_FILE)
        data: Dict[str, Any] = {}
        if config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    if config_file.suffix in ('.yaml', '.yml'):
                        data = yaml.safe_load(f) or {}
                    else:
                        data = json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ConfigurationError(f"Could not parse settings file {config_file}: {e}",
                                         recovery_suggestion="Fix the file syntax") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Settings file {config_file} must contain a mapping")
            logger.info(f"Loaded settings from {config_file}")
        else:
            logger.warning(f"Settings file not found: {config_file}, using environment only")
        return cls.from_dict(data, apply_env=apply_env)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to archie.json keys, without secrets."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data.pop('clientSecret', None)
        return data
