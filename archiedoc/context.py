"""
Template context for a generated project's page templates.

Templates see four globals: META (meta.json), DATA (src/data/data.json),
ARCHIE (the JSON written by the pipeline) and ENV (NODE_ENV).
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_OUTPUT_FILE, ArchieSettings, get_logger
from .errors import ConfigurationError

logger = get_logger(__name__)

META_FILE = 'meta.json'
DATA_FILE = 'src/data/data.json'


def read_json(path: Path) -> Any:
    """Read a JSON file, reporting a missing or broken file as a configuration error."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Template context file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e


def build_template_context(project_dir: Path, include_archie: bool = True,
                           settings: Optional[ArchieSettings] = None) -> Dict[str, Any]:
    """
    Build the context dictionary handed to the page templates.

    Args:
        project_dir: Root of the generated project
        include_archie: Whether to add the pipeline output as ARCHIE
        settings: Project settings, used to locate the pipeline output

    Returns:
        Dictionary with META, DATA, ENV and optionally ARCHIE
    """
    project_dir = Path(project_dir)
    context = {
        'META': read_json(project_dir / META_FILE),
        'DATA': read_json(project_dir / DATA_FILE),
    }
    if include_archie:
        output_file = settings.output_file if settings else DEFAULT_OUTPUT_FILE
        context['ARCHIE'] = read_json(project_dir / output_file)
    context['ENV'] = os.environ.get('NODE_ENV')
    logger.debug(f"Built template context with keys {sorted(context.keys())}")
    return context
