import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from .config import DEFAULT_CONFIG_FILE, ArchieSettings, get_logger
from .context import build_template_context
from .errors import ArchieDocException, ConfigurationError
from .gdrive.auth import GoogleDocAuthorizer
from .logging_manager import LoggingManager
from .pipeline.pipeline_config import PipelineConfig
from .pipeline.process_document import PipelineRunner, html_to_archieml_text, run_pipeline_from_html, write_json

logger = get_logger(__name__)


def load_settings(config_path: str) -> ArchieSettings:
    """Load settings or exit with the validation problems logged."""
    try:
        return ArchieSettings.load(Path(config_path))
    except (ConfigurationError, ValidationError, ValueError, OSError) as e:
        logger.error(f"Invalid settings in {config_path}: {e}")
        sys.exit(1)


@click.group()
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']), default='INFO')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also write logs to this file')
@click.option('--json-logs', is_flag=True, default=False, help='Emit one JSON object per log line')
def cli(log_level, log_file, json_logs):
    """Pull ArchieML content from a Google Doc into a project's templates."""
    LoggingManager(log_level=log_level, log_file=log_file, json_format=json_logs)

# Fetch command: the full Google Doc -> JSON pipeline
@cli.command(name='fetch')
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_FILE, show_default=True, help='archie.json or YAML settings')
@click.option('--output', type=click.Path(dir_okay=False), default=None, help='Override the JSON output path')
@click.option('--token', type=click.Path(dir_okay=False), default=None, help='Override the token cache path')
@click.option('--dry-run', is_flag=True, default=False, help='Run every stage but do not write the output')
@click.option('--save-metadata', is_flag=True, default=False, help='Write run metadata next to the output')
def fetch(config_path, output, token, dry_run, save_metadata):
    """Fetch the Google Doc and write its ArchieML data as JSON."""
    settings = load_settings(config_path)
    config = PipelineConfig(
        settings=settings,
        output_file=Path(output) if output else None,
        token_file=Path(token) if token else None,
        dry_run=dry_run,
        save_metadata=save_metadata,
    )
    runner = PipelineRunner(config)
    if not runner.run():
        sys.exit(1)

# Render command: offline conversion of an exported HTML file
@cli.command(name='render')
@click.argument('html_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--text', 'as_text', is_flag=True, default=False, help='Print the ArchieML text instead of JSON')
@click.option('--output', type=click.Path(dir_okay=False), default=None, help='Write to a file instead of stdout')
def render(html_file, as_text, output):
    """Convert a downloaded Google Doc HTML export without touching the network."""
    logger.info(f"Rendering {html_file}")
    try:
        html_text = Path(html_file).read_text(encoding='utf-8')
        if as_text:
            result = html_to_archieml_text(html_text)
            if output:
                Path(output).write_text(result, encoding='utf-8')
            else:
                click.echo(result, nl=False)
        else:
            data = run_pipeline_from_html(html_text)
            if output:
                write_json(data, Path(output))
                logger.info(f"Results saved to: {output}")
            else:
                click.echo(json.dumps(data, ensure_ascii=False, indent=2))
    except (ArchieDocException, OSError) as e:
        logger.error(f"Error rendering {html_file}: {e}")
        sys.exit(1)

# Auth command: only run authorization and cache the token
@cli.command(name='auth')
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_FILE, show_default=True, help='archie.json or YAML settings')
@click.option('--token', type=click.Path(dir_okay=False), default=None, help='Override the token cache path')
def auth(config_path, token):
    """Authorize with Google Drive and cache the token."""
    settings = load_settings(config_path)
    try:
        GoogleDocAuthorizer(settings, token_file=Path(token) if token else None).authorize()
    except ArchieDocException as e:
        logger.error(f"Authorization failed: {e}")
        sys.exit(1)
    click.echo("Authorized")

# Context command: what the page templates will see
@cli.command(name='context')
@click.option('--project-dir', type=click.Path(exists=True, file_okay=False), default='.', show_default=True)
@click.option('--no-archie', is_flag=True, default=False, help='Leave out the ARCHIE document data')
@click.option('--config', 'config_path', default=None, help='Settings used to locate the ArchieML output')
def context(project_dir, no_archie, config_path):
    """Print the template context as JSON."""
    settings = load_settings(config_path) if config_path else None
    try:
        template_context = build_template_context(Path(project_dir), include_archie=not no_archie, settings=settings)
    except ArchieDocException as e:
        logger.error(f"Error building template context: {e}")
        sys.exit(1)
    click.echo(json.dumps(template_context, ensure_ascii=False, indent=2))

def main():
    cli()

if __name__ == '__main__':
    main()
