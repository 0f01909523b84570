"""
Google Doc processing pipeline.

Authorize, fetch the HTML export, render it as ArchieML text, parse it and
write the structured result as JSON for the page templates.
"""

from .process_document import PipelineRunner, html_to_archieml_text, parse_archieml, run_pipeline_from_html, write_json
from .pipeline_config import PipelineConfig, PipelineMetadata, PipelineStage, StageResult

__all__ = [
    'PipelineRunner',
    'PipelineConfig',
    'PipelineMetadata',
    'PipelineStage',
    'StageResult',
    'html_to_archieml_text',
    'parse_archieml',
    'run_pipeline_from_html',
    'write_json'
]
