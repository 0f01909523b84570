#!/usr/bin/env python3
"""
Pipeline runner: Google Doc -> HTML export -> ArchieML text -> JSON.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import archieml
from bs4.element import Tag

from ..config import get_logger
from ..errors import ArchieDocException, DocumentParseError, OutputWriteError
from ..gdrive.auth import GoogleDocAuthorizer
from ..gdrive.drive import GoogleDocFetcher
from ..render.normalize import normalize_text
from ..render.tags import find_body, parse_html, render_children, tag_kind_counts
from .pipeline_config import PipelineConfig, PipelineMetadata, PipelineStage, StageResult

# Logger setup
logger = get_logger(__name__)


def html_to_archieml_text(html_text: str) -> str:
    """Render an exported document and normalize it, ready for archieml."""
    return normalize_text(render_children(find_body(parse_html(html_text))))


def parse_archieml(text: str) -> Dict[str, Any]:
    """Parse ArchieML source text into the structured document."""
    try:
        return archieml.loads(text)
    except Exception as e:
        raise DocumentParseError(f"Could not parse ArchieML text: {e}") from e


def run_pipeline_from_html(html_text: str) -> Dict[str, Any]:
    """Run the offline part of the pipeline on already-exported HTML."""
    return parse_archieml(html_to_archieml_text(html_text))


def write_json(data: Dict[str, Any], output_file: Path, pretty: bool = True):
    """Write the structured document, serializing fully before touching the file."""
    try:
        payload = json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)
    except (TypeError, ValueError) as e:
        raise OutputWriteError(f"Could not serialize document data: {e}") from e
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding='utf-8')
    except OSError as e:
        raise OutputWriteError(f"Could not write {output_file}: {e}") from e


class PipelineRunner:
    """Main pipeline orchestrator."""

    def __init__(self, config: PipelineConfig,
                 authorizer: Optional[GoogleDocAuthorizer] = None,
                 fetcher_factory: Callable[[Any], GoogleDocFetcher] = GoogleDocFetcher):
        self.config = config
        self.authorizer = authorizer or GoogleDocAuthorizer(config.settings, token_file=config.token_file)
        self.fetcher_factory = fetcher_factory
        self.metadata = PipelineMetadata(doc_id=config.doc_id)
        self.data: Optional[Dict[str, Any]] = None
        self.start_time = None

    def _stage(self, stage: PipelineStage, action: Callable[[], Any]) -> StageResult:
        """Run one stage, turning any exception into a failed result."""
        try:
            return StageResult.success(stage, action())
        except ArchieDocException as e:
            message = f"Stage {stage.value} failed: {e}"
        except Exception as e:
            message = f"Stage {stage.value} failed with exception: {e}"
        logger.error(message)
        self.metadata.errors.append(message)
        return StageResult.failure(stage, message)

    def _run_authorize(self, _=None) -> StageResult:
        logger.info("Stage 1: Authorizing with Google Drive")
        result = self._stage(PipelineStage.AUTHORIZE, self.authorizer.authorize)
        if result.ok:
            self.metadata.record(PipelineStage.AUTHORIZE,
                                 service_account=self.config.settings.uses_service_account)
        return result

    def _run_fetch(self, credentials) -> StageResult:
        logger.info(f"Stage 2: Fetching HTML export of {self.config.doc_id}")
        result = self._stage(PipelineStage.FETCH,
                             lambda: self.fetcher_factory(credentials).fetch_html(self.config.doc_id))
        if result.ok:
            self.metadata.record(PipelineStage.FETCH, html_characters=len(result.value))
        return result

    def _run_parse_html(self, html_text: str) -> StageResult:
        logger.info("Stage 3: Parsing exported HTML")
        result = self._stage(PipelineStage.PARSE_HTML, lambda: find_body(parse_html(html_text)))
        if result.ok:
            counts = tag_kind_counts(result.value)
            if counts.get('unhandled'):
                warning = f"{counts['unhandled']} element(s) with no text rendering will be dropped"
                logger.warning(warning)
                self.metadata.warnings.append(warning)
            self.metadata.record(PipelineStage.PARSE_HTML, tag_kinds=counts)
        return result

    def _run_render(self, body: Tag) -> StageResult:
        logger.info("Stage 4: Rendering document body as ArchieML text")
        result = self._stage(PipelineStage.RENDER, lambda: render_children(body))
        if result.ok:
            self.metadata.record(PipelineStage.RENDER, lines=result.value.count('\n'))
        return result

    def _run_normalize(self, text: str) -> StageResult:
        logger.info("Stage 5: Decoding entities and straightening tag quotes")
        result = self._stage(PipelineStage.NORMALIZE, lambda: normalize_text(text))
        if result.ok:
            self.metadata.record(PipelineStage.NORMALIZE)
        return result

    def _run_parse_archieml(self, text: str) -> StageResult:
        logger.info("Stage 6: Parsing ArchieML")
        result = self._stage(PipelineStage.PARSE_ARCHIEML, lambda: parse_archieml(text))
        if result.ok:
            self.data = result.value
            self.metadata.record(PipelineStage.PARSE_ARCHIEML, top_level_keys=sorted(result.value.keys()))
        return result

    def _run_write_output(self, data: Dict[str, Any]) -> StageResult:
        if self.config.dry_run:
            logger.info(f"Stage 7: Dry run, not writing {self.config.output_file}")
            self.metadata.record(PipelineStage.WRITE_OUTPUT, output_file=str(self.config.output_file), dry_run=True)
            return StageResult.success(PipelineStage.WRITE_OUTPUT)
        logger.info(f"Stage 7: Writing {self.config.output_file}")
        result = self._stage(PipelineStage.WRITE_OUTPUT,
                             lambda: write_json(data, self.config.output_file, self.config.pretty_json))
        if result.ok:
            self.metadata.record(PipelineStage.WRITE_OUTPUT, output_file=str(self.config.output_file))
        return result

    def stages(self) -> List[Callable[[Any], StageResult]]:
        """Stage methods in run order; each consumes the previous stage's value."""
        return [
            self._run_authorize,
            self._run_fetch,
            self._run_parse_html,
            self._run_render,
            self._run_normalize,
            self._run_parse_archieml,
            self._run_write_output,
        ]

    def _save_pipeline_metadata(self):
        """Save pipeline metadata next to the output file."""
        try:
            write_json(self.metadata.to_dict(), self.config.metadata_file)
            logger.info(f"Pipeline metadata saved to: {self.config.metadata_file}")
        except OutputWriteError as e:
            logger.error(f"Failed to save pipeline metadata: {e}")

    def _print_summary(self, success: bool):
        """Print pipeline execution summary."""
        duration = datetime.now() - self.start_time
        print("\n" + "="*60)
        print("PIPELINE EXECUTION SUMMARY")
        print("="*60)
        print(f"Document: {self.config.doc_id}")
        print(f"Result: {'success' if success else 'failed'}")
        print(f"Total Duration: {duration}")
        print(f"Stages Completed: {len(self.metadata.stages_completed)}/{len(PipelineStage)}")
        if success and not self.config.dry_run:
            print(f"Output: {self.config.output_file}")

        if self.metadata.errors:
            print(f"\nErrors: {len(self.metadata.errors)}")
            for error in self.metadata.errors:
                print(f"  - {error}")

        if self.metadata.warnings:
            print(f"\nWarnings: {len(self.metadata.warnings)}")
            for warning in self.metadata.warnings:
                print(f"  - {warning}")

        print("="*60)

    def _finish(self, success: bool) -> bool:
        self.metadata.end_time = datetime.now().isoformat()
        if self.config.save_metadata:
            self._save_pipeline_metadata()
        if success:
            logger.info("Pipeline completed successfully")
        self._print_summary(success)
        return success

    def run(self) -> bool:
        """Run the complete pipeline, stopping at the first failed stage."""
        logger.info("Starting Google Doc pipeline")
        logger.info(f"Configuration: {self.config.to_dict()}")

        errors = self.config.validate()
        if errors:
            logger.error("Configuration validation failed:")
            for error in errors:
                logger.error(f"  - {error}")
            return False

        self.start_time = datetime.now()
        self.metadata.start_time = self.start_time.isoformat()

        value = None
        for stage in self.stages():
            result = stage(value)
            if not result.ok:
                return self._finish(False)
            value = result.value

        return self._finish(True)
