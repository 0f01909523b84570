"""
Pipeline configuration and run metadata.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import ArchieSettings


class PipelineStage(Enum):
    """Pipeline execution stages, in run order."""
    AUTHORIZE = "authorize"
    FETCH = "fetch"
    PARSE_HTML = "parse_html"
    RENDER = "render"
    NORMALIZE = "normalize"
    PARSE_ARCHIEML = "parse_archieml"
    WRITE_OUTPUT = "write_output"


@dataclass
class StageResult:
    """Outcome of one stage; `value` feeds the next stage when `ok`."""
    stage: PipelineStage
    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, stage: PipelineStage, value: Any = None) -> 'StageResult':
        return cls(stage=stage, ok=True, value=value)

    @classmethod
    def failure(cls, stage: PipelineStage, error: str) -> 'StageResult':
        return cls(stage=stage, ok=False, error=error)


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""

    settings: ArchieSettings
    output_file: Optional[Path] = None
    token_file: Optional[Path] = None
    dry_run: bool = False
    save_metadata: bool = False
    pretty_json: bool = True

    # Derived paths
    metadata_file: Optional[Path] = field(init=False)

    def __post_init__(self):
        """Fill unset paths from the settings."""
        self.output_file = Path(self.output_file or self.settings.output_file)
        self.token_file = Path(self.token_file or self.settings.token_file)
        self.metadata_file = self.output_file.with_name(f"{self.output_file.stem}_pipeline_metadata.json")

    @property
    def doc_id(self) -> str:
        return self.settings.doc_id

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.doc_id.strip():
            errors.append("Document id cannot be empty")

        if self.output_file.suffix != '.json':
            errors.append(f"Output file must be a .json file: {self.output_file}")

        if self.output_file.exists() and self.output_file.is_dir():
            errors.append(f"Output path is a directory: {self.output_file}")

        if self.settings.uses_service_account and not Path(self.settings.service_account_file).exists():
            errors.append(f"Service account file not found: {self.settings.service_account_file}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "settings": self.settings.to_dict(),
            "output_file": str(self.output_file),
            "token_file": str(self.token_file),
            "metadata_file": str(self.metadata_file),
            "dry_run": self.dry_run,
            "save_metadata": self.save_metadata,
        }


@dataclass
class PipelineMetadata:
    """Metadata for pipeline execution."""

    pipeline_version: str = "1.0.0"
    doc_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    stages_completed: List[PipelineStage] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    # Stage-specific metadata
    stage_details: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def record(self, stage: PipelineStage, **details):
        """Mark a stage completed, with optional details."""
        self.stages_completed.append(stage)
        if details:
            self.stage_details[stage.value] = details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "pipeline_version": self.pipeline_version,
            "doc_id": self.doc_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "stages_completed": [stage.value for stage in self.stages_completed],
            "errors": self.errors,
            "warnings": self.warnings,
            "stage_details": self.stage_details,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineMetadata':
        """Create from dictionary."""
        data = dict(data)
        if 'stages_completed' in data:
            data['stages_completed'] = [PipelineStage(stage) for stage in data['stages_completed']]

        return cls(**data)
