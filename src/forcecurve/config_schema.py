"""
Pydantic schema validation for force curve pipeline configuration files.

Covers the run-time settings: where curves are read from, where results go,
how the raw files are laid out and which extra outputs are produced. The
numeric calibration of the feature extractor is not configurable; it lives
in constants.py.

Version: 1.0.0
"""

from typing import Optional, Literal, Dict, Any, List
from pydantic import BaseModel, Field, field_validator, model_validator
from pathlib import Path

from .constants import (
    HEADER_LINES,
    DISPLACEMENT_COLUMN,
    FORCE_COLUMN,
    CURVE_FILE_PATTERN,
    EXCLUDED_FILE_PATTERNS,
    PARALLEL_JOBS_DEFAULT,
    PARALLEL_JOBS_MAX,
    PLOT_DPI,
)
from .exceptions import ConfigFileNotFoundError


class GeneralSettings(BaseModel):
    """General pipeline settings"""

    input_dir: Optional[str] = Field(
        default=None,
        description="Root directory of the raw force curve library"
    )

    output_dir: str = Field(
        default="results",
        description="Directory for output files (JSON, Excel, plots, logs)"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level"
    )

    parallel_jobs: int = Field(
        default=PARALLEL_JOBS_DEFAULT,
        ge=1,
        le=PARALLEL_JOBS_MAX,
        description="Worker processes for per-file extraction (1 = sequential)"
    )

    @field_validator('output_dir')
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        """Ensure output directory is valid"""
        path = Path(v)
        if path.exists() and not path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {v}")
        return v


class LoaderSettings(BaseModel):
    """Raw CSV layout and file discovery"""

    header_lines: int = Field(
        default=HEADER_LINES,
        ge=0,
        description="Non-data lines preceding the CSV header row"
    )

    displacement_column: str = Field(
        default=DISPLACEMENT_COLUMN,
        min_length=1,
        description="Name of the displacement column (mm)"
    )

    force_column: str = Field(
        default=FORCE_COLUMN,
        min_length=1,
        description="Name of the force column (gf)"
    )

    file_pattern: str = Field(
        default=CURVE_FILE_PATTERN,
        description="Glob pattern for curve files, relative to input_dir"
    )

    excluded_patterns: List[str] = Field(
        default_factory=lambda: list(EXCLUDED_FILE_PATTERNS),
        description="File name patterns removed from the batch (high resolution captures)"
    )

    @model_validator(mode='after')
    def validate_distinct_columns(self):
        """Displacement and force must come from different columns"""
        if self.displacement_column == self.force_column:
            raise ValueError(
                f"displacement_column and force_column must differ "
                f"(both '{self.force_column}')"
            )
        return self


class ExportSettings(BaseModel):
    """Output generation settings"""

    write_curves: bool = Field(
        default=True,
        description="Write one JSON record per curve under curves/"
    )

    write_xlsx: bool = Field(
        default=False,
        description="Write an Excel summary of every curve's feature points"
    )

    write_plots: bool = Field(
        default=False,
        description="Render a diagnostic plot per curve under plots/"
    )

    plot_dpi: int = Field(
        default=PLOT_DPI,
        ge=50,
        le=600,
        description="Plot resolution (DPI)"
    )

    plot_format: Literal["png", "pdf", "svg"] = Field(
        default="png",
        description="Diagnostic plot file format"
    )


class ForceCurveConfig(BaseModel):
    """Complete force curve pipeline configuration"""

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'ForceCurveConfig':
        """Load and validate config from YAML file"""
        import yaml

        yaml_file = Path(yaml_path)
        if not yaml_file.exists():
            raise ConfigFileNotFoundError(str(yaml_path))

        with open(yaml_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        return cls(**raw_config)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ForceCurveConfig':
        """Load and validate config from dictionary"""
        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return self.model_dump()


def load_config(config_path: Optional[str] = None) -> ForceCurveConfig:
    """
    Load and validate force curve pipeline config.

    Args:
        config_path: Path to YAML config file, defaults only when None

    Returns:
        Validated ForceCurveConfig object

    Raises:
        ConfigFileNotFoundError: If config file doesn't exist
        ValidationError: If config contains invalid values
    """
    if config_path is None:
        return ForceCurveConfig()
    return ForceCurveConfig.from_yaml(config_path)
