"""
Exception hierarchy for the force curve extractor.

Dirty measurement data never raises: parse and structural faults degrade to
zero values inside the pipeline. The classes here cover bad configuration,
missing inputs, registry misuse, failed exports and stage crashes.
"""

from typing import Optional, Dict, Any


# ============================================================================
# Base Exception
# ============================================================================

class ForceCurveError(Exception):
    """
    Root of every error raised by the forcecurve package.

    Carries an optional ``details`` mapping (paths, keys, stage names) that is
    rendered after the message and listed by ``format_error_chain``.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = "; ".join(f"{name}={value!r}" for name, value in self.details.items())
        return f"{self.message} ({context})"


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(ForceCurveError):
    """Problems with the YAML configuration"""


class ConfigFileNotFoundError(ConfigurationError):
    """The configuration path given on the command line does not exist"""

    def __init__(self, config_path: str):
        super().__init__(f"No configuration file at {config_path}", {"path": config_path})
        self.config_path = config_path


# ============================================================================
# Data Loading Errors
# ============================================================================

class DataLoadError(ForceCurveError):
    """Problems locating raw curve files"""


class InputDirectoryNotFoundError(DataLoadError):
    """The curve library root is missing or not a directory"""

    def __init__(self, input_dir: str):
        super().__init__(f"Curve library not found: {input_dir}", {"input_dir": input_dir})
        self.input_dir = input_dir


# ============================================================================
# Registry Errors
# ============================================================================

class RegistryError(ForceCurveError):
    """Misuse of the metadata registry or the curve store"""


class CurveNotFoundError(RegistryError):
    """A consumer asked for a curve key that was never registered"""

    def __init__(self, key: str):
        super().__init__(f"Invalid curve file {key}")
        self.key = key


class RegistryFrozenError(RegistryError):
    """Registration attempted after the registry was frozen"""

    def __init__(self, key: str):
        super().__init__(f"Registry is frozen, refusing to add {key}", {"key": key})
        self.key = key


# ============================================================================
# Export Errors
# ============================================================================

class ExportError(ForceCurveError):
    """Problems writing results"""


class OutputDirectoryError(ExportError):
    """An output directory could not be created or written"""

    def __init__(self, directory: str, reason: str):
        super().__init__(f"Cannot write to {directory}: {reason}", {"directory": directory})


# ============================================================================
# Pipeline Errors
# ============================================================================

class PipelineError(ForceCurveError):
    """Failures while running the per-file stages"""


class PipelineStageError(PipelineError):
    """A stage raised something it was not expected to"""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(
            f"{stage} failed with {type(cause).__name__}: {cause}",
            {"stage": stage}
        )
        self.stage = stage
        self.cause = cause


# ============================================================================
# Utility Functions
# ============================================================================

def format_error_chain(error: BaseException) -> str:
    """
    Render an exception and everything it was raised from.

    Args:
        error: Outermost exception

    Returns:
        One block per exception in the ``__cause__`` chain, outermost first
    """
    blocks = []
    current = error
    while current is not None:
        block = [f"{type(current).__name__}: {current}"]
        for name, value in getattr(current, 'details', {}).items():
            block.append(f"    {name}: {value}")
        blocks.append("\n".join(block))
        current = current.__cause__
    return "\nCaused by ".join(blocks)
