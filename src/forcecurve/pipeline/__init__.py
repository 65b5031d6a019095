"""Pipeline architecture for force curve extraction.

Each stage has a single responsibility and clear input/output contracts.
The executor runs the stages for one file; the batch module runs the
executor over a curve library and builds the metadata registry.
"""

from .executor import PipelineExecutor
from .stages import (
    LoadingStage,
    PartitionStage,
    FeatureExtractionStage,
    SimplificationStage
)
from .batch import BatchResult, process_sources, run_batch

__all__ = [
    'PipelineExecutor',
    'LoadingStage',
    'PartitionStage',
    'FeatureExtractionStage',
    'SimplificationStage',
    'BatchResult',
    'process_sources',
    'run_batch'
]
