"""Pipeline executor orchestrates stage execution.

This module contains the PipelineExecutor class that turns one
(identity, raw text) pair into a CurveRecord.
"""

from typing import Any, Dict, Optional
import logging

from ..exceptions import PipelineStageError
from ..models import CurveRecord
from ..registry.metadata_registry import make_curve_key, switch_name
from .context import PipelineContext
from .stages import (
    LoadingStage,
    PartitionStage,
    FeatureExtractionStage,
    SimplificationStage
)

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """Orchestrates pipeline stage execution.

    The executor holds an ordered list of stages and runs them sequentially,
    passing context between stages. It holds no per-file state, so one
    instance can process any number of files.

    Attributes:
        stages: Ordered list of pipeline stages to execute
        loader_settings: Keyword arguments for CurveFileLoader
    """

    def __init__(self, loader_settings: Optional[Dict[str, Any]] = None):
        """Initialize executor with default stages."""
        self.loader_settings = loader_settings or {}
        self.stages = [
            LoadingStage(),
            PartitionStage(),
            FeatureExtractionStage(),
            SimplificationStage()
        ]

    def execute(self, identity: str, text: str) -> CurveRecord:
        """Extract the record of a single curve file.

        Args:
            identity: File identity relative to the curve library root
            text: Raw file contents

        Returns:
            CurveRecord with simplified strokes and feature points

        Raises:
            PipelineStageError: If a stage fails unexpectedly
        """
        ctx = PipelineContext(
            identity=identity,
            text=text,
            loader_settings=self.loader_settings,
            logger=logger
        )

        for stage in self.stages:
            stage_name = stage.__class__.__name__
            logger.debug(f"Executing {stage_name} on {identity}")
            try:
                ctx = stage.execute(ctx)
            except Exception as e:
                raise PipelineStageError(stage_name, e) from e

        return CurveRecord(
            identity=identity,
            key=make_curve_key(identity),
            name=switch_name(identity),
            curve=ctx.curve,
            metadata=ctx.metadata
        )
