"""Pipeline context for state flow between stages.

This module defines the PipelineContext dataclass that carries one curve
file through the per-file stages.
"""

from dataclasses import dataclass, field
from typing import Dict, Any
import copy
import numpy as np
import logging

from ..models import Curve, CurveMetadata, empty_points


@dataclass
class PipelineContext:
    """State container for the extraction of a single curve file.

    Each stage receives a context and returns a new context with updates.

    Attributes:
        identity: File identity relative to the curve library root
        text: Raw file contents
        loader_settings: Keyword arguments for CurveFileLoader
        logger: Logger instance

        # Stage outputs (populated during execution)
        samples: Parsed (x, force) samples in acquisition order
        downstroke: Raw downstroke samples
        upstroke: Raw upstroke samples
        metadata: Extracted feature points
        curve: Simplified strokes for storage
    """

    # Input parameters
    identity: str
    text: str
    loader_settings: Dict[str, Any]
    logger: logging.Logger

    # Stage outputs
    samples: np.ndarray = field(default_factory=empty_points)
    downstroke: np.ndarray = field(default_factory=empty_points)
    upstroke: np.ndarray = field(default_factory=empty_points)
    metadata: CurveMetadata = field(default_factory=CurveMetadata)
    curve: Curve = field(default_factory=Curve)

    def update(self, **kwargs) -> 'PipelineContext':
        """Create new context with updated fields.

        Args:
            **kwargs: Fields to update

        Returns:
            New PipelineContext with updated fields
        """
        new_ctx = copy.copy(self)
        for key, value in kwargs.items():
            if hasattr(new_ctx, key):
                setattr(new_ctx, key, value)
            else:
                raise AttributeError(f"PipelineContext has no attribute '{key}'")
        return new_ctx
