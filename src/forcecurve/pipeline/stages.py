"""Pipeline stages for force curve extraction.

Each stage is a focused unit with a single responsibility.
Stages follow the pattern: receive context -> process -> return updated context.
"""

from ..core.data_loader import CurveFileLoader
from ..core.strokes import partition_strokes
from ..core.simplifier import simplify_stroke
from ..analysis.feature_extractor import FeatureExtractor
from ..models import Curve

from .context import PipelineContext


class LoadingStage:
    """Parse the raw file contents into samples."""

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        """Parse CSV text.

        Args:
            ctx: Pipeline context with raw text

        Returns:
            Context with samples populated
        """
        loader = CurveFileLoader(**ctx.loader_settings)
        samples = loader.load_text(ctx.text)

        if len(samples) == 0:
            ctx.logger.warning(f"{ctx.identity}: no samples after parsing")
        else:
            ctx.logger.debug(f"{ctx.identity}: {len(samples)} samples")

        return ctx.update(samples=samples)


class PartitionStage:
    """Split samples at the point of maximum travel."""

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        downstroke, upstroke = partition_strokes(ctx.samples)
        ctx.logger.debug(
            f"{ctx.identity}: downstroke {len(downstroke)}, upstroke {len(upstroke)} samples"
        )
        return ctx.update(downstroke=downstroke, upstroke=upstroke)


class FeatureExtractionStage:
    """Detect bottom-out and tactile points on the raw downstroke.

    Runs before simplification so that feature detection sees every sample.
    """

    def __init__(self, extractor: FeatureExtractor = None):
        self.extractor = extractor or FeatureExtractor()

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        """Extract metadata.

        Args:
            ctx: Pipeline context with downstroke

        Returns:
            Context with metadata populated
        """
        metadata = self.extractor.extract(ctx.downstroke)
        return ctx.update(metadata=metadata)


class SimplificationStage:
    """Reduce both strokes for storage and rendering."""

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        curve = Curve(
            downstroke=simplify_stroke(ctx.downstroke),
            upstroke=simplify_stroke(ctx.upstroke)
        )
        return ctx.update(curve=curve)
