"""Diagnostic plots of curves with their detected feature points"""
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import logging
from pathlib import Path
from ..constants import PLOT_DPI, PLOT_FIGSIZE_WIDTH, PLOT_FIGSIZE_HEIGHT
from ..models import CurveRecord, ZERO_POINT

logger = logging.getLogger(__name__)

COLORS = {
    'downstroke': 'tab:blue',
    'upstroke': 'tab:gray',
    'bottom_out': 'red',
    'tactile_max': 'green',
    'tactile_min': 'purple'
}


class CurveVisualizer:
    """Generate one plot per curve for calibration review"""

    def __init__(self, output_dir: Path, dpi: int = PLOT_DPI, file_format: str = 'png'):
        """
        Initialize visualizer.

        Args:
            output_dir: Output directory for plots
            dpi: Resolution of raster output
            file_format: png, pdf or svg
        """
        self.output_dir = Path(output_dir)
        self.dpi = dpi
        self.file_format = file_format
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def plot_curve(self, record: CurveRecord) -> Path:
        """
        Plot strokes and feature markers of a record.

        Args:
            record: Curve record

        Returns:
            Path to saved plot
        """
        fig, ax = plt.subplots(figsize=(PLOT_FIGSIZE_WIDTH, PLOT_FIGSIZE_HEIGHT))

        upstroke = record.curve.upstroke
        downstroke = record.curve.downstroke
        if len(upstroke):
            ax.plot(upstroke[:, 0], upstroke[:, 1], color=COLORS['upstroke'],
                    linewidth=1, label='Upstroke')
        if len(downstroke):
            ax.plot(downstroke[:, 0], downstroke[:, 1], color=COLORS['downstroke'],
                    linewidth=1.5, label='Downstroke')

        metadata = record.metadata
        markers = [
            ('bottom_out', metadata.bottom_out, 'Bottom out'),
            ('tactile_max', metadata.tactile_max, 'Tactile peak'),
            ('tactile_min', metadata.tactile_min, 'Tactile trough')
        ]
        for name, point, label in markers:
            if point != ZERO_POINT:
                ax.scatter([point.x], [point.force], color=COLORS[name], zorder=5,
                           label=f"{label} ({point.x:.2f} mm, {point.force:.1f} gf)")

        kind = 'Tactile' if metadata.is_tactile else 'Linear'
        ax.set_title(f"{record.name} ({kind})", fontsize=14, fontweight='bold')
        ax.set_xlabel('Displacement (mm)')
        ax.set_ylabel('Force (gf)')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper left', fontsize=9)

        plt.tight_layout()

        output_path = self.output_dir / f"{record.key}.{self.file_format}"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)

        logger.debug(f"Saved curve plot: {output_path}")
        return output_path
