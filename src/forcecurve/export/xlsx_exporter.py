"""Excel summary of extracted curve metadata"""
import pandas as pd
import logging
from pathlib import Path
from typing import Dict, List

from ..registry.metadata_registry import MetadataRegistry

logger = logging.getLogger(__name__)


class MetadataXLSXExporter:
    """Export the metadata table to an Excel workbook"""

    def __init__(self, output_path: Path):
        """
        Initialize XLSX exporter.

        Args:
            output_path: Path for output XLSX file
        """
        self.output_path = Path(output_path)

    def create_summary_sheet(self, registry: MetadataRegistry) -> pd.DataFrame:
        """
        Create summary sheet DataFrame.

        Args:
            registry: Frozen metadata registry

        Returns:
            One row per curve key
        """
        rows = []

        for key, metadata in registry.items():
            rows.append({
                'key': key,
                'path': registry.identity_of(key),
                'type': 'tactile' if metadata.is_tactile else 'linear',
                'bottom_out_mm': metadata.bottom_out.x,
                'bottom_out_gf': metadata.bottom_out.force,
                'tactile_max_mm': metadata.tactile_max.x,
                'tactile_max_gf': metadata.tactile_max.force,
                'tactile_min_mm': metadata.tactile_min.x,
                'tactile_min_gf': metadata.tactile_min.force,
                'tactile_gap_gf': metadata.tactile_gap
            })

        columns = ['key', 'path', 'type', 'bottom_out_mm', 'bottom_out_gf',
                   'tactile_max_mm', 'tactile_max_gf', 'tactile_min_mm',
                   'tactile_min_gf', 'tactile_gap_gf']
        return pd.DataFrame(rows, columns=columns)

    def export(self, registry: MetadataRegistry, failures: List[Dict] = None) -> Path:
        """
        Export summary, duplicate and failure sheets.

        Args:
            registry: Frozen metadata registry
            failures: Optional batch failure entries

        Returns:
            Path to the written workbook
        """
        logger.info(f"Exporting metadata summary to {self.output_path}")

        self.output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(self.output_path, engine='openpyxl') as writer:
            summary_df = self.create_summary_sheet(registry)
            summary_df.to_excel(writer, sheet_name='Summary', index=False)

            if registry.duplicates:
                pd.DataFrame(registry.duplicates).to_excel(writer, sheet_name='Duplicates', index=False)

            if failures:
                pd.DataFrame(failures).to_excel(writer, sheet_name='Failures', index=False)

        logger.info(f"Export complete: {self.output_path}")
        return self.output_path
