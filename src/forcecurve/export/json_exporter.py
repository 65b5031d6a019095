"""JSON export of curve records and the aggregate metadata table"""
import json
import logging
from pathlib import Path
from typing import Iterable, List

from ..constants import METADATA_FILENAME, CURVES_DIRNAME
from ..exceptions import OutputDirectoryError
from ..models import CurveRecord
from ..registry.metadata_registry import MetadataRegistry

logger = logging.getLogger(__name__)


class CurveJSONExporter:
    """Write curves/<key>.json per record and metadata.json for the table"""

    def __init__(self, output_dir: Path):
        """
        Initialize JSON exporter.

        Args:
            output_dir: Root output directory
        """
        self.output_dir = Path(output_dir)
        self.curves_dir = self.output_dir / CURVES_DIRNAME

    def _ensure_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(str(directory), str(e)) from e

    def export_record(self, record: CurveRecord) -> Path:
        """Write one record, creating vendor subdirectories as needed"""
        output_path = self.curves_dir / f"{record.key}.json"
        self._ensure_dir(output_path.parent)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(record.to_dict(), f)

        return output_path

    def export_records(self, records: Iterable[CurveRecord], registry: MetadataRegistry) -> List[Path]:
        """
        Write the records that own a registry key.

        Records dropped as duplicates are skipped so that each key maps to
        the record whose metadata the registry holds.

        Returns:
            Paths of the written files
        """
        paths = []
        for record in records:
            if record.key in registry and registry.identity_of(record.key) == record.identity:
                paths.append(self.export_record(record))

        logger.info(f"Wrote {len(paths)} curve records to {self.curves_dir}")
        return paths

    def export_metadata(self, registry: MetadataRegistry) -> Path:
        """Write the aggregate key -> metadata table"""
        self._ensure_dir(self.output_dir)
        return registry.save(self.output_dir / METADATA_FILENAME)
