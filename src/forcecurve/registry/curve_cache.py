"""Consumer-side access to stored curves.

The metadata table is loaded eagerly through ``MetadataRegistry.load``;
full point data is read lazily per key through ``CurveStore`` and held in a
caller-owned ``CurveCache``.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from ..exceptions import CurveNotFoundError
from ..models import CurveMetadata, CurveRecord, Point
from .metadata_registry import MetadataRegistry, switch_name

logger = logging.getLogger(__name__)


class CurveStore:
    """Reads per-curve JSON records written by the pipeline"""

    def __init__(self, curves_dir: Path):
        self.curves_dir = Path(curves_dir)

    def path_for(self, key: str) -> Path:
        return self.curves_dir / f"{key}.json"

    def load(self, key: str) -> CurveRecord:
        """
        Load the record stored under ``key``.

        Raises:
            CurveNotFoundError: If no record file exists for ``key``
        """
        filepath = self.path_for(key)
        if not filepath.is_file():
            raise CurveNotFoundError(key)

        logger.debug(f"Loading curve record {filepath}")
        with open(filepath, 'r', encoding='utf-8') as f:
            return CurveRecord.from_dict(json.load(f))


class CurveCache:
    """
    Memoizes loaded records for a known key set.

    The cache is owned by the caller. It is cleared as a whole when
    ``sync`` is given a different key set and kept otherwise.
    """

    def __init__(self, loader: Callable[[str], CurveRecord], keys: Iterable[str]):
        self._loader = loader
        self._keys = frozenset(keys)
        self._records: Dict[str, CurveRecord] = {}

    @property
    def keys(self) -> frozenset:
        return self._keys

    def sync(self, keys: Iterable[str]) -> bool:
        """
        Adopt a new key set.

        Returns:
            True if the key set changed and the cache was invalidated
        """
        keys = frozenset(keys)
        if keys == self._keys:
            return False

        logger.debug(f"Curve key set changed, dropping {len(self._records)} cached records")
        self._keys = keys
        self._records.clear()
        return True

    def get(self, key: str) -> CurveRecord:
        """
        Cached record for ``key``, loaded on first access.

        Raises:
            CurveNotFoundError: If ``key`` is not part of the key set
        """
        if key not in self._keys:
            raise CurveNotFoundError(key)

        if key not in self._records:
            self._records[key] = self._loader(key)
        return self._records[key]

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)


class TaggedPoint(NamedTuple):
    """A point labelled for charting"""

    x: float
    force: float
    name: str
    up_stroke: bool = False


@dataclass(frozen=True)
class CurveFile:
    """Entry of the switch list: display name, key and metadata"""

    name: str
    key: str
    metadata: CurveMetadata


@dataclass(frozen=True)
class ForceCurve:
    """Chart-ready view of a record"""

    name: str
    points: Tuple[TaggedPoint, ...]
    bottom_out: TaggedPoint
    tactile_max: TaggedPoint
    tactile_min: TaggedPoint
    is_tactile: bool


def tag_point(point: Point, name: str, up_stroke: bool = False) -> TaggedPoint:
    return TaggedPoint(float(point[0]), float(point[1]), name, up_stroke)


def tag_curve(record: CurveRecord, name: Optional[str] = None) -> ForceCurve:
    """
    Build the chart view of a record.

    Upstroke points come first so the downstroke is drawn over it.

    Args:
        record: Stored curve record
        name: Display name, defaults to the record's name

    Returns:
        ForceCurve with every point tagged
    """
    name = name if name is not None else record.name
    metadata = record.metadata

    points = [tag_point(p, name, True) for p in record.curve.upstroke]
    points += [tag_point(p, name) for p in record.curve.downstroke]

    return ForceCurve(
        name=name,
        points=tuple(points),
        bottom_out=tag_point(metadata.bottom_out, name),
        tactile_max=tag_point(metadata.tactile_max, name),
        tactile_min=tag_point(metadata.tactile_min, name),
        is_tactile=metadata.is_tactile,
    )


def list_curve_files(registry: MetadataRegistry) -> List[CurveFile]:
    """Switch list entries in registry order"""
    return [
        CurveFile(name=switch_name(registry.identity_of(key)), key=key, metadata=metadata)
        for key, metadata in registry.items()
    ]
