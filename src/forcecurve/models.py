"""Data model for force curves and their derived metadata.

Point sequences flowing through the pipeline are ``(N, 2)`` float arrays with
columns ``[x, force]``. Single characteristic points are ``Point`` tuples.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Sequence

import numpy as np


class Point(NamedTuple):
    """A (displacement, force) sample"""

    x: float
    force: float

    def to_list(self) -> List[float]:
        return [float(self.x), float(self.force)]

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> 'Point':
        return cls(float(values[0]), float(values[1]))


ZERO_POINT = Point(0.0, 0.0)


def empty_points() -> np.ndarray:
    """Empty point sequence of shape (0, 2)"""
    return np.empty((0, 2), dtype=float)


def as_points(points: Any) -> np.ndarray:
    """Coerce a sequence of (x, force) pairs into an (N, 2) float array."""
    array = np.asarray(points, dtype=float)
    if array.size == 0:
        return empty_points()
    return array.reshape(-1, 2)


def points_to_list(points: np.ndarray) -> List[List[float]]:
    return [[float(x), float(force)] for x, force in points]


@dataclass(frozen=True, eq=False)
class Curve:
    """Downstroke and upstroke of a single press"""

    downstroke: np.ndarray = field(default_factory=empty_points)
    upstroke: np.ndarray = field(default_factory=empty_points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'downstroke': points_to_list(self.downstroke),
            'upstroke': points_to_list(self.upstroke),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Curve':
        return cls(
            downstroke=as_points(data.get('downstroke', [])),
            upstroke=as_points(data.get('upstroke', [])),
        )


@dataclass(frozen=True)
class CurveMetadata:
    """Characteristic points of a curve.

    ``tactile_max`` precedes ``bottom_out`` and ``tactile_min`` follows
    ``tactile_max`` unless they hold the zero fallback.
    """

    bottom_out: Point = ZERO_POINT
    tactile_max: Point = ZERO_POINT
    tactile_min: Point = ZERO_POINT
    is_tactile: bool = False

    @property
    def tactile_gap(self) -> float:
        """Peak-to-trough force difference"""
        return self.tactile_max.force - self.tactile_min.force

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the key names the chart consumer reads"""
        return {
            'bottomOut': self.bottom_out.to_list(),
            'tactileMax': self.tactile_max.to_list(),
            'tactileMin': self.tactile_min.to_list(),
            'isTactile': bool(self.is_tactile),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CurveMetadata':
        return cls(
            bottom_out=Point.from_sequence(data['bottomOut']),
            tactile_max=Point.from_sequence(data['tactileMax']),
            tactile_min=Point.from_sequence(data['tactileMin']),
            is_tactile=bool(data['isTactile']),
        )


@dataclass(frozen=True, eq=False)
class CurveRecord:
    """Per-file pipeline output"""

    identity: str
    key: str
    name: str
    curve: Curve
    metadata: CurveMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.identity,
            'key': self.key,
            'name': self.name,
            'curve': self.curve.to_dict(),
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CurveRecord':
        return cls(
            identity=data['path'],
            key=data['key'],
            name=data['name'],
            curve=Curve.from_dict(data['curve']),
            metadata=CurveMetadata.from_dict(data['metadata']),
        )
