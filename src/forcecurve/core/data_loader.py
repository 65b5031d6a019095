"""Loading of raw force curve CSV files and discovery of the input set"""
import io
import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List

import numpy as np
import pandas as pd

from ..constants import (
    HEADER_LINES,
    DISPLACEMENT_COLUMN,
    FORCE_COLUMN,
    CURVE_FILE_PATTERN,
    EXCLUDED_FILE_PATTERNS,
)
from ..exceptions import InputDirectoryNotFoundError
from ..models import empty_points

logger = logging.getLogger(__name__)


class CurveFileLoader:
    """Parse raw force curve CSV text into ordered (displacement, force) samples"""

    def __init__(self,
                 header_lines: int = HEADER_LINES,
                 displacement_column: str = DISPLACEMENT_COLUMN,
                 force_column: str = FORCE_COLUMN):
        """
        Initialize loader.

        Args:
            header_lines: Number of non-data lines preceding the CSV header row
            displacement_column: Name of the displacement column (mm)
            force_column: Name of the force column (gf)
        """
        self.header_lines = header_lines
        self.displacement_column = displacement_column
        self.force_column = force_column

    def load_text(self, text: str) -> np.ndarray:
        """
        Parse CSV text into samples.

        Unparsable or missing fields become 0, rows wider than the header are
        truncated, and rows with negative displacement are dropped as sensor
        artifacts. Row order is preserved.

        Args:
            text: Raw file contents

        Returns:
            Array of shape (N, 2) with (x, force) rows
        """
        body = text.splitlines()[self.header_lines:]
        while body and not body[0].strip():
            body = body[1:]
        if not body:
            return empty_points()

        n_columns = len(body[0].split(','))
        df = pd.read_csv(
            io.StringIO('\n'.join(body)),
            dtype=str,
            engine='python',
            on_bad_lines=lambda fields: fields[:n_columns],
        )
        df.columns = [str(column).strip() for column in df.columns]

        x = self._numeric_column(df, self.displacement_column)
        force = self._numeric_column(df, self.force_column)

        samples = np.column_stack([x, force]) if len(df) else empty_points()

        # Negative displacements are sensor artifacts
        samples = samples[samples[:, 0] >= 0]

        logger.debug(f"Parsed {len(samples)} samples ({len(df) - len(samples)} discarded)")
        return samples

    def load_file(self, filepath: Path) -> np.ndarray:
        """
        Read and parse a single CSV file.

        Args:
            filepath: Path to the raw CSV file

        Returns:
            Array of shape (N, 2) with (x, force) rows
        """
        logger.debug(f"Loading samples from {filepath}")
        text = Path(filepath).read_text(encoding='utf-8', errors='replace')
        return self.load_text(text)

    def _numeric_column(self, df: pd.DataFrame, column: str) -> np.ndarray:
        """Column as floats, 0 where missing or unparsable"""
        if column not in df.columns:
            logger.warning(f"Column '{column}' missing, defaulting to 0")
            return np.zeros(len(df), dtype=float)

        values = pd.to_numeric(df[column].str.strip(), errors='coerce')
        return values.fillna(0.0).to_numpy(dtype=float)


def load_samples(text: str,
                 header_lines: int = HEADER_LINES,
                 displacement_column: str = DISPLACEMENT_COLUMN,
                 force_column: str = FORCE_COLUMN) -> np.ndarray:
    """Parse CSV text with a throwaway CurveFileLoader"""
    loader = CurveFileLoader(header_lines, displacement_column, force_column)
    return loader.load_text(text)


def load_sample_file(filepath: Path,
                     header_lines: int = HEADER_LINES,
                     displacement_column: str = DISPLACEMENT_COLUMN,
                     force_column: str = FORCE_COLUMN) -> np.ndarray:
    """Read and parse a single CSV file with a throwaway CurveFileLoader"""
    loader = CurveFileLoader(header_lines, displacement_column, force_column)
    return loader.load_file(filepath)


def is_excluded(filename: str, excluded_patterns: Iterable[str] = EXCLUDED_FILE_PATTERNS) -> bool:
    """True when the file name matches one of the reserved exclusion patterns"""
    return any(fnmatch(filename, pattern) for pattern in excluded_patterns)


def discover_curve_files(input_dir: Path,
                         pattern: str = CURVE_FILE_PATTERN,
                         excluded_patterns: Iterable[str] = EXCLUDED_FILE_PATTERNS) -> List[str]:
    """
    Enumerate curve files below ``input_dir``.

    Args:
        input_dir: Root directory of the curve library
        pattern: Glob pattern relative to ``input_dir``
        excluded_patterns: File name patterns removed from the batch

    Returns:
        Sorted list of POSIX paths relative to ``input_dir``

    Raises:
        InputDirectoryNotFoundError: If ``input_dir`` is not a directory
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise InputDirectoryNotFoundError(str(input_dir))

    excluded_patterns = tuple(excluded_patterns)
    identities = []
    skipped = 0

    for path in input_dir.glob(pattern):
        if not path.is_file():
            continue
        if is_excluded(path.name, excluded_patterns):
            skipped += 1
            continue
        identities.append(path.relative_to(input_dir).as_posix())

    identities.sort()
    logger.info(f"Discovered {len(identities)} curve files in {input_dir} ({skipped} excluded)")
    return identities
