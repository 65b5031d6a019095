"""Batch extraction over a whole curve library.

Per-file extraction is independent and runs sequentially or in a process
pool. The metadata registry is built only once every record is collected.
"""

import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from ..config_schema import ForceCurveConfig
from ..core.data_loader import discover_curve_files
from ..exceptions import format_error_chain
from ..models import Curve, CurveMetadata, CurveRecord
from ..registry.metadata_registry import MetadataRegistry, make_curve_key, switch_name
from .executor import PipelineExecutor

logger = logging.getLogger(__name__)

Source = Tuple[str, Optional[str]]


@dataclass
class BatchResult:
    """Outcome of a batch run.

    Attributes:
        records: One record per source, in source order
        registry: Frozen key -> metadata table
        failures: Files that produced a degraded record
        processing_time_sec: Wall time of the extraction
    """

    records: List[CurveRecord]
    registry: MetadataRegistry
    failures: List[Dict[str, str]] = field(default_factory=list)
    processing_time_sec: float = 0.0

    @property
    def degraded(self) -> bool:
        return bool(self.failures)

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly run summary"""
        return {
            'status': 'degraded' if self.degraded else 'success',
            'files': len(self.records),
            'curves': len(self.registry),
            'tactile': sum(1 for _, m in self.registry.items() if m.is_tactile),
            'duplicates': len(self.registry.duplicates),
            'failures': len(self.failures),
            'processing_time_sec': round(self.processing_time_sec, 2)
        }


def degraded_record(identity: str) -> CurveRecord:
    """Empty curve with zero metadata for a file that could not be processed"""
    return CurveRecord(
        identity=identity,
        key=make_curve_key(identity),
        name=switch_name(identity),
        curve=Curve(),
        metadata=CurveMetadata()
    )


def process_source(identity: str,
                   text: Optional[str],
                   loader_settings: Optional[Dict[str, Any]] = None) -> Tuple[CurveRecord, Optional[Dict[str, str]]]:
    """
    Process a single source with comprehensive error handling.

    Args:
        identity: File identity
        text: Raw file contents, None when the file could not be read
        loader_settings: Keyword arguments for CurveFileLoader

    Returns:
        Tuple of (record, failure entry or None)
    """
    if text is None:
        return degraded_record(identity), {
            'identity': identity,
            'error': 'File could not be read',
            'error_type': 'ReadError'
        }

    try:
        return PipelineExecutor(loader_settings).execute(identity, text), None
    except Exception as e:
        logger.error(f"{identity} failed:\n{format_error_chain(e)}")
        return degraded_record(identity), {
            'identity': identity,
            'error': str(e),
            'error_type': type(e).__name__
        }


def read_sources(input_dir: Path, identities: Sequence[str]) -> List[Source]:
    """
    Read raw file contents.

    Undecodable bytes are replaced. A file that cannot be read is paired
    with None so it degrades instead of aborting the batch.
    """
    sources = []
    for identity in identities:
        filepath = Path(input_dir) / identity
        try:
            text = filepath.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            logger.warning(f"Cannot read {filepath}: {e}")
            text = None
        sources.append((identity, text))
    return sources


def process_sources(sources: Sequence[Source],
                    parallel_jobs: int = 1,
                    loader_settings: Optional[Dict[str, Any]] = None,
                    show_progress: bool = False) -> Tuple[List[CurveRecord], List[Dict[str, str]]]:
    """
    Run per-file extraction over (identity, text) pairs.

    Args:
        sources: (identity, raw text) pairs, text None for unreadable files
        parallel_jobs: Worker processes (1 = sequential)
        loader_settings: Keyword arguments for CurveFileLoader
        show_progress: Display a progress bar

    Returns:
        Tuple of (records in source order, failure entries in source order)
    """
    sources = list(sources)
    results: List[Optional[Tuple[CurveRecord, Optional[Dict[str, str]]]]] = [None] * len(sources)

    if parallel_jobs > 1 and len(sources) > 1:
        logger.info(f"Using {parallel_jobs} parallel workers")

        with ProcessPoolExecutor(max_workers=parallel_jobs) as executor:
            futures = {
                executor.submit(process_source, identity, text, loader_settings): index
                for index, (identity, text) in enumerate(sources)
            }

            with tqdm(total=len(sources), desc="Processing curves", unit="file",
                      disable=not show_progress) as pbar:
                for future in as_completed(futures):
                    index = futures[future]
                    identity = sources[index][0]
                    try:
                        results[index] = future.result()
                    except Exception as e:
                        logger.error(f"{identity} raised exception: {e}")
                        results[index] = (degraded_record(identity), {
                            'identity': identity,
                            'error': str(e),
                            'error_type': 'ExecutionError'
                        })
                    pbar.update(1)
    else:
        logger.info("Sequential processing (parallel=1)")

        with tqdm(sources, desc="Processing curves", unit="file",
                  disable=not show_progress) as pbar:
            for index, (identity, text) in enumerate(pbar):
                results[index] = process_source(identity, text, loader_settings)

    records = [record for record, _ in results]
    failures = [failure for _, failure in results if failure is not None]

    if failures:
        logger.warning(f"{len(failures)} of {len(sources)} files produced degraded records")

    return records, failures


def run_batch(input_dir: Path,
              config: Optional[ForceCurveConfig] = None,
              identities: Optional[Sequence[str]] = None,
              show_progress: bool = False) -> BatchResult:
    """
    Discover, read and process a curve library, then build the registry.

    Args:
        input_dir: Root directory of the curve library
        config: Pipeline configuration, defaults when None
        identities: Explicit file list, discovered when None
        show_progress: Display a progress bar

    Returns:
        BatchResult with records, frozen registry and failures
    """
    config = config or ForceCurveConfig()
    start_time = time.time()

    if identities is None:
        identities = discover_curve_files(
            input_dir,
            pattern=config.loader.file_pattern,
            excluded_patterns=config.loader.excluded_patterns
        )

    loader_settings = {
        'header_lines': config.loader.header_lines,
        'displacement_column': config.loader.displacement_column,
        'force_column': config.loader.force_column
    }

    logger.info(f"Processing {len(identities)} curve files from {input_dir}")
    sources = read_sources(input_dir, identities)
    records, failures = process_sources(
        sources,
        parallel_jobs=config.general.parallel_jobs,
        loader_settings=loader_settings,
        show_progress=show_progress
    )

    registry = MetadataRegistry.from_records(records)

    return BatchResult(
        records=records,
        registry=registry,
        failures=failures,
        processing_time_sec=time.time() - start_time
    )
