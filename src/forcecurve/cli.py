"""Command-line interface for the force curve extractor"""
import argparse
import logging
import json
import sys
from pathlib import Path
from datetime import datetime

from pydantic import ValidationError

from .config_schema import GeneralSettings, load_config
from .constants import PLOTS_DIRNAME, SUMMARY_XLSX_FILENAME
from .core.data_loader import discover_curve_files
from .exceptions import ForceCurveError, format_error_chain
from .export.json_exporter import CurveJSONExporter
from .export.xlsx_exporter import MetadataXLSXExporter
from .export.visualizer import CurveVisualizer
from .pipeline.batch import run_batch


def setup_logging(output_dir: Path, verbose: bool = False, level: str = 'INFO'):
    """Setup logging configuration"""
    log_dir = output_dir / 'logs'
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f'extraction_log_{datetime.now().strftime("%Y%m%d_%H%M%S")}.txt'

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    return logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Force curve feature extraction - bottom-out and tactile detection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract a curve library
  forcecurve --input force-curves --output build

  # Parallel run with Excel summary and diagnostic plots
  forcecurve --input force-curves --output build --parallel 4 --xlsx --plots

  # List the files that would be processed
  forcecurve --input force-curves --dry-run
        """
    )

    parser.add_argument('--input', type=Path,
                       help='Root directory of the raw curve CSV files (overrides config)')
    parser.add_argument('--output', type=Path,
                       help='Output directory for results (overrides config)')
    parser.add_argument('--config', type=Path,
                       help='Path to configuration YAML file')
    parser.add_argument('--parallel', type=int, default=None,
                       help='Number of parallel jobs (overrides config)')
    parser.add_argument('--xlsx', action='store_true',
                       help='Write an Excel summary of the metadata table')
    parser.add_argument('--plots', action='store_true',
                       help='Render a diagnostic plot per curve')
    parser.add_argument('--dry-run', action='store_true',
                       help='Show what would be processed without processing')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Enable verbose logging')
    return parser


def main(argv=None):
    """Main entry point for CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(str(args.config) if args.config else None)
        overrides = {}
        if args.input is not None:
            overrides['input_dir'] = str(args.input)
        if args.output is not None:
            overrides['output_dir'] = str(args.output)
        if args.parallel is not None:
            overrides['parallel_jobs'] = args.parallel
        if overrides:
            config = config.model_copy(update={
                'general': GeneralSettings.model_validate({**config.general.model_dump(), **overrides})
            })
    except (ForceCurveError, ValidationError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if config.general.input_dir is None:
        print("Error: no input directory given (--input or general.input_dir)", file=sys.stderr)
        sys.exit(1)

    input_dir = Path(config.general.input_dir)
    output_dir = Path(config.general.output_dir)

    try:
        identities = discover_curve_files(
            input_dir,
            pattern=config.loader.file_pattern,
            excluded_patterns=config.loader.excluded_patterns
        )
    except ForceCurveError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.dry_run:
        print(json.dumps({'status': 'dry-run', 'files': identities}, indent=2))
        sys.exit(0)

    output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(output_dir, args.verbose, config.general.log_level)

    try:
        result = run_batch(input_dir, config, identities=identities, show_progress=True)

        output_files = {}
        exporter = CurveJSONExporter(output_dir)
        output_files['metadata'] = str(exporter.export_metadata(result.registry))
        if config.export.write_curves:
            paths = exporter.export_records(result.records, result.registry)
            output_files['curves'] = len(paths)

        if args.xlsx or config.export.write_xlsx:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            xlsx_path = output_dir / SUMMARY_XLSX_FILENAME.format(timestamp=timestamp)
            MetadataXLSXExporter(xlsx_path).export(result.registry, result.failures)
            output_files['xlsx'] = str(xlsx_path)

        if args.plots or config.export.write_plots:
            visualizer = CurveVisualizer(output_dir / PLOTS_DIRNAME,
                                         dpi=config.export.plot_dpi,
                                         file_format=config.export.plot_format)
            plots = [visualizer.plot_curve(record) for record in result.records
                     if result.registry.identity_of(record.key) == record.identity]
            output_files['plots'] = len(plots)

    except ForceCurveError as e:
        logger.error(format_error_chain(e))
        print(json.dumps({'status': 'error', 'error': str(e)}, indent=2))
        sys.exit(2)

    summary = result.summary()
    summary['output_files'] = output_files
    print(json.dumps(summary, indent=2))

    sys.exit(2 if result.degraded else 0)


if __name__ == '__main__':
    main()
