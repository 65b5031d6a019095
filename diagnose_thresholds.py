#!/usr/bin/env python3
"""
Force Curve Extractor - Tactile Threshold Diagnostic Tool
Reports the tactile gap distribution of a curve library and scores the
classification against a labelled set
"""

import argparse
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from forcecurve.analysis.feature_extractor import FeatureExtractor
from forcecurve.config_schema import ForceCurveConfig
from forcecurve.constants import TACTILE_THRESHOLD_RATIO, TACTILE_THRESHOLD_MAX_FORCE
from forcecurve.pipeline.batch import run_batch

CANDIDATE_RATIOS = (0.1, 0.15, 0.2, 0.25, 0.3)
CANDIDATE_CAPS = (3.0, 5.0, 8.0)


def collect_gaps(input_dir, parallel_jobs=1):
    """
    Run the extractor and tabulate gap and threshold per curve.

    Args:
        input_dir: Root directory of the curve library
        parallel_jobs: Worker processes

    Returns:
        DataFrame with key, bottom-out force, gap, threshold and classification
    """
    config = ForceCurveConfig.from_dict({'general': {'parallel_jobs': parallel_jobs}})
    result = run_batch(input_dir, config, show_progress=True)
    extractor = FeatureExtractor()

    rows = []
    for key, metadata in result.registry.items():
        rows.append({
            'key': key,
            'bottom_out_gf': metadata.bottom_out.force,
            'gap_gf': metadata.tactile_gap,
            'threshold_gf': extractor.tactile_threshold(metadata.bottom_out.force),
            'is_tactile': metadata.is_tactile
        })

    return pd.DataFrame(rows, columns=['key', 'bottom_out_gf', 'gap_gf', 'threshold_gf', 'is_tactile'])


def score_thresholds(df, labels):
    """
    Accuracy of each candidate (ratio, cap) against labelled curves.

    Args:
        df: Output of collect_gaps
        labels: DataFrame with columns key, is_tactile

    Returns:
        DataFrame with one row per candidate, best first
    """
    merged = df.drop(columns=['is_tactile']).merge(labels, on='key', how='inner')
    if merged.empty:
        return pd.DataFrame(columns=['ratio', 'cap', 'accuracy', 'labelled'])

    expected = merged['is_tactile'].astype(str).str.strip().str.lower().isin(['1', 'true', 'yes'])

    rows = []
    for ratio in CANDIDATE_RATIOS:
        for cap in CANDIDATE_CAPS:
            extractor = FeatureExtractor(threshold_ratio=ratio, threshold_max_force=cap)
            thresholds = merged['bottom_out_gf'].apply(extractor.tactile_threshold)
            predicted = (merged['gap_gf'] >= thresholds) & (merged['gap_gf'] > 0)
            rows.append({
                'ratio': ratio,
                'cap': cap,
                'accuracy': float((predicted == expected).mean()),
                'labelled': len(merged)
            })

    return pd.DataFrame(rows).sort_values('accuracy', ascending=False, kind='stable')


def print_report(df, scores=None):
    print("\n" + "="*80)
    print("TACTILE GAP DISTRIBUTION")
    print("="*80)
    print(f"\nCurves: {len(df)}")
    print(f"Tactile: {int(df['is_tactile'].sum())}  Linear: {int((~df['is_tactile']).sum())}")

    with_gap = df[df['gap_gf'] > 0]
    if len(with_gap):
        ratio = with_gap['gap_gf'] / with_gap['threshold_gf'].replace(0, np.nan)
        percentiles = np.nanpercentile(ratio, [10, 25, 50, 75, 90])
        print(f"\nGap / threshold over {len(with_gap)} curves with a peak-trough pair:")
        for label, value in zip(['P10', 'P25', 'P50', 'P75', 'P90'], percentiles):
            print(f"  {label}: {value:.2f}")

        borderline = with_gap[(ratio > 0.8) & (ratio < 1.25)]
        print(f"\nBorderline curves (gap within 20% of threshold): {len(borderline)}")
        for _, row in borderline.iterrows():
            print(f"  {row['key']}: gap {row['gap_gf']:.2f} gf, threshold {row['threshold_gf']:.2f} gf")

    print(f"\nCurrent calibration: min(bottom-out x {TACTILE_THRESHOLD_RATIO}, {TACTILE_THRESHOLD_MAX_FORCE}) gf")

    if scores is not None and len(scores):
        print("\n" + "="*80)
        print("LABELLED ACCURACY")
        print("="*80)
        print(scores.to_string(index=False))


def plot_distribution(df, output_path):
    """Scatter of gap against bottom-out force with the threshold curve"""
    fig, ax = plt.subplots(figsize=(12, 7))

    colors = np.where(df['is_tactile'], 'green', 'blue')
    ax.scatter(df['bottom_out_gf'], df['gap_gf'], c=colors, alpha=0.6, s=15)

    extractor = FeatureExtractor()
    force = np.linspace(0, max(float(df['bottom_out_gf'].max()), 1.0), 200)
    ax.plot(force, [extractor.tactile_threshold(f) for f in force], color='red',
            linestyle='--', linewidth=2, label='Tactile threshold')

    ax.set_xlabel('Bottom-out force (gf)', fontweight='bold')
    ax.set_ylabel('Tactile gap (gf)', fontweight='bold')
    ax.set_title('Tactile Gap vs Bottom-out Force', fontweight='bold')
    ax.legend()
    ax.grid(alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"\nDiagnostic plot saved: {output_path}")


def main():
    parser = argparse.ArgumentParser(
        description='Diagnostic tool for the tactile classification threshold'
    )

    parser.add_argument('--input', type=Path, required=True,
                       help='Root directory of the curve library')
    parser.add_argument('--labels', type=Path,
                       help='CSV with columns key,is_tactile')
    parser.add_argument('--parallel', type=int, default=1,
                       help='Number of parallel jobs')
    parser.add_argument('--plot', type=Path, default=Path('diagnostic_thresholds.png'),
                       help='Output path of the diagnostic plot')

    args = parser.parse_args()

    df = collect_gaps(args.input, args.parallel)
    scores = score_thresholds(df, pd.read_csv(args.labels)) if args.labels else None

    print_report(df, scores)
    if len(df):
        plot_distribution(df, args.plot)

    sys.exit(0)


if __name__ == '__main__':
    main()
