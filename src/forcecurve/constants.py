"""
Centralized constants for the force curve extraction pipeline.

All calibration values live here instead of being scattered through the
analysis code. The derivative and tactile values are empirical calibration
data tuned against the measured switch library, not physical laws.

Version: 1.0.0
"""

# ============================================================================
# Input Format Constants
# ============================================================================

# Raw CSV layout
HEADER_LINES = 5  # Non-data lines before the CSV header row
DISPLACEMENT_COLUMN = "Displacement"  # mm
FORCE_COLUMN = "Force"  # gf

# File discovery
CURVE_FILE_PATTERN = "**/*.csv"
EXCLUDED_FILE_PATTERNS = (
    "*HighResolution*",
    "*HighResoultion*",  # misspelt variant present in the data set
)

# Boilerplate stripped from file names when building keys and display names
NAME_BOILERPLATE = "Raw Data CSV"

# ============================================================================
# Simplification Constants
# ============================================================================

RENDER_SIMPLIFY_TOLERANCE = 0.001  # RDP epsilon for stroke output
ACCELERATION_SIMPLIFY_TOLERANCE = 0.01  # RDP epsilon before bottom-out search

# ============================================================================
# Derivative Constants
# ============================================================================

DERIVATIVE_STEP_MM = 0.005  # Uniform resampling grid step
DERIVATIVE_BLUR_RADIUS = 2  # Box filter radius (grid samples)
DERIVATIVE_BLUR_PASSES = 3  # Three box passes approximate a gaussian
DERIVATIVE_PRECISION = 6  # Decimals kept after smoothing

# ============================================================================
# Feature Extraction Constants
# ============================================================================

# Tactile peak must precede bottom-out by at least this much travel
TACTILE_MIN_GAP_MM = 0.5

# isTactile threshold: min(bottom_out_force * RATIO, MAX_FORCE)
TACTILE_THRESHOLD_RATIO = 0.2
TACTILE_THRESHOLD_MAX_FORCE = 5.0  # gf

# ============================================================================
# Batch Processing Constants
# ============================================================================

PARALLEL_JOBS_DEFAULT = 1
PARALLEL_JOBS_MAX = 64

# ============================================================================
# Export Constants
# ============================================================================

METADATA_FILENAME = "metadata.json"
CURVES_DIRNAME = "curves"
PLOTS_DIRNAME = "plots"
SUMMARY_XLSX_FILENAME = "Force_Curve_Summary_{timestamp}.xlsx"

PLOT_DPI = 150
PLOT_FIGSIZE_WIDTH = 10  # inches
PLOT_FIGSIZE_HEIGHT = 6  # inches
