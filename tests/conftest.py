"""
Pytest configuration and shared fixtures for force curve extraction tests.

Provides synthetic curves, raw CSV builders and configuration fixtures used
across unit and integration tests.
"""

import pytest
import numpy as np
import yaml


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def tactile_downstroke_sparse():
    """Seven-sample tactile downstroke: bump at 0.5 mm, trough at 1.0 mm"""
    return np.array([
        [0.0, 0.0],
        [0.5, 30.0],
        [1.0, 20.0],
        [1.5, 25.0],
        [2.0, 80.0],
        [2.2, 82.0],
        [2.4, 78.0]
    ])


@pytest.fixture
def monotonic_downstroke_sparse():
    """Strictly increasing downstroke without any bump"""
    return np.array([
        [0.0, 0.0],
        [0.5, 10.0],
        [1.0, 20.0],
        [1.5, 30.0],
        [2.0, 80.0],
        [2.2, 82.0],
        [2.4, 84.0]
    ])


def _dense_curve(knots_x, knots_force, step=0.01):
    x = np.round(np.arange(0, int(round(knots_x[-1] / step)) + 1) * step, 2)
    return np.column_stack([x, np.interp(x, knots_x, knots_force)])


@pytest.fixture
def linear_downstroke():
    """Linear switch sampled every 0.01 mm, bottoming out at 3.6 mm"""
    return _dense_curve([0.0, 3.6, 3.8], [35.0, 89.0, 189.0])


@pytest.fixture
def tactile_downstroke():
    """Tactile switch: 50 gf peak at 0.8 mm, 40 gf trough at 1.2 mm, bottom-out at 3.6 mm"""
    return _dense_curve([0.0, 0.8, 1.2, 3.6, 3.8], [0.0, 50.0, 40.0, 88.0, 188.0])


@pytest.fixture
def tactile_press(tactile_downstroke):
    """Full press: tactile downstroke then a lighter return stroke"""
    upstroke = tactile_downstroke[-2::-1].copy()
    upstroke[:, 1] = np.clip(upstroke[:, 1] - 8.0, 0, None)
    return np.vstack([tactile_downstroke, upstroke])


@pytest.fixture
def linear_press(linear_downstroke):
    """Full press of the linear switch"""
    upstroke = linear_downstroke[-2::-1].copy()
    upstroke[:, 1] = np.clip(upstroke[:, 1] - 5.0, 0, None)
    return np.vstack([linear_downstroke, upstroke])


# ============================================================================
# Raw File Fixtures
# ============================================================================

def make_curve_csv(points, header_lines=5, columns=("No", "Force", "Displacement")):
    """Render points in the tester's raw CSV layout"""
    lines = [f"Header line {i + 1}" for i in range(header_lines)]
    lines.append(",".join(columns))
    for i, (x, force) in enumerate(points):
        values = {"No": str(i + 1), "Force": f"{force:.4f}", "Displacement": f"{x:.4f}"}
        lines.append(",".join(values.get(column, "") for column in columns))
    return "\n".join(lines) + "\n"


@pytest.fixture
def curve_csv_factory():
    """Builder for raw CSV text from (x, force) points"""
    return make_curve_csv


@pytest.fixture
def curve_library(tmp_path, tactile_press, linear_press):
    """On-disk curve library with a duplicate key and excluded captures"""
    root = tmp_path / "force-curves"
    (root / "Gateron").mkdir(parents=True)
    (root / "Cherry").mkdir()

    (root / "Gateron" / "Gateron_Yellow Raw Data CSV.csv").write_text(make_curve_csv(linear_press))
    (root / "Gateron" / "gateron yellow.csv").write_text(make_curve_csv(tactile_press))
    (root / "Cherry" / "Cherry_Brown Raw Data CSV.csv").write_text(make_curve_csv(tactile_press))
    (root / "Cherry" / "Cherry_Brown HighResolution Raw Data CSV.csv").write_text(make_curve_csv(tactile_press))
    (root / "Cherry" / "Cherry_Red HighResoultion.csv").write_text(make_curve_csv(linear_press))

    return root


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def config_dict(tmp_path):
    """Complete configuration dictionary"""
    return {
        "general": {
            "input_dir": str(tmp_path / "force-curves"),
            "output_dir": str(tmp_path / "build"),
            "log_level": "INFO",
            "parallel_jobs": 1
        },
        "loader": {
            "header_lines": 5,
            "displacement_column": "Displacement",
            "force_column": "Force",
            "file_pattern": "**/*.csv",
            "excluded_patterns": ["*HighResolution*", "*HighResoultion*"]
        },
        "export": {
            "write_curves": True,
            "write_xlsx": False,
            "write_plots": False,
            "plot_dpi": 150,
            "plot_format": "png"
        }
    }


@pytest.fixture
def temp_yaml_config(tmp_path, config_dict):
    """Temporary YAML config file"""
    config_file = tmp_path / "config.yaml"
    with open(config_file, 'w') as f:
        yaml.dump(config_dict, f)
    return config_file
