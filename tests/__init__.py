"""
Force Curve Extractor Test Suite

Test Organization:
- tests/unit/: Isolated component tests (loader, geometry, derivative, features, registry)
- tests/integration/: Executor, batch, export and CLI tests on synthetic curve libraries

Critical paths: stroke partition, derivative estimation, bottom-out and tactile detection.
"""
