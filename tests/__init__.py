"""
Happiness Dashboard Test Suite

This package contains unit tests and fixtures for the happiness dashboard.

Run tests with:
    pytest tests/
    pytest tests/test_broadcaster.py -v
    pytest tests/test_charts.py::TestRangeFilterContract -v
"""

__version__ = "1.0.0"
