"""
Pytest configuration for STIG Rollup tests.

This module provides:
- An isolated application home for the whole session
- Custom test markers

Sample documents live in :mod:`tests.builders`.
"""

import os
import tempfile

# Point Cfg at a throwaway home before any stig_rollup module is imported
os.environ.setdefault("STIG_ROLLUP_HOME", tempfile.mkdtemp(prefix="stig_rollup_home_"))


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
