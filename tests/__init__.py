"""
STIG Rollup Test Suite

Test Organization:
- test_core/ - Core infrastructure tests (state, config, logging, deps)
- test_xml/ - XML processing tests (schema, sanitizer, utils)
- test_io/ - File operations tests
- test_checklist/ - Checklist model, parser and writer tests
- test_processor/ - Canonicalization and checklist update tests
- test_scan/ - SCAP result loading and merge tests
- test_compliance/ - Control catalog and NIST rollup tests
- test_templates/ - Checklist template store tests
- test_ui/ - Command-line interface tests
- test_integration/ - End-to-end workflow tests

Running Tests:
    # All tests
    python -m pytest tests/ -v

    # Specific module
    python -m pytest tests/test_compliance/ -v

    # Skip integration workflows
    python -m pytest tests/ -m "not integration"

    # With coverage
    python -m pytest tests/ -v --cov=stig_rollup --cov-report=html
"""
