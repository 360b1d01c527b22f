"""Test suite for deckcodec.

Tests mirror the source layout: reading/ for import, writing/ for export, internals/ for
config, manifest and scaffolding, and top-level modules for the CLI and pipelines.

Running Tests:
    pytest                                  # Run all tests
    pytest -v                               # Verbose output
    pytest tests/test_cli.py                # Run specific file
    pytest -k "z_index"                     # Run tests with matching pattern in function name

Notes:
    - Packages are built in-test from hand-written XML (tests/helpers.py); there are no binary fixtures
    - User folders (~/Documents/deckcodec) are redirected to a tmp dir for every test
    - Monkeypatch for env vars and network access
"""
