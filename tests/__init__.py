"""
feedpush Test Suite
===================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/          → Tests for feedpush.core (config, models, error log)
    ├── test_manifest/      → Tests for feedpush.manifest (XML / YAML / JSON parsing)
    ├── test_integrations/  → Tests for feedpush.integrations (feed, registry, issues)
    ├── test_publishing/    → Tests for feedpush.publishing (publisher, reconciler, etc.)
    ├── test_integration/   → End-to-end publishing runs
    ├── test_facade.py      → Tests for the FeedPush facade
    ├── test_cli.py         → Tests for the feedpush command line
    └── conftest.py         → Shared pytest fixtures

Running Tests:
    pytest                              # Run all tests
    pytest tests/test_publishing/       # Run only publishing tests
    pytest -k end_to_end                # Run only end-to-end tests
"""
