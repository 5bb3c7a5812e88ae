"""
DocDB SDK Test Suite.

This package contains:
- unit/: Unit tests (no network, fake connections)
- integration/: Integration tests (in-process fake server over httpx)
- e2e/: End-to-end tests (real server, opt-in with DOCDB_E2E_TESTS=1)
"""
