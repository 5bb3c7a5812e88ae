"""
E2E test fixtures for the DocDB SDK.

These tests require a running server reachable through the DOCDB_*
environment settings (DOCDB_ENDPOINTS, DOCDB_USERNAME, DOCDB_PASSWORD).
"""

import os
import uuid

import pytest

from docdb_sdk import Client, ConnectionSettings

# Skip E2E tests if not in E2E mode
E2E_ENABLED = os.environ.get("DOCDB_E2E_TESTS", "0") == "1"


@pytest.fixture
async def client():
    """Client connected to the configured server."""
    if not E2E_ENABLED:
        pytest.skip("E2E tests disabled. Set DOCDB_E2E_TESTS=1 to enable.")
    async with Client.from_settings(ConnectionSettings()) as client:
        yield client


@pytest.fixture
async def col(client):
    """Fresh collection in a throwaway database."""
    db = await client.create_database(f"e2e_{uuid.uuid4().hex[:8]}")
    try:
        yield await db.create_collection("documents")
    finally:
        await db.remove()
