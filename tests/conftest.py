"""Root conftest: shared test configuration."""

import os

# Settings are read at import time; provide test credentials before any app import.
os.environ.setdefault("SI_AUTH_PASSWORD", "test-password")
os.environ.setdefault("SI_JWT_SECRET", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("SI_DB_PATH", ":memory:")

import aiosqlite  # noqa: E402
import pytest  # noqa: E402

from score_import.database import create_schema  # noqa: E402
from score_import.imports.schemas import ImportUser  # noqa: E402
from tests.fakes import MemoryImportSink, make_collaborators  # noqa: E402


@pytest.fixture
async def db():
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await create_schema(conn)
    yield conn
    await conn.close()


@pytest.fixture
def user() -> ImportUser:
    return ImportUser(id=1, username="player")


@pytest.fixture
def collaborators():
    return make_collaborators()


@pytest.fixture
def sink() -> MemoryImportSink:
    return MemoryImportSink()
