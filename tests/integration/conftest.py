import os
import shutil
import uuid
from collections.abc import Generator

import psycopg
import pytest

from docchat.config.settings import Settings
from docchat.database.connection import apply_schema, close_pool, init_pool
from docchat.store.postgres_store import PostgresConversationStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docchat_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        # fail fast instead of waiting for the pool timeout
        psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        ).close()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    init_pool(test_settings)
    try:
        apply_schema()
        yield
    finally:
        close_pool()


@pytest.fixture
def pg_store(integration_pool: None) -> PostgresConversationStore:
    return PostgresConversationStore()


@pytest.fixture
def new_chat_id(pg_store: PostgresConversationStore) -> Generator[str, None, None]:
    chat_id = f"test-{uuid.uuid4()}"
    yield chat_id
    pg_store.delete(chat_id)


@pytest.fixture(scope="session")
def tesseract_available() -> None:
    if shutil.which("tesseract") is None:
        pytest.skip("tesseract binary not installed")
