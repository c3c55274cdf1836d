"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest

from config import Config, get_seed_dir
from services.base import Services


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "reconciler",
        db_data_dir=tmp_path / "reconciler" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "reconciler" / "logs",
        default_type="EXPENSE",
        batch_size=2,
        seed_dir=get_seed_dir(),
        salary_placeholder="Unnamed",
    )


@pytest.fixture
def db_manager(test_db):
    """Create a database manager that hands out the in-memory connection.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        A database manager compatible with DatabaseManager.
    """

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager: In-memory database manager.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager)


@pytest.fixture
def store(services):
    """The document store shared by all services of the test container."""
    return services.store
