"""
Pytest configuration and fixtures for client import tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest
from testcontainers.postgres import PostgresContainer

from client_import.warehouse.client_store import PostgresClientRepository
from client_import.warehouse.connection import DatabaseConnectionPool
from client_import.warehouse.schema_mgmt import SchemaManager
from tests.fakes import InMemoryClientRepository

HEADER = ["company_name", "email", "phone_number"]


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session", autouse=True)
def test_env_vars():
    """
    Set test environment variables

    This fixture loads config/test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container(test_env_vars) -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    with PostgresContainer(
        image=os.getenv("POSTGRES_IMAGE", "postgres:16-alpine"),
        username="test_import",
        password="test_password",
        dbname="test_clients"
    ) as postgres:
        # Wait for container to be ready
        postgres.get_connection_url()
        yield postgres


@pytest.fixture(scope="session")
def db_pool(postgres_container) -> Generator[DatabaseConnectionPool, None, None]:
    """
    Open a pool against the container and create the clients schema

    Yields:
        Open DatabaseConnectionPool
    """
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_clients",
        user="test_import",
        password="test_password",
    )
    pool.open()
    SchemaManager(pool).create_schema()

    yield pool

    pool.close()


@pytest.fixture(scope="function")
def clean_db(db_pool) -> Generator[DatabaseConnectionPool, None, None]:
    """
    Provide a clean database by truncating the clients table before each test

    Yields:
        DatabaseConnectionPool over an empty clients table
    """
    db_pool.execute_command("TRUNCATE TABLE clients RESTART IDENTITY")
    yield db_pool


@pytest.fixture(scope="function")
def pg_repository(clean_db) -> PostgresClientRepository:
    return PostgresClientRepository(clean_db)


# =======================
# IN-MEMORY FIXTURES
# =======================

@pytest.fixture(scope="function")
def memory_repository() -> InMemoryClientRepository:
    return InMemoryClientRepository()


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> Path:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="function")
def write_csv(tmp_path) -> Callable[..., Path]:
    """
    Factory writing an upload file into tmp_path

    Usage:
        path = write_csv([["Acme", "a@acme.com", "555"]])
        path = write_csv(rows, header=["name", "email"], name="bad.csv")
    """
    def _write(rows: list[list[str]], header: list[str] | None = None, name: str = "clients.csv", delimiter: str = ",") -> Path:
        lines = [delimiter.join(header if header is not None else HEADER)]
        lines.extend(delimiter.join(row) for row in rows)
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
