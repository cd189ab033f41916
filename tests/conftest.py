"""Shared fixtures: hand-built images and sqlite3-generated databases."""

import pytest
from faker import Faker

from .utils import (
    NULL,
    build_database,
    create_sqlite_db,
    int8,
    table_cell,
    text,
)


@pytest.fixture
def minimal_db(tmp_path):
    """Single 4096-byte page holding one row: (NULL, 42, 'hi') with rowid 1."""
    path = tmp_path / "minimal.db"
    path.write_bytes(build_database([[table_cell(1, [NULL, int8(42), text("hi")])]]))
    return path


@pytest.fixture
def users_db(tmp_path):
    """A sqlite3 database with a faker-populated users table and an index."""
    path = tmp_path / "users.db"
    Faker.seed(1234)
    fake = Faker()

    rows = [
        (
            fake.first_name(),
            fake.email(),
            fake.random_int(min=1, max=100),
            fake.pyfloat(left_digits=4, right_digits=2),
            fake.binary(length=8),
        )
        for _ in range(15)
    ]

    create_sqlite_db(
        path,
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, email TEXT, age INTEGER, balance REAL, avatar BLOB)",
        "CREATE INDEX idx_users_email ON users (email)",
        "CREATE TABLE apples (name TEXT, color TEXT)",
        "INSERT INTO apples VALUES ('Granny Smith', 'Light Green'), ('Fuji', 'Red')",
        params=("INSERT INTO users (name, email, age, balance, avatar) VALUES (?, ?, ?, ?, ?)", rows),
    )
    return path
