"""
Shared fixtures: a fake psycopg2 pool so repositories run without a server,
and a clean session store / rate limiter for every test.
"""

from types import SimpleNamespace

import psycopg2
import pytest

import db.connection
from models.user import User
from security.rate_limiter import limiter
from security.session import sessions


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    @property
    def rowcount(self):
        return self.conn.rowcount

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if self.conn.error is not None:
            error, self.conn.error = self.conn.error, None
            raise error

    def fetchone(self):
        return self.conn.results.pop(0) if self.conn.results else None

    def fetchall(self):
        return self.conn.results.pop(0) if self.conn.results else []


class FakeConnection:
    """Records statements; `results` feeds fetchone/fetchall in order."""

    def __init__(self):
        self.executed = []
        self.results = []
        self.rowcount = 1
        self.error = None
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    @property
    def last_sql(self):
        return self.executed[-1][0]

    @property
    def last_params(self):
        return self.executed[-1][1]


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.borrowed = 0
        self.returned = 0

    def getconn(self):
        self.borrowed += 1
        return self.conn

    def putconn(self, conn):
        self.returned += 1


@pytest.fixture
def fake_conn(monkeypatch):
    conn = FakeConnection()
    fake_pool = FakePool(conn)
    monkeypatch.setattr(db.connection, "_pool", fake_pool)
    conn.pool = fake_pool
    return conn


def integrity_error(constraint, detail=None):
    """A psycopg2.IntegrityError whose diagnostics name ``constraint``."""
    class _IntegrityError(psycopg2.IntegrityError):
        diag = SimpleNamespace(constraint_name=constraint, message_detail=detail)
    return _IntegrityError(f'violates constraint "{constraint}"')


@pytest.fixture
def principal():
    return User(email="reader@example.com", password_hash="x", name="Reader", user_id=1)


@pytest.fixture(autouse=True)
def clean_security_state():
    sessions._principals.clear()
    limiter.reset()
    yield
    sessions._principals.clear()
    limiter.reset()


@pytest.fixture
def make_integrity_error():
    return integrity_error
