import psycopg2
from psycopg2 import pool
import pytest

from db import connection
from db.errors import (
    ConstraintViolation, EMAIL_UNIQUE, NotFound, StoreError, TransientFailure, translate_error,
)


def test_integrity_error_becomes_constraint_violation(make_integrity_error):
    err = translate_error(make_integrity_error(EMAIL_UNIQUE, "Key (email)=(a@b.c) already exists."),
                          "add user", "a@b.c")
    assert isinstance(err, ConstraintViolation)
    assert err.constraint == EMAIL_UNIQUE
    assert err.operation == "add user"
    assert err.key == "a@b.c"
    assert "already exists" in err.detail


def test_operational_error_is_transient():
    err = translate_error(psycopg2.OperationalError("server closed the connection"), "get book", 3)
    assert isinstance(err, TransientFailure)
    assert isinstance(err, StoreError)
    assert err.key == 3


def test_other_errors_are_store_errors():
    err = translate_error(psycopg2.ProgrammingError("syntax error"), "list books")
    assert type(err) is StoreError
    assert "syntax error" in str(err)


def test_not_found_carries_entity_and_key():
    err = NotFound("review", 9)
    assert err.entity == "review"
    assert err.key == 9
    assert err.operation == "get review"
    assert str(err) == "review 9 not found"


def test_get_connection_requires_pool(monkeypatch):
    monkeypatch.setattr(connection, "_pool", None)
    with pytest.raises(RuntimeError):
        connection.get_connection()


def test_exhausted_pool_is_transient(monkeypatch):
    class ExhaustedPool:
        def getconn(self):
            raise pool.PoolError("connection pool exhausted")

    monkeypatch.setattr(connection, "_pool", ExhaustedPool())
    with pytest.raises(TransientFailure):
        connection.get_connection()
