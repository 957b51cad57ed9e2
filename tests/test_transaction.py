"""Transaction scope lifecycle."""
import logging
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from vitalis.core.connection import PooledConnection
from vitalis.core.transaction import TransactionScope
from vitalis.repositories import PatientRepository
from vitalis.schemas.patient import Patient
from vitalis.utils.errors import StateError


def _patient(document="900"):
    return Patient(first_name="Tx", last_name="Test", document=document)


def _fake_connection():
    conn = MagicMock(spec=PooledConnection)
    conn.is_closed.return_value = False
    return conn


def test_commit_persists_and_restores_auto_commit(source, count_rows):
    with TransactionScope(source.acquire()) as tx:
        tx.begin()
        assert tx.active
        assert tx.connection.auto_commit is False
        PatientRepository(tx.connection).create(_patient())
        tx.commit()
        assert not tx.active

    assert tx.connection.is_closed()
    assert source.engine.pool.checkedout() == 0
    assert count_rows("patient") == 1


def test_close_rolls_back_uncommitted_work(source, count_rows):
    with TransactionScope(source.acquire()) as tx:
        tx.begin()
        PatientRepository(tx.connection).create(_patient())

    assert count_rows("patient") == 0
    assert source.engine.pool.checkedout() == 0


def test_exception_in_block_rolls_back_releases_and_propagates(source, count_rows):
    with pytest.raises(ValueError, match="business rule"):
        with TransactionScope(source.acquire()) as tx:
            tx.begin()
            PatientRepository(tx.connection).create(_patient())
            raise ValueError("business rule")

    assert count_rows("patient") == 0
    assert source.engine.pool.checkedout() == 0


def test_explicit_rollback_discards_work(source, count_rows):
    with TransactionScope(source.acquire()) as tx:
        tx.begin()
        PatientRepository(tx.connection).create(_patient())
        tx.rollback()
        assert not tx.active

    assert count_rows("patient") == 0


def test_commit_without_begin_is_a_state_error(source):
    with TransactionScope(source.acquire()) as tx:
        with pytest.raises(StateError):
            tx.commit()


def test_commit_on_released_connection_is_a_state_error(source):
    tx = TransactionScope(source.acquire())
    tx.begin()
    tx.connection.release()
    with pytest.raises(StateError):
        tx.commit()
    tx.close()


def test_begin_on_closed_connection_is_a_state_error(source):
    conn = source.acquire()
    conn.release()
    with pytest.raises(StateError):
        TransactionScope(conn).begin()


def test_scope_requires_a_connection():
    with pytest.raises(ValueError):
        TransactionScope(None)


def test_rollback_failure_is_logged_not_raised(caplog):
    conn = _fake_connection()
    conn.rollback.side_effect = OperationalError("ROLLBACK", {}, Exception("link lost"))

    tx = TransactionScope(conn)
    tx.begin()
    with caplog.at_level(logging.ERROR, logger="vitalis.core.transaction"):
        tx.rollback()

    assert not tx.active
    assert "Error during rollback" in caplog.text


def test_close_releases_even_when_restoring_auto_commit_fails():
    conn = _fake_connection()
    tx = TransactionScope(conn)
    tx.begin()
    conn.set_auto_commit.side_effect = OperationalError("SET", {}, Exception("gone"))

    tx.close()

    conn.rollback.assert_called_once()
    conn.release.assert_called_once()


def test_close_order_is_rollback_then_auto_commit_then_release():
    conn = _fake_connection()
    tx = TransactionScope(conn)
    tx.begin()
    conn.reset_mock()

    tx.close()

    names = [call[0] for call in conn.method_calls if call[0] != "is_closed"]
    assert names == ["rollback", "set_auto_commit", "release"]
    conn.set_auto_commit.assert_called_once_with(True)
