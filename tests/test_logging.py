"""Tests for request logging and set_debug."""

from __future__ import annotations

import logging

import pytest

from instantdb import APIError, set_debug

from .conftest import SECRET


@pytest.fixture
def debug_off():
    """Leave the package logger as it was found."""
    yield
    set_debug(False)


class TestRequestLogging:
    """Tests for DEBUG records emitted by the client."""

    def test_request_and_status_records(self, client, service, caplog):
        """Each call logs the request path and the response status."""
        caplog.set_level(logging.DEBUG, logger="instantdb")
        client.query({"todos": {}})
        messages = [record.getMessage() for record in caplog.records]
        assert "POST /admin/query" in messages
        assert "POST /admin/query -> 200" in messages
        assert all(record.levelno == logging.DEBUG for record in caplog.records)

    def test_error_status_logged(self, client, service, caplog):
        caplog.set_level(logging.DEBUG, logger="instantdb")
        service.respond("/admin/transact", 400, json={"message": "bad step"})
        with pytest.raises(APIError):
            client.transact([])
        assert "POST /admin/transact -> 400" in caplog.text

    def test_secret_never_logged(self, client, service, caplog):
        """The admin token stays out of the logs."""
        caplog.set_level(logging.DEBUG, logger="instantdb")
        client.as_token("user-token")
        client.query({"todos": {}})
        client.create_token("test@example.com")
        assert caplog.records
        assert SECRET not in caplog.text
        assert "user-token" not in caplog.text


class TestSetDebug:
    """Tests for set_debug."""

    def test_enabled_writes_to_stderr(self, client, capsys, debug_off):
        set_debug()
        client.query({"todos": {}})
        err = capsys.readouterr().err
        assert "instantdb.client DEBUG POST /admin/query" in err
        assert SECRET not in err

    def test_enable_twice_attaches_one_handler(self, debug_off):
        before = len(logging.getLogger("instantdb").handlers)
        set_debug()
        set_debug()
        assert len(logging.getLogger("instantdb").handlers) == before + 1

    def test_disabled_stops_stderr_output(self, capsys, caplog, debug_off):
        """After set_debug(False) nothing reaches stderr, even with a DEBUG root logger."""
        set_debug()
        set_debug(False)
        caplog.set_level(logging.DEBUG)
        logging.getLogger("instantdb.client").debug("after disable")
        assert "after disable" in caplog.text
        assert "after disable" not in capsys.readouterr().err

    def test_disabled_restores_level(self, debug_off):
        set_debug()
        set_debug(False)
        assert logging.getLogger("instantdb").level == logging.NOTSET
