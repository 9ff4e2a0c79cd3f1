from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from sqlfluent.core.errors import DebugErrorSink, RaisingErrorSink, create_error_sink
from sqlfluent.driver import Database
from sqlfluent.exceptions import ImproperConfigurationError, QueryError

if TYPE_CHECKING:
    from tests.conftest import FakeConnection


def test_raising_sink() -> None:
    with pytest.raises(QueryError) as exc_info:
        RaisingErrorSink().report("syntax error", "SELEC 1")
    assert exc_info.value.error == "syntax error"
    assert exc_info.value.sql == "SELEC 1"
    assert str(exc_info.value) == "syntax error. (SELEC 1)"


def test_debug_sink_renders_text_and_exits() -> None:
    stream = io.StringIO()
    with pytest.raises(SystemExit) as exc_info:
        DebugErrorSink("text", stream=stream).report("no such table: t", "SELECT * FROM t")
    assert exc_info.value.code == 1
    output = stream.getvalue()
    assert "Query: SELECT * FROM t" in output
    assert "Error: no such table: t" in output


def test_debug_sink_renders_escaped_html() -> None:
    stream = io.StringIO()
    with pytest.raises(SystemExit):
        DebugErrorSink("html", stream=stream).report("bad <value>", "SELECT '<b>'")
    output = stream.getvalue()
    assert "&lt;b&gt;" in output
    assert "bad &lt;value&gt;" in output
    assert "<b>" not in output.replace("<strong>", "").replace("</strong>", "")


def test_debug_sink_rejects_unknown_format() -> None:
    with pytest.raises(ImproperConfigurationError):
        DebugErrorSink("xml")  # type: ignore[arg-type]


def test_create_error_sink() -> None:
    assert isinstance(create_error_sink(debug=True), DebugErrorSink)
    assert isinstance(create_error_sink(debug=False), RaisingErrorSink)


def test_database_with_debug_sink_exits(connection: FakeConnection) -> None:
    stream = io.StringIO()
    database = Database(connection, error_sink=DebugErrorSink(stream=stream))
    connection.failing["t"] = "boom"
    with pytest.raises(SystemExit):
        database.table("t").get_all()
    assert "Error: boom" in stream.getvalue()
    assert database.error == "boom"
