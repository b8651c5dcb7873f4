import logging
import sqlite3
import types
import uuid

import pytest

from sqlweave import Bind, Builder, omit_empty
from sqlweave import driver
from sqlweave.driver import Connection, Cursor, DriverRegistrationError, to_fragments


class FakeCursor:
    def __init__(self):
        self.statements = []
        self.batches = []
        self.closed = False
        self.description = None
        self.rowcount = -1

    def execute(self, sql, params=None):
        self.statements.append((sql, params))

    def executemany(self, sql, seq):
        self.batches.append((sql, list(seq)))

    def fetchone(self):
        return None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursors = []
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self.autocommit = False

    def cursor(self):
        cursor = FakeCursor()
        self.cursors.append(cursor)
        return cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeDriver:
    def __init__(self):
        self.connections = []

    def connect(self, dsn, **options):
        conn = FakeConnection()
        conn.dsn = dsn
        conn.options = options
        self.connections.append(conn)
        return conn


@pytest.fixture
def shim_name():
    names = []

    def make(prefix="test"):
        name = f"{prefix}-{uuid.uuid4().hex[:8]}"
        names.append(name)
        return name

    yield make
    for name in names:
        if name in driver.registered():
            driver.unregister(name)


@pytest.fixture
def fake_module():
    fake = FakeDriver()
    module = types.ModuleType("fakepg")
    module.connect = fake.connect
    module.paramstyle = "pyformat"
    module.fake = fake
    return module


def test_to_fragments():
    assert to_fragments(None) == []
    assert to_fragments([1, "AND"]) == [1, "AND"]
    assert to_fragments((1, 2)) == [1, 2]
    assert to_fragments({"first": 1, "second": [2]}) == [1, [2]]
    assert to_fragments(5) == [5]


def test_register_and_connect_sqlite(shim_name):
    name = driver.register("sqlite3", name=shim_name())
    assert name in driver.registered()

    with driver.connect(name, ":memory:") as conn:
        assert isinstance(conn, Connection)
        conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, status TEXT)")
        cursor = conn.cursor()
        assert isinstance(cursor, Cursor)
        cursor.execute(
            "INSERT INTO users",
            [[{"id": 1, "name": "Frank", "status": "active"}, {"id": 2, "name": "Lip", "status": "away"}]],
        )
        assert cursor.rowcount == 2

        rows = conn.execute("SELECT name FROM users WHERE", [{"status": "active"}]).fetchall()
        assert rows == [("Frank",)]

        conn.execute("DELETE FROM users WHERE id IN", [[1, 2, 3]])
        assert conn.execute("SELECT COUNT(*) FROM users").fetchone() == (0,)


def test_string_parameters_are_sql_text(shim_name):
    name = driver.register("sqlite3", name=shim_name())
    conn = driver.connect(name, ":memory:")
    try:
        assert conn.execute("SELECT", ["upper(", Bind("abc"), ")"]).fetchone() == ("ABC",)
    finally:
        conn.close()


def test_default_name_uses_module_name(fake_module):
    name = driver.register(fake_module)
    try:
        assert name == "sqlweave-fakepg"
        with pytest.raises(DriverRegistrationError):
            driver.register(fake_module)
    finally:
        driver.unregister(name)


def test_duplicate_registration_fails(shim_name):
    name = shim_name()
    driver.register("sqlite3", name=name)
    with pytest.raises(DriverRegistrationError):
        driver.register("sqlite3", name=name)


def test_register_rejects_non_drivers():
    with pytest.raises(DriverRegistrationError):
        driver.register("sqlweave_no_such_driver")
    with pytest.raises(DriverRegistrationError):
        driver.register(types.ModuleType("not_a_driver"))


def test_unknown_names_fail():
    with pytest.raises(DriverRegistrationError):
        driver.connect("sqlweave-missing")
    with pytest.raises(DriverRegistrationError):
        driver.unregister("sqlweave-missing")


def test_placeholders_follow_driver_paramstyle(shim_name, fake_module):
    name = driver.register(fake_module, name=shim_name())
    conn = driver.connect(name, "postgresql://localhost/db", connect_timeout=3)

    raw = fake_module.fake.connections[0]
    assert conn.raw is raw
    assert raw.dsn == "postgresql://localhost/db"
    assert raw.options == {"connect_timeout": 3}

    conn.cursor().execute("SELECT * FROM t WHERE", [{"a": 1, "b": [2, 3]}])
    assert raw.cursors[-1].statements == [("SELECT * FROM t WHERE a = %s AND b IN ( %s, %s )", [1, 2, 3])]


def test_registered_builder_is_used(shim_name, fake_module):
    name = driver.register(fake_module, name=shim_name(), builder=Builder(omit_empty()))
    conn = driver.connect(name, "dsn")
    conn.execute("UPDATE t SET", [{"a": 1, "b": ""}, "WHERE id =", 3])
    assert conn.raw.cursors[-1].statements == [("UPDATE t SET a = ? WHERE id = ?", [1, 3])]


def test_executemany_uses_driver_batch_when_sql_matches():
    raw = FakeConnection()
    conn = driver.wrap(raw, Builder())
    conn.executemany(
        "INSERT INTO people",
        [[{"id": 1, "name": "a"}], [{"id": 2, "name": "b"}]],
    )
    cursor = raw.cursors[-1]
    assert cursor.statements == []
    assert cursor.batches == [("INSERT INTO people ( id, name ) VALUES ( ?, ? )", [[1, "a"], [2, "b"]])]


def test_executemany_runs_differing_statements_individually():
    raw = FakeConnection()
    conn = driver.wrap(raw, Builder(omit_empty()))
    conn.executemany(
        "INSERT INTO people",
        [[{"id": 1, "name": "a"}], [{"id": 2, "name": ""}]],
    )
    cursor = raw.cursors[-1]
    assert cursor.batches == []
    assert cursor.statements == [
        ("INSERT INTO people ( id, name ) VALUES ( ?, ? )", [1, "a"]),
        ("INSERT INTO people ( id ) VALUES ( ? )", [2]),
    ]


def test_executemany_with_no_parameter_sets():
    raw = FakeConnection()
    cursor = driver.wrap(raw, Builder()).cursor()
    assert cursor.executemany("INSERT INTO t", []) is cursor
    assert raw.cursors[-1].batches == []


def test_executemany_against_sqlite():
    conn = driver.wrap(sqlite3.connect(":memory:"))
    conn.execute("CREATE TABLE t (a INTEGER, b TEXT)")
    conn.executemany("INSERT INTO t", [[{"a": n, "b": str(n)}] for n in range(3)])
    assert conn.execute("SELECT SUM(a), COUNT(b) FROM t").fetchone() == (3, 3)
    conn.close()


def test_wrap_infers_sqlite_paramstyle():
    conn = driver.wrap(sqlite3.connect(":memory:"))
    try:
        assert conn.builder.build("a =", 1) == ("a = ?", [1])
        assert conn.in_transaction is False
    finally:
        conn.close()


def test_connection_context_manager_commits_or_rolls_back():
    raw = FakeConnection()
    with driver.wrap(raw, Builder()):
        pass
    assert raw.committed and raw.closed and not raw.rolled_back

    raw = FakeConnection()
    with pytest.raises(ValueError):
        with driver.wrap(raw, Builder()):
            raise ValueError("boom")
    assert raw.rolled_back and raw.closed and not raw.committed


def test_cursor_delegates_unknown_attributes():
    raw = FakeConnection()
    with driver.wrap(raw, Builder()).cursor() as cursor:
        assert cursor.description is None
        assert cursor.rowcount == -1
        assert cursor.lastrowid is None
        assert cursor.batches == []
    assert raw.cursors[-1].closed is True


def test_slow_statements_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlweave.driver.cursor")
    raw = FakeConnection()
    driver.wrap(raw, Builder(), slow_query_ms=0).execute("SELECT", [Bind("Bearer secret")])
    records = [record for record in caplog.records if record.name == "sqlweave.driver.cursor"]
    assert records[-1].levelno == logging.WARNING
    assert records[-1].params == ["***"]


def test_timing_log_masks_sensitive_columns(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlweave.driver.cursor")
    cursor = driver.wrap(FakeConnection(), Builder(), slow_query_ms=0).cursor()
    cursor.execute("UPDATE users SET", [{"password": Bind("hunter2")}])
    cursor.executemany("UPDATE users SET", [[{"password": Bind("a1")}], [{"token": Bind("b2"), "x": 1}]])
    params = [record.params for record in caplog.records if hasattr(record, "params")]
    assert params == [["***"], ["***"], ["***", 1]]
