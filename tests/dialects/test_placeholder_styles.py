import pytest

from sqlweave import ConfigurationError
from sqlweave.dialects import MySQLDialect, PostgresDialect, SQLiteDialect
from sqlweave.placeholders import at_p, dollar, for_paramstyle, format, named, numeric, qmark


def test_renderers():
    assert [qmark(n) for n in (1, 2)] == ["?", "?"]
    assert format(3) == "%s"
    assert numeric(3) == ":3"
    assert named(3) == ":p3"
    assert dollar(12) == "$12"
    assert at_p(2) == "@p2"


@pytest.mark.parametrize(
    "style, rendered",
    [
        ("qmark", "?"),
        ("format", "%s"),
        ("pyformat", "%s"),
        ("numeric", ":2"),
        ("NAMED", ":p2"),
        ("numbered_qmark", "?2"),
        ("dollar", "$2"),
        ("at_p", "@p2"),
    ],
)
def test_for_paramstyle(style, rendered):
    assert for_paramstyle(style)(2) == rendered


def test_for_paramstyle_unknown():
    with pytest.raises(ConfigurationError):
        for_paramstyle("oracle")


def test_sqlite_dialect_placeholder():
    assert SQLiteDialect().parameter_placeholder(4) == "?"
    assert SQLiteDialect().param_style == "qmark"
    assert SQLiteDialect(numbered=True).parameter_placeholder(4) == "?4"
    assert SQLiteDialect(numbered=True).param_style == "numbered_qmark"


def test_postgres_dialect_placeholder():
    assert PostgresDialect().parameter_placeholder(2) == "%s"
    assert PostgresDialect(native=True).parameter_placeholder(2) == "$2"
    assert PostgresDialect(native=True).param_style == "dollar"


def test_mysql_dialect_placeholder():
    dialect = MySQLDialect()
    assert dialect.name == "mysql"
    assert dialect.param_style == "format"
    assert dialect.parameter_placeholder(1) == "%s"


@pytest.mark.parametrize(
    "dialect",
    [SQLiteDialect(), SQLiteDialect(numbered=True), PostgresDialect(), PostgresDialect(native=True), MySQLDialect()],
)
def test_dialect_param_style_renders_its_placeholders(dialect):
    render = for_paramstyle(dialect.param_style)
    assert [render(n) for n in (1, 2, 3)] == [dialect.parameter_placeholder(n) for n in (1, 2, 3)]
