import pytest

from sqlweave import Builder, ConfigurationError, EmptyMode, keep_empty
from sqlweave.config import options_from_env, resolve_slow_query_ms


def test_options_from_env_reads_prefixed_variables():
    env = {
        "SQLWEAVE_TAG": "col",
        "SQLWEAVE_EMPTY": "omit",
        "SQLWEAVE_PARAMSTYLE": "format",
        "SQLWEAVE_LOG": "yes",
        "OTHER_EMPTY": "null",
    }
    builder = Builder(*options_from_env(environ=env))
    assert builder.options.tag == "col"
    assert builder.options.empty is EmptyMode.OMIT
    assert builder.options.log_query is True
    assert builder.options.log_binds is True
    assert builder.build("a =", 1) == ("a = %s", [1])


def test_specific_log_switches_win():
    env = {"SQLWEAVE_LOG": "on", "SQLWEAVE_LOG_BINDS": "off"}
    builder = Builder(*options_from_env(environ=env))
    assert builder.options.log_query is True
    assert builder.options.log_binds is False


def test_empty_environment_gives_no_options():
    assert options_from_env(environ={}) == []
    assert options_from_env(environ={"SQLWEAVE_EMPTY": ""}) == []


def test_empty_tag_disables_tags():
    builder = Builder(*options_from_env(environ={"SQLWEAVE_TAG": ""}))
    assert builder.options.tag == ""


def test_custom_prefix():
    options = options_from_env("APP_", environ={"APP_EMPTY": "null", "SQLWEAVE_EMPTY": "omit"})
    builder = Builder(*options)
    assert builder.options.empty is EmptyMode.NULL


@pytest.mark.parametrize(
    "env",
    [
        {"SQLWEAVE_EMPTY": "sometimes"},
        {"SQLWEAVE_PARAMSTYLE": "percent"},
        {"SQLWEAVE_LOG": "maybe"},
        {"SQLWEAVE_LOG_QUERY": "2"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ConfigurationError):
        options_from_env(environ=env)


def test_builder_from_env(monkeypatch):
    monkeypatch.setenv("SQLWEAVE_EMPTY", "omit")
    monkeypatch.setenv("SQLWEAVE_PARAMSTYLE", "numeric")
    builder = Builder.from_env()
    assert builder.build("SET", {"a": "", "b": 2}) == ("SET b = :1", [2])

    explicit = Builder.from_env(keep_empty())
    assert explicit.options.empty is EmptyMode.KEEP


def test_resolve_slow_query_ms():
    assert resolve_slow_query_ms(environ={}) == 100
    assert resolve_slow_query_ms(default=5, environ={}) == 5
    assert resolve_slow_query_ms(environ={"SQLWEAVE_SLOW_QUERY_MS": "250"}) == 250
    assert resolve_slow_query_ms(override=0, environ={"SQLWEAVE_SLOW_QUERY_MS": "250"}) == 0


@pytest.mark.parametrize("value", ["fast", "-1"])
def test_resolve_slow_query_ms_rejects_bad_values(value):
    with pytest.raises(ConfigurationError):
        resolve_slow_query_ms(environ={"SQLWEAVE_SLOW_QUERY_MS": value})
