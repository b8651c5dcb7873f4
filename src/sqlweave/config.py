"""
Environment driven configuration for builders and bridges.
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from .errors import ConfigurationError
from .options import Option, empty_mode, log_binds, log_query, paramstyle, tag

ENV_PREFIX = "SQLWEAVE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def options_from_env(
    prefix: str = ENV_PREFIX, environ: Optional[Mapping[str, str]] = None
) -> List[Option]:
    """
    Translate ``<prefix>*`` environment variables into builder options.

    Recognised variables: ``TAG``, ``EMPTY`` (keep, omit or null),
    ``PARAMSTYLE``, ``LOG``, ``LOG_QUERY`` and ``LOG_BINDS``. The specific
    log switches win over ``LOG``.
    """
    env = os.environ if environ is None else environ
    options: List[Option] = []

    key = f"{prefix}TAG"
    if key in env:
        options.append(tag(env[key].strip()))

    key = f"{prefix}EMPTY"
    if env.get(key):
        options.append(empty_mode(env[key]))

    key = f"{prefix}PARAMSTYLE"
    if env.get(key):
        options.append(paramstyle(env[key]))

    key = f"{prefix}LOG"
    if env.get(key):
        flag = _parse_bool(env[key], key=key)
        options.extend([log_query(flag), log_binds(flag)])

    for suffix, factory in (("LOG_QUERY", log_query), ("LOG_BINDS", log_binds)):
        key = f"{prefix}{suffix}"
        if env.get(key):
            options.append(factory(_parse_bool(env[key], key=key)))

    return options


def resolve_slow_query_ms(
    default: int = 100,
    override: int | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Threshold above which executed statements are logged as slow.

    An explicit ``override`` wins, then ``SQLWEAVE_SLOW_QUERY_MS``, then
    ``default``.
    """
    if override is not None:
        return override
    env = os.environ if environ is None else environ
    key = f"{ENV_PREFIX}SLOW_QUERY_MS"
    value = env.get(key)
    if not value:
        return default
    threshold = _parse_int(value, key=key)
    if threshold < 0:
        raise ConfigurationError(f"'{key}' must not be negative: {value!r}")
    return threshold
