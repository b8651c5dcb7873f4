"""
Registry of shimmed DB-API drivers.
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, List, Optional

from ..builder import Builder
from ..errors import SqlWeaveError
from ..options import paramstyle
from ..utils import get_logger
from .connection import Connection

NAME_PREFIX = "sqlweave-"

logger = get_logger("driver")


class DriverRegistrationError(SqlWeaveError, RuntimeError):
    """Raised when a shim cannot be registered or looked up."""


@dataclass(frozen=True)
class DriverEntry:
    name: str
    module: ModuleType
    builder: Builder


_registry: Dict[str, DriverEntry] = {}
_lock = threading.Lock()


def _resolve_module(target: ModuleType | str) -> ModuleType:
    if isinstance(target, str):
        try:
            module = importlib.import_module(target)
        except ImportError as exc:
            raise DriverRegistrationError(f"Cannot import DB-API driver {target!r}") from exc
    else:
        module = target
    if not callable(getattr(module, "connect", None)):
        raise DriverRegistrationError(
            f"{getattr(module, '__name__', module)!r} is not a DB-API driver (no connect())"
        )
    return module


def default_builder(module: ModuleType) -> Builder:
    """
    Builder whose placeholders follow the driver's ``paramstyle``.
    """
    style = getattr(module, "paramstyle", "qmark")
    return Builder(paramstyle(style))


def register(
    target: ModuleType | str,
    *,
    name: Optional[str] = None,
    builder: Optional[Builder] = None,
) -> str:
    """
    Register a shim for the DB-API driver ``target`` and return its name.

    ``target`` is the driver module or its import name, e.g. ``"sqlite3"``.
    The shim is named ``"sqlweave-" + module name`` unless ``name`` is given,
    and compiles with ``builder`` (default: a builder using the driver's
    paramstyle). Registering an existing name is an error.
    """
    module = _resolve_module(target)
    shim_name = name or f"{NAME_PREFIX}{module.__name__}"
    entry = DriverEntry(shim_name, module, builder or default_builder(module))
    with _lock:
        if shim_name in _registry:
            raise DriverRegistrationError(f"Driver {shim_name!r} is already registered")
        _registry[shim_name] = entry
    logger.debug("Registered driver shim %s for %s", shim_name, module.__name__)
    return shim_name


def unregister(name: str) -> None:
    with _lock:
        if _registry.pop(name, None) is None:
            raise DriverRegistrationError(f"Driver {name!r} is not registered")


def registered() -> List[str]:
    with _lock:
        return sorted(_registry)


def connect(name: str, *args: Any, slow_query_ms: int | None = None, **kwargs: Any) -> Connection:
    """
    Open a connection through the registered driver ``name``.

    Remaining arguments go to the real driver's ``connect()``.
    """
    with _lock:
        entry = _registry.get(name)
    if entry is None:
        raise DriverRegistrationError(f"Driver {name!r} is not registered")
    raw = entry.module.connect(*args, **kwargs)
    return Connection(raw, entry.builder, slow_query_ms=slow_query_ms)


def wrap(connection: Any, builder: Optional[Builder] = None, *, slow_query_ms: int | None = None) -> Connection:
    """
    Shim an already open DB-API connection.

    Without a ``builder`` placeholders follow the paramstyle of the module the
    connection's class comes from, falling back to qmark.
    """
    if builder is None:
        module_name = type(connection).__module__.split(".")[0]
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            module = None
        style = getattr(module, "paramstyle", "qmark") if module is not None else "qmark"
        builder = Builder(paramstyle(style))
    return Connection(connection, builder, slow_query_ms=slow_query_ms)
