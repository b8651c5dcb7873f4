"""
Dialect strategy interface consumed by the builder's placeholder option.
"""

from __future__ import annotations

from typing import Protocol


class Dialect(Protocol):
    """
    Strategy describing how a backend spells bind placeholders.
    """

    @property
    def name(self) -> str: ...

    @property
    def param_style(self) -> str: ...

    def parameter_placeholder(self, position: int) -> str: ...
