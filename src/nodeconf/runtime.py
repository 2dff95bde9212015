"""Runtime modes a node configuration can be validated against.

The validator only needs two things from a mode: whether it installs the
OS to disk, and a printable name.  Any object satisfying ``RuntimeMode``
can be passed; ``Mode`` covers the built-in platforms.
"""
from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


@runtime_checkable
class RuntimeMode(Protocol):
    """Capability consumed by the validator; supplied per call."""

    def requires_install(self) -> bool: ...

    def __str__(self) -> str: ...


class Mode(Enum):
    """Built-in runtime modes."""

    CLOUD = "cloud"
    CONTAINER = "container"
    METAL = "metal"

    def requires_install(self) -> bool:
        return self is Mode.METAL

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Mode":
        """Look up a mode by its name, case-insensitively.

        Raises
        ------
        ValueError
            If ``name`` is not a known mode.
        """
        try:
            return cls(name.lower())
        except ValueError:
            known = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown runtime mode {name!r}; expected one of: {known}") from None
