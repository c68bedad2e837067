from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeAlias, runtime_checkable

from typing_extensions import TypeIs

# basic
PRIMITIVE_TYPES: tuple[type[Any], ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
)


# cleanup
@runtime_checkable
class SupportsCleanup(Protocol):
    def cleanup(self) -> None: ...  # pragma: no cover


Cleanup: TypeAlias = Callable[[], None]


def is_cleanable(obj: Any, /) -> TypeIs[SupportsCleanup]:
    """Check if an object has a callable `cleanup` method."""
    return callable(getattr(obj, "cleanup", None))


__all__ = [
    "PRIMITIVE_TYPES",
    "Cleanup",
    "SupportsCleanup",
    "is_cleanable",
]
