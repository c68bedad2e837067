from __future__ import annotations

from typing import TYPE_CHECKING, Any
from weakref import ReferenceType, ref

from typing_extensions import override

from destroyer.core import Destroyer

if TYPE_CHECKING:
    from collections.abc import Callable

    from destroyer.types import Cleanup


def add_finalizer(obj: Any, callback: Cleanup, /) -> ReferenceType:
    """Add a finalizer for an object."""
    return ref(obj, _add_finalizer_modify(callback))


def _add_finalizer_modify(func: Cleanup, /) -> Callable[[Any], None]:
    """Modify a callback to work with `ref`."""

    def wrapped(_: Any, /) -> None:
        func()

    return wrapped


##


_ATTACHED: dict[int, tuple[ReferenceType, AttachedDestroyer[Any]]] = {}


class AttachedDestroyer[T](Destroyer[T]):
    """Destroyer kept alive until its owner is reclaimed or it is released."""

    __slots__ = ()

    @override
    def release(self) -> None:
        _ = _ATTACHED.pop(id(self), None)
        super().release()


def attach_destroyer[T](owner: Any, obj: T, /) -> AttachedDestroyer[T]:
    """Clean up an object when its owner is reclaimed.

    The destroyer is also returned, so the object can be cleaned up early; in
    that case reclaiming the owner does nothing.
    """
    key: int | None = None

    def release() -> None:
        if (key is not None) and ((entry := _ATTACHED.get(key)) is not None):
            _, destroyer = entry
            destroyer.release()

    reference = add_finalizer(owner, release)
    destroyer = AttachedDestroyer(obj)
    key = id(destroyer)
    _ATTACHED[key] = (reference, destroyer)
    return destroyer


__all__ = ["AttachedDestroyer", "add_finalizer", "attach_destroyer"]
