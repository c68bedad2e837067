from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from destroyer.core import Destroyer

if TYPE_CHECKING:
    from collections.abc import Iterator


@contextmanager
def destroying[T](obj: T, /) -> Iterator[T]:
    """Yield an object, cleaning it up on exit.

    The object itself is yielded, not the destroyer, so it can be used as
    normal; its `cleanup` runs once when the block exits, however it exits.
    """
    destroyer = Destroyer(obj)
    try:
        yield obj
    finally:
        destroyer.release()


__all__ = ["destroying"]
