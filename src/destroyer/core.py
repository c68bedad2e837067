from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, NoReturn, Self, SupportsIndex

from typing_extensions import override

from destroyer.types import PRIMITIVE_TYPES, is_cleanable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType


_LOGGER = getLogger(__name__)


class _New:
    """Construct on the class; forward to the inner object on an instance."""

    def __get__(
        self, instance: Destroyer[Any] | None, owner: type[Destroyer[Any]], /
    ) -> Any:
        if instance is None:
            return owner
        return instance._forward("new")  # noqa: SLF001


class Destroyer[T]:
    """Proxy which runs `cleanup` on the object inside it exactly once.

    Attribute access is forwarded to the inner object, so the proxy can stand in
    for it. The inner object is cleaned up when the proxy is released, leaves a
    `with` block, or is itself reclaimed; whichever happens first wins and the
    rest do nothing.

    `type()` and `isinstance()` report `Destroyer`; use `isa` and `can` to ask
    the inner object instead. Do not store the proxy anywhere inside the graph
    reachable from the inner object.
    """

    __slots__ = ("__weakref__", "_inner")

    new = _New()

    def __init__(self, inner: T, /) -> None:
        if (current := getattr(self, "_inner", None)) is not None:
            raise DestroyerAlreadyLiveError(inner=current)
        object.__setattr__(self, "_inner", None)
        if inner is None:
            raise DestroyerNoneError(obj=inner)
        if isinstance(inner, (*PRIMITIVE_TYPES, type)):
            raise DestroyerNotAnObjectError(obj=inner)
        if not is_cleanable(inner):
            raise DestroyerMissingCleanupError(obj=inner)
        object.__setattr__(self, "_inner", inner)
        _LOGGER.debug("Attached destroyer to %s", _get_class_name(inner))

    # lifecycle

    def release(self) -> None:
        """Clean up the inner object, unless that has already happened."""
        inner = getattr(self, "_inner", None)  # unset if `__init__` never ran
        if inner is None:
            return
        object.__setattr__(self, "_inner", None)
        _LOGGER.debug("Cleaning up %s", _get_class_name(inner))
        inner.cleanup()

    def cleanup(self) -> None:
        """Release the destroyer; the inner object is still only cleaned up once."""
        self.release()

    @property
    def released(self) -> bool:
        """Whether the inner object has been cleaned up."""
        return self._inner is None

    def __enter__(self) -> Self:
        _ = self._get_inner("__enter__")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
        /,
    ) -> None:
        self.release()

    def __del__(self) -> None:
        self.release()

    # capability queries

    def isa(self, cls: type[Any] | tuple[type[Any], ...], /) -> bool:
        """Whether the inner object is an instance of `cls`."""
        inner = self._get_inner("isa")
        if callable(own := getattr(inner, "isa", None)):
            return own(cls)
        return isinstance(inner, cls)

    def can(self, method: str, /) -> Callable[..., Any] | None:
        """The inner object's bound method `method`, if it has one."""
        inner = self._get_inner("can")
        if callable(own := getattr(inner, "can", None)):
            return own(method)
        attr = getattr(inner, method, None)
        return attr if callable(attr) else None

    # forwarding

    def __getattr__(self, name: str, /) -> Any:
        if name in _SLOTS:
            raise AttributeError(name)
        return self._forward(name)

    @override
    def __setattr__(self, name: str, value: Any, /) -> None:
        if (name in _SLOTS) or _is_dunder(name):
            object.__setattr__(self, name, value)
        else:
            setattr(self._get_inner(name), name, value)

    @override
    def __delattr__(self, name: str, /) -> None:
        if name in _SLOTS:
            raise AttributeError(name)
        delattr(self._get_inner(name), name)

    @override
    def __dir__(self) -> list[str]:
        names = set(object.__dir__(self))
        if (inner := self._inner) is not None:
            names.update(dir(inner))
        return sorted(names)

    def __bool__(self) -> bool:
        return bool(self._get_inner("__bool__"))

    def __len__(self) -> int:
        return len(self._get_inner("__len__"))

    def __iter__(self) -> Iterator[Any]:
        return iter(self._get_inner("__iter__"))

    def __contains__(self, item: Any, /) -> bool:
        return item in self._get_inner("__contains__")

    def __getitem__(self, key: Any, /) -> Any:
        return self._get_inner("__getitem__")[key]

    def __setitem__(self, key: Any, value: Any, /) -> None:
        self._get_inner("__setitem__")[key] = value

    def __delitem__(self, key: Any, /) -> None:
        del self._get_inner("__delitem__")[key]

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._get_inner("__call__")(*args, **kwargs)

    @override
    def __repr__(self) -> str:
        inner = self._inner
        desc = "<released>" if inner is None else repr(inner)
        return f"{type(self).__name__}({desc})"

    # copying

    def __copy__(self) -> NoReturn:
        raise DestroyerCopyError(destroyer=self, operation="copy")

    def __deepcopy__(self, memo: dict[int, Any], /) -> NoReturn:
        raise DestroyerCopyError(destroyer=self, operation="deepcopy")

    @override
    def __reduce_ex__(self, protocol: SupportsIndex, /) -> NoReturn:
        raise DestroyerCopyError(destroyer=self, operation="pickle")

    def _forward(self, name: str, /) -> Any:
        inner = self._get_inner(name)
        try:
            return getattr(inner, name)
        except AttributeError as error:
            raise DestroyerNoSuchOperationError(
                inner=inner, method=name, message=str(error)
            ) from error

    def _get_inner(self, method: str, /) -> T:
        inner = self._inner
        if inner is None:
            raise DestroyerReleasedError(method=method)
        return inner


_SLOTS = frozenset(Destroyer.__slots__)


def _get_class_name(obj: Any, /) -> str:
    return type(obj).__name__


def _is_dunder(name: str, /) -> bool:
    return name.startswith("__") and name.endswith("__")


##


def wrap[T](inner: T, /) -> Destroyer[T]:
    """Wrap an object in a destroyer."""
    return Destroyer(inner)


def release(destroyer: Destroyer[Any], /) -> None:
    """Release a destroyer, cleaning up the object inside it."""
    destroyer.release()


##


@dataclass(kw_only=True, slots=True)
class DestroyerError(Exception): ...


@dataclass(kw_only=True, slots=True)
class DestroyerConstructionError(DestroyerError):
    obj: Any


@dataclass(kw_only=True, slots=True)
class DestroyerNoneError(DestroyerConstructionError):
    @override
    def __str__(self) -> str:
        return "Destroyer requires an object; got None"


@dataclass(kw_only=True, slots=True)
class DestroyerNotAnObjectError(DestroyerConstructionError):
    @override
    def __str__(self) -> str:
        return f"Destroyer requires an object; got {_get_class_name(self.obj)} {self.obj!r}"


@dataclass(kw_only=True, slots=True)
class DestroyerMissingCleanupError(DestroyerConstructionError):
    @override
    def __str__(self) -> str:
        return f"Destroyer requires that {_get_class_name(self.obj)} has a cleanup method"


@dataclass(kw_only=True, slots=True)
class DestroyerNoSuchOperationError(DestroyerError, AttributeError):
    inner: Any
    method: str
    message: str

    @override
    def __str__(self) -> str:
        return self.message


@dataclass(kw_only=True, slots=True)
class DestroyerReleasedError(DestroyerError):
    method: str

    @override
    def __str__(self) -> str:
        return f"Cannot use {self.method!r}; destroyer has already been released"


@dataclass(kw_only=True, slots=True)
class DestroyerAlreadyLiveError(DestroyerError):
    inner: Any

    @override
    def __str__(self) -> str:
        return f"Destroyer is already attached to {_get_class_name(self.inner)}; release it first"


@dataclass(kw_only=True, slots=True)
class DestroyerCopyError(DestroyerError, TypeError):
    destroyer: Destroyer[Any]
    operation: str

    @override
    def __str__(self) -> str:
        return f"Cannot {self.operation} {self.destroyer!r}; it must stay the only handle on its cleanup"


__all__ = [
    "Destroyer",
    "DestroyerAlreadyLiveError",
    "DestroyerConstructionError",
    "DestroyerCopyError",
    "DestroyerError",
    "DestroyerMissingCleanupError",
    "DestroyerNoSuchOperationError",
    "DestroyerNoneError",
    "DestroyerNotAnObjectError",
    "DestroyerReleasedError",
    "release",
    "wrap",
]
