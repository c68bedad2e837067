from __future__ import annotations

from pytest import mark, param, raises

from destroyer.core import Destroyer, DestroyerMissingCleanupError
from destroyer.weakref import (
    _ATTACHED,
    AttachedDestroyer,
    add_finalizer,
    attach_destroyer,
)
from tests.nodes import Node


class Owner: ...


class SlottedOwner:
    __slots__ = ()


class TestAddFinalizer:
    def test_main(self) -> None:
        flag = False

        def set_flag() -> None:
            nonlocal flag
            flag = True

        owner = Owner()
        _ = add_finalizer(owner, set_flag)
        assert not flag
        del owner
        assert flag


class TestAttachDestroyer:
    def test_main(self) -> None:
        owner = Owner()
        node = Node()
        destroyer = attach_destroyer(owner, node)
        assert not destroyer.released
        assert node.cleanups == 0
        del owner
        assert destroyer.released
        assert node.cleanups == 1

    def test_dropped_destroyer(self) -> None:
        owner = Owner()
        node = Node()
        _ = attach_destroyer(owner, node)
        _ = None
        assert node.cleanups == 0
        del owner
        assert node.cleanups == 1

    def test_released_early(self) -> None:
        owner = Owner()
        node = Node()
        destroyer = attach_destroyer(owner, node)
        destroyer.release()
        assert node.cleanups == 1
        del owner
        assert node.cleanups == 1

    def test_forwarding(self) -> None:
        owner = Owner()
        destroyer = attach_destroyer(owner, Node(value=1))
        assert destroyer.add(2, 3) == 6

    def test_type(self) -> None:
        destroyer = attach_destroyer(Owner(), Node())
        assert isinstance(destroyer, AttachedDestroyer)
        assert isinstance(destroyer, Destroyer)

    @mark.parametrize("owner", [param(1), param("owner"), param(SlottedOwner())])
    def test_error_owner_not_weakrefable(self, *, owner: object) -> None:
        node = Node()
        before = len(_ATTACHED)
        with raises(TypeError, match="cannot create weak reference"):
            _ = attach_destroyer(owner, node)
        assert node.cleanups == 0
        assert len(_ATTACHED) == before

    def test_error_missing_cleanup(self) -> None:
        owner = Owner()
        before = len(_ATTACHED)
        with raises(DestroyerMissingCleanupError):
            _ = attach_destroyer(owner, object())
        del owner
        assert len(_ATTACHED) == before

    def test_released_early_drops_entry(self) -> None:
        owner = Owner()
        node = Node()
        destroyer = attach_destroyer(owner, node)
        assert id(destroyer) in _ATTACHED
        destroyer.release()
        assert id(destroyer) not in _ATTACHED
        assert node.cleanups == 1
        del owner
        assert node.cleanups == 1

    def test_owner_reclaimed_drops_entry(self) -> None:
        owner = Owner()
        destroyer = attach_destroyer(owner, Node())
        del owner
        assert id(destroyer) not in _ATTACHED
