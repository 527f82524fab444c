from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ._container import Container


@runtime_checkable
class Provider(Protocol):
    """Builds the instance for an abstract token.

    Usually implemented as a class with a classmethod or staticmethod::

        class DatabaseProvider(Provider):
            @classmethod
            def provide(cls, abstract, container):
                return Database(dsn=container.get(Settings).dsn)

    A class implementing `provide` for itself is a self-providing type and is
    built through that method even without an explicit registration.
    """

    @classmethod
    def provide(cls, abstract: Any, container: Container) -> object: ...


class Transient:
    """Marker base: instances of subclasses are never cached by the container."""


def is_provider(obj: object) -> bool:
    """Whether `obj.provide(abstract, container)` can be called as is.

    Classes qualify only through a classmethod or staticmethod `provide`, since
    an instance method would need a receiver the container does not have.
    """
    if not inspect.isclass(obj):
        return callable(getattr(obj, "provide", None))

    # Protocol classes declare `provide` but cannot build anything.
    if getattr(obj, "_is_protocol", False):
        return False

    try:
        attr = inspect.getattr_static(obj, "provide")
    except AttributeError:
        return False
    return isinstance(attr, (classmethod, staticmethod))


def is_transient(obj: object) -> bool:
    return isinstance(obj, Transient)
