"""Callback shapes accepted by `Container.call` and `Container.call_args`."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._arguments import callable_type_hints
from ._errors import InvalidCallableError
from ._imports import import_string


if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class FunctionCallback:
    """A plain function, lambda or closure."""

    func: Callable[..., Any]

    @property
    def target(self) -> Callable[..., Any]:
        return self.func


@dataclass(frozen=True)
class BoundMethodCallback:
    """A method bound to an instance (or a classmethod bound to its class)."""

    receiver: object
    name: str

    @property
    def target(self) -> Callable[..., Any]:
        return getattr(self.receiver, self.name)


@dataclass(frozen=True)
class StaticMethodCallback:
    owner: type
    name: str

    @property
    def target(self) -> Callable[..., Any]:
        return getattr(self.owner, self.name)


Callback = FunctionCallback | BoundMethodCallback | StaticMethodCallback


def as_callback(obj: object) -> Callback:
    """Classify `obj` into one of the supported callback shapes.

    Accepted forms:
    - function, lambda or closure
    - bound method (`service.handle`, `Service.build` for classmethods)
    - `(instance, "method")` or `(Class, "static_or_class_method")`
    - `"package.module:Class.method"` or `"package.module.function"`

    Raises InvalidCallableError for anything else.
    """
    if isinstance(obj, (FunctionCallback, BoundMethodCallback, StaticMethodCallback)):
        return obj

    if isinstance(obj, str):
        return _from_path(obj)

    if isinstance(obj, tuple):
        if len(obj) != 2 or not isinstance(obj[1], str):  # noqa: PLR2004
            msg = f"Callback pair must be (target, 'method_name'), got {obj!r}"
            raise InvalidCallableError(msg)
        return _from_pair(obj[0], obj[1])

    if inspect.ismethod(obj):
        return BoundMethodCallback(obj.__self__, obj.__name__)

    if inspect.isfunction(obj):
        return FunctionCallback(obj)

    msg = f"Invalid callback type: {type(obj).__name__}"
    raise InvalidCallableError(msg)


def _from_path(path: str) -> Callback:
    try:
        resolved = import_string(path)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot import callback {path!r}: {exc}"
        raise InvalidCallableError(msg) from exc

    # "module:Class.method" keeps its owner so static methods stay static
    owner_path, _, name = path.rpartition(".")
    if "." in owner_path or ":" in owner_path:
        try:
            owner = import_string(owner_path)
        except (ImportError, AttributeError):
            owner = None
        if inspect.isclass(owner):
            return _from_pair(owner, name)

    if not (inspect.isfunction(resolved) or inspect.ismethod(resolved)):
        msg = f"Callback path {path!r} must name a function or method"
        raise InvalidCallableError(msg)
    return as_callback(resolved)


def _from_pair(target: object, name: str) -> Callback:
    if not inspect.isclass(target):
        if not inspect.ismethod(getattr(target, name, None)):
            msg = f"{type(target).__name__}.{name} is not a method"
            raise InvalidCallableError(msg)
        return BoundMethodCallback(target, name)

    try:
        attr = inspect.getattr_static(target, name)
    except AttributeError as exc:
        msg = f"{target.__name__} has no attribute {name!r}"
        raise InvalidCallableError(msg) from exc

    if isinstance(attr, classmethod):
        return BoundMethodCallback(target, name)
    if isinstance(attr, staticmethod):
        return StaticMethodCallback(target, name)

    msg = f"{target.__name__}.{name} must be a staticmethod or classmethod when given with the class"
    raise InvalidCallableError(msg)


def signature_of(callback: Callback) -> tuple[inspect.Signature, dict[str, Any]]:
    target = callback.target
    return inspect.signature(target), callable_type_hints(target)
