"""Minimal dependency injection container.

This package resolves classes by constructor injection, following bindings from
abstract tokens to concrete ones, caching instances as singletons unless told
otherwise, and calling functions or methods with injected arguments.

Exports:
- `Container`: the container (bind / instance / transient / provider / get / resolve / call).
- `container`, `set_container`: access or replace the process-wide default container.
- `Provider`: protocol for objects that build an abstract token themselves.
- `Transient`: marker base for types that must never be cached.
- `ResolutionError` and its subclasses, plus `InvalidCallableError`.
"""

from ._callables import BoundMethodCallback, Callback, FunctionCallback, StaticMethodCallback, as_callback
from ._container import Container, container, set_container
from ._errors import (
    CyclicDependencyError,
    InvalidCallableError,
    ResolutionError,
    UnknownTypeError,
    UnresolvableParameterError,
)
from ._markers import Provider, Transient


__all__ = [
    "BoundMethodCallback",
    "Callback",
    "Container",
    "CyclicDependencyError",
    "FunctionCallback",
    "InvalidCallableError",
    "Provider",
    "ResolutionError",
    "StaticMethodCallback",
    "Transient",
    "UnknownTypeError",
    "UnresolvableParameterError",
    "as_callback",
    "container",
    "set_container",
]
