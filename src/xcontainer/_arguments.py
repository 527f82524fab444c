from __future__ import annotations

import inspect
import logging
import types
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ._errors import UnresolvableParameterError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ._container import Container

    # (declared_type, parameter_name) -> value, or None to fall through
    CustomResolver = Callable[[type | None, str], Any]


class ArgumentResolver:
    """Produce argument values for a constructor or a callable.

    Resolution precedence, per parameter:
    1. custom resolver (when it returns something other than None)
    2. explicit value
    3. default
    4. container lookup of the declared type
    5. error.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    def resolve(
        self,
        owner: Any,
        sig: inspect.Signature,
        hints: Mapping[str, Any],
        values: Mapping[str, Any] | None = None,
        custom: CustomResolver | None = None,
    ) -> dict[str, Any]:
        values = dict(values or {})
        values.pop("self", None)  # never allow passing 'self'

        params = sig.parameters
        arguments: dict[str, Any] = {}
        for name, p in params.items():
            if p.kind is p.VAR_POSITIONAL:
                continue

            # **kwargs receives explicit values that match no named parameter
            if p.kind is p.VAR_KEYWORD:
                arguments[name] = {k: v for k, v in values.items() if k not in params}
                continue

            arguments[name] = self.resolve_param(owner, name, p, hints, values, custom)

        return arguments

    def resolve_param(
        self,
        owner: Any,
        name: str,
        p: inspect.Parameter,
        hints: Mapping[str, Any],
        values: Mapping[str, Any],
        custom: CustomResolver | None = None,
    ) -> Any:
        declared = declared_type(hints.get(name, p.annotation))

        if custom is not None:
            value = custom(declared, name)
            if value is not None:
                return value

        if name in values:
            return values[name]

        if p.default is not p.empty:
            return p.default

        if declared is not None:
            return self._container.get(declared)

        raise UnresolvableParameterError(name, owner)


def materialize(sig: inspect.Signature, arguments: Mapping[str, Any]) -> tuple[list[Any], dict[str, Any]]:
    """Split resolved arguments into call positionals and keywords."""
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for name, p in sig.parameters.items():
        if p.kind is p.POSITIONAL_ONLY:
            args.append(arguments[name])
        elif p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY):
            kwargs[name] = arguments[name]
        elif p.kind is p.VAR_KEYWORD:
            kwargs.update(arguments.get(name, {}))

    return args, kwargs


def declared_type(annotation: Any) -> type | None:
    """Return the class an annotation asks the container for, or None for primitives."""
    if annotation is inspect.Parameter.empty or annotation is Any:
        return None

    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    # Optional[X] and X | None unwrap to X; any other union is not injectable
    if get_origin(annotation) in (Union, types.UnionType):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]

    if get_origin(annotation) is not None or not inspect.isclass(annotation):
        return None

    if annotation.__module__ == "builtins":
        return None

    return annotation


def class_signature(cls: type) -> inspect.Signature:
    if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
        return inspect.Signature()

    try:
        return inspect.signature(cls)
    except ValueError:
        # builtin subclasses without introspectable signatures
        logger.debug("No signature for %s; constructing without arguments", cls.__qualname__)
        return inspect.Signature()


def class_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
    except AttributeError:
        return {}
    return _type_hints(init, cls.__qualname__)


def callable_type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    func = getattr(func, "__func__", func)
    return _type_hints(func, getattr(func, "__qualname__", repr(func)))


def _type_hints(obj: Any, qualname: str) -> dict[str, Any]:
    try:
        hints = get_type_hints(obj)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, qualname)
        hints = {}

    return hints
