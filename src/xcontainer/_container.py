from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._arguments import ArgumentResolver, class_signature, class_type_hints, materialize
from ._callables import as_callback, signature_of
from ._errors import CyclicDependencyError, UnknownTypeError
from ._imports import import_string
from ._markers import is_provider, is_transient


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._arguments import CustomResolver

    Token = type[Any] | str

T = TypeVar("T")


class Container:
    """Minimal DI container.

    - bind abstract tokens to concrete ones (chains are followed)
    - register pre-built instances, transient types and providers
    - resolve with constructor injection, caching singletons
    - call functions and methods with injected arguments.

    Tokens are classes or strings. A string token with nothing registered for it
    is imported as a dotted path ("package.module.Class").
    """

    def __init__(self, *, self_providing: bool = True) -> None:
        self._bindings: dict[Any, Any] = {}
        self._instances: dict[Any, object] = {}
        self._registered: set[Any] = set()  # tokens pinned through instance()
        self._transient: set[Any] = set()
        self._providers: dict[Any, Any] = {}
        self._self_providing = self_providing
        self._resolving: list[Any] = []
        self._lock = threading.RLock()
        self._arguments = ArgumentResolver(self)

    @staticmethod
    def container() -> Container:
        """Return the process-wide default container."""
        return container()

    @staticmethod
    def set_container(c: Container | None) -> None:
        set_container(c)

    def bind(self, abstract: Token, concrete: Token) -> None:
        """Resolve `abstract` as `concrete`.

        Example:
          container.bind(Storage, DiskStorage)
          container.bind("storage", Storage)  # chains: "storage" -> Storage -> DiskStorage

        """
        with self._lock:
            self._bindings[abstract] = concrete

    def instance(self, concrete: Token, instance: object) -> None:
        """Register a pre-built instance, replacing any cached one."""
        with self._lock:
            self._instances[concrete] = instance
            self._registered.add(concrete)

    def transient(self, concrete: Token) -> None:
        """Never cache instances of `concrete`."""
        with self._lock:
            self._transient.add(concrete)

    def provider(self, abstract: Token, provider: Any) -> None:
        """Build `abstract` with `provider.provide(abstract, container)`."""
        if not is_provider(provider):
            msg = f"{provider!r} does not implement provide(abstract, container)"
            raise TypeError(msg)

        with self._lock:
            self._providers[abstract] = provider

    def forget(self, concrete: Token) -> None:
        """Drop the cached instance of `concrete`, if any."""
        with self._lock:
            self._instances.pop(concrete, None)
            self._registered.discard(concrete)

    def concrete(self, abstract: Token) -> Token:
        """Follow the binding chain of `abstract` to its final token."""
        with self._lock:
            chain = [abstract]
            token = abstract
            while token in self._bindings:
                token = self._bindings[token]
                if token in chain:
                    raise CyclicDependencyError([*chain, token])
                chain.append(token)
            return token

    @overload
    def get(self, abstract: type[T]) -> T: ...

    @overload
    def get(self, abstract: str) -> object: ...

    def get(self, abstract: Token) -> object:
        return self.resolve(abstract)

    __call__ = get

    @overload
    def resolve(self, abstract: type[T], values: Mapping[str, Any] | None = None, /, **overrides: Any) -> T: ...

    @overload
    def resolve(self, abstract: str, values: Mapping[str, Any] | None = None, /, **overrides: Any) -> object: ...

    def resolve(self, abstract: Token, values: Mapping[str, Any] | None = None, /, **overrides: Any) -> object:
        """Resolve the token to an instance.

        - Follow bindings to the concrete token.
        - Return an instance registered with `instance()`; return a cached one
          only when no explicit values are given.
        - Otherwise build through a provider or by constructor injection.
        - Cache the result unless it is transient or explicit values were given.

        `values` and `overrides` supply constructor arguments by name.
        """
        explicit = {**(values or {}), **overrides}

        with self._lock:
            concrete = self.concrete(abstract)

            # registered instances win even over explicit values; cached ones do not
            if concrete in self._instances and (not explicit or concrete in self._registered):
                return self._instances[concrete]

            # a provider keyed on the alias may build its own concrete through get()
            key = abstract if abstract != concrete and abstract in self._providers else concrete
            if key in self._resolving:
                start = self._resolving.index(key)
                raise CyclicDependencyError([*self._resolving[start:], key])

            self._resolving.append(key)
            try:
                instance = self._build(abstract, concrete, explicit)
            finally:
                self._resolving.pop()

            if concrete in self._transient or is_transient(instance) or explicit:
                return instance

            self._instances[concrete] = instance
            return instance

    def call(
        self,
        callback: Any,
        values: Mapping[str, Any] | None = None,
        resolver: CustomResolver | None = None,
    ) -> Any:
        """Call a function or method with its parameters resolved.

        `resolver(declared_type, name)` is asked first for every parameter; a
        None answer falls back to `values`, defaults and the container.
        """
        cb = as_callback(callback)
        sig, hints = signature_of(cb)
        with self._lock:
            arguments = self._arguments.resolve(cb.target, sig, hints, values, resolver)

        args, kwargs = materialize(sig, arguments)
        return cb.target(*args, **kwargs)

    def call_args(
        self,
        callback: Any,
        values: Mapping[str, Any] | None = None,
        resolver: CustomResolver | None = None,
    ) -> dict[str, Any]:
        """Resolve the parameters `call` would pass, without calling."""
        cb = as_callback(callback)
        sig, hints = signature_of(cb)
        with self._lock:
            return self._arguments.resolve(cb.target, sig, hints, values, resolver)

    def _build(self, abstract: Token, concrete: Token, explicit: dict[str, Any]) -> object:
        provider = self._providers.get(abstract)
        if provider is None:
            provider = self._providers.get(concrete)

        if provider is not None:
            instance = provider.provide(abstract, self)
            if instance is not None:
                logger.debug("Provided %r with %r", abstract, provider)
                return instance

        cls = _load_type(concrete)

        if self._self_providing and is_provider(cls):
            instance = cls.provide(abstract, self)
            if instance is not None:
                logger.debug("%s provided itself", cls.__qualname__)
                return instance

        sig = class_signature(cls)
        arguments = self._arguments.resolve(cls, sig, class_type_hints(cls), explicit)
        args, kwargs = materialize(sig, arguments)
        logger.debug("Constructing %s for %r", cls.__qualname__, abstract)
        return cls(*args, **kwargs)


def _load_type(token: Token) -> type[Any]:
    if inspect.isclass(token):
        return token

    if not isinstance(token, str):
        raise UnknownTypeError(token, "tokens must be classes or strings")

    try:
        obj = import_string(token)
    except (ImportError, AttributeError) as exc:
        raise UnknownTypeError(token, str(exc)) from exc

    if not inspect.isclass(obj):
        raise UnknownTypeError(token, f"{type(obj).__name__} is not a class")
    return obj


_default: Container | None = None
_default_lock = threading.Lock()


def container() -> Container:
    """Return the process-wide default container, creating it on first use.

    Prefer passing a container explicitly; this accessor exists for ambient
    access from code that cannot receive one.
    """
    global _default  # noqa: PLW0603
    with _default_lock:
        if _default is None:
            _default = Container()
        return _default


def set_container(c: Container | None) -> None:
    """Replace the default container; None resets it to a fresh one on next access."""
    global _default  # noqa: PLW0603
    with _default_lock:
        _default = c
