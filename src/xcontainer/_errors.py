from __future__ import annotations

from typing import Any


class ResolutionError(RuntimeError):
    pass


class UnresolvableParameterError(ResolutionError):
    """A parameter has no custom value, explicit value, default or resolvable type."""

    def __init__(self, name: str, owner: Any) -> None:
        self.name = name
        self.owner = owner
        owner_repr = getattr(owner, "__qualname__", None) or repr(owner)
        super().__init__(f"Cannot resolve parameter '{name}' of {owner_repr}")


class CyclicDependencyError(ResolutionError):
    """A binding chain or a constructor dependency graph loops back on itself."""

    def __init__(self, chain: list[Any]) -> None:
        self.chain = chain
        super().__init__("Cyclic dependency detected: " + " -> ".join(_token_name(t) for t in chain))


class UnknownTypeError(ResolutionError, LookupError):
    def __init__(self, token: Any, reason: str = "") -> None:
        self.token = token
        msg = f"Cannot find a type for token {token!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class InvalidCallableError(TypeError):
    pass


def _token_name(token: Any) -> str:
    return getattr(token, "__qualname__", None) or str(token)
