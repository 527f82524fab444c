from __future__ import annotations

import importlib
from typing import Any


def import_string(path: str) -> Any:
    """Import an object from `"package.module:Qual.name"` or `"package.module.Qual.name"`.

    Without a colon the longest importable module prefix wins. Raises
    ImportError when no module prefix imports and AttributeError when the
    remaining attribute path is missing.
    """
    if ":" in path:
        module_name, _, qualname = path.partition(":")
        return _get_attr_path(importlib.import_module(module_name), qualname, path)

    parts = path.split(".")
    for i in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:i])
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # A missing dependency inside an existing module must surface.
            if exc.name is None or not (module_name == exc.name or module_name.startswith(exc.name + ".")):
                raise
            continue
        return _get_attr_path(module, ".".join(parts[i:]), path)

    msg = f"No module found in {path!r}"
    raise ImportError(msg)


def _get_attr_path(obj: Any, qualname: str, path: str) -> Any:
    for attr in qualname.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            msg = f"{path!r} has no attribute {attr!r}"
            raise AttributeError(msg) from exc
    return obj
