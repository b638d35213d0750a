"""
Implementation registries for metrics and linkage rules.

Keys are members of the closed ``Metric`` / ``Linkage`` enums; plain names
are resolved through the enum first, so lookups never fall through to an
open-ended string table.
"""

from typing import Any, Callable, Dict, Type

from .options import Linkage, Metric


class Registry:
    """
    Enum-keyed registry of implementations.

    Usage:
        linkages = Registry("linkages", Linkage)

        @linkages.register(Linkage.SINGLE)
        def single_update(...):
            ...

        update = linkages.get("single")
    """

    def __init__(self, name: str, key_type: Type):
        self.name = name
        self.key_type = key_type
        self._registry: Dict[Any, Callable] = {}

    def register(self, key, fn: Callable = None):
        """
        Register an implementation for an enum member.

        Can be used as a decorator or called directly with ``fn``.
        """
        member = self.key_type.parse(key)

        def decorator(fn_):
            self._registry[member] = fn_
            return fn_

        if fn is not None:
            return decorator(fn)
        return decorator

    def get(self, key) -> Callable:
        """Get the implementation for a member or name."""
        member = self.key_type.parse(key)
        if member not in self._registry:
            raise LookupError(
                f"'{member.value}' has no implementation in {self.name} registry. "
                f"Available: {self.list()}"
            )
        return self._registry[member]

    def list(self) -> list:
        """List registered names in enum declaration order."""
        return [m.value for m in self.key_type if m in self._registry]

    def __contains__(self, key) -> bool:
        try:
            member = self.key_type.parse(key)
        except KeyError:
            return False
        return member in self._registry


_registries: Dict[str, Registry] = {}


def get_registry(name: str) -> Registry:
    """Get one of the named registries ("metrics" or "linkages")."""
    if name not in _registries:
        raise KeyError(f"Unknown registry '{name}'. Available: {list(_registries)}")
    return _registries[name]


def _create(name: str, key_type: Type) -> Registry:
    _registries[name] = Registry(name, key_type)
    return _registries[name]


metrics = _create("metrics", Metric)
linkages = _create("linkages", Linkage)
