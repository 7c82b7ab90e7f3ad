"""Instance container - hands out one predicate instance per predicate class."""
from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class Container:
    """Default container: lazily instantiates classes with no arguments and caches them."""

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}

    def get(self, cls: type[T]) -> T:
        if cls not in self._instances:
            self._instances[cls] = cls()
        return self._instances[cls]

    def register(self, cls: type[T], instance: T) -> None:
        """Bind a pre-built instance, e.g. a predicate that needs constructor arguments."""
        self._instances[cls] = instance


_CONTAINER: Container = Container()


def use_container(container: Container) -> None:
    """Swap the process-wide container (e.g. for one backed by a DI framework)."""
    global _CONTAINER
    _CONTAINER = container


def get_container() -> Container:
    return _CONTAINER


def get_from_container(cls: type[T]) -> T:
    return _CONTAINER.get(cls)
