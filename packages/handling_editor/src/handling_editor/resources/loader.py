"""Idempotent loader for external script and stylesheet dependencies."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from handling_editor.errors import GateConfigurationError
from handling_editor.resources.models import Dependency, resolve

if TYPE_CHECKING:
    from handling_editor.boundaries import DocumentBoundary

logger = logging.getLogger(__name__)

DependencySet = Mapping[str, Dependency] | Iterable[Dependency]


def _normalize_registry(dependencies: DependencySet) -> dict[str, Dependency]:
    if isinstance(dependencies, (str, bytes)) or not isinstance(dependencies, Iterable):
        msg = f"Dependency registry must be a mapping or iterable, got {type(dependencies).__name__}."
        raise GateConfigurationError(msg)

    items = dependencies.values() if isinstance(dependencies, Mapping) else dependencies
    registry: dict[str, Dependency] = {}
    for dependency in items:
        if not isinstance(dependency, Dependency):
            msg = f"Expected a Dependency, got {type(dependency).__name__}."
            raise GateConfigurationError(msg)
        if dependency.name in registry:
            msg = f"Duplicate dependency '{dependency.name}'."
            raise GateConfigurationError(msg)
        registry[dependency.name] = dependency
    return registry


class ResourceLoader:
    """Append dependency resources to the page, at most once per dependency.

    A dependency is marked loaded after its first load attempt, even when none
    of its resources resolved. Retrying resolution is up to the caller.
    """

    def __init__(self, document: DocumentBoundary, dependencies: DependencySet = ()) -> None:
        self._document = document
        self._registry = _normalize_registry(dependencies)
        self._loaded: set[str] = set()

    @property
    def dependencies(self) -> list[Dependency]:
        return list(self._registry.values())

    def is_marked_loaded(self, dependency: Dependency | str) -> bool:
        """Return True once a load attempt was made for the dependency."""
        name = dependency if isinstance(dependency, str) else dependency.name
        return name in self._loaded

    def load_dependency(self, dependency: Dependency) -> bool:
        """Append the dependency's scripts then styles in declaration order.

        Returns:
            True if a load attempt was made, False if it was already loaded.
        """
        if dependency.name in self._loaded:
            logger.info("Dependency '%s' is already loaded; skipping.", dependency.name)
            return False

        appended = 0
        for resource in dependency.scripts:
            url = resolve(resource)
            if url is None:
                logger.debug("Script for '%s' is not resolvable yet.", dependency.name)
                continue
            self._document.append_script(url)
            appended += 1

        for resource in dependency.styles:
            url = resolve(resource)
            if url is None:
                logger.debug("Style for '%s' is not resolvable yet.", dependency.name)
                continue
            self._document.append_style(url)
            appended += 1

        self._loaded.add(dependency.name)
        logger.info("Loaded dependency '%s' (%d resources appended).", dependency.name, appended)
        return True

    def load_all(self, dependencies: DependencySet | None = None) -> None:
        """Load every dependency in ``dependencies``, or the whole registry."""
        targets = (
            self._registry if dependencies is None else _normalize_registry(dependencies)
        )
        for dependency in targets.values():
            self.load_dependency(dependency)
