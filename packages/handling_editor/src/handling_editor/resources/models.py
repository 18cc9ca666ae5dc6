"""Dependency models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

# A literal URL, or a zero-argument resolver returning a URL. Anything other
# than a string from a resolver means "not resolvable yet".
Resolvable = str | Callable[[], object]


def _always_false() -> bool:
    return False


@dataclass(frozen=True)
class Dependency:
    """Named bundle of external scripts and stylesheets."""

    name: str
    scripts: tuple[Resolvable, ...] = ()
    styles: tuple[Resolvable, ...] = ()
    is_loaded: Callable[[], bool] = field(default=_always_false)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scripts", tuple(self.scripts))
        object.__setattr__(self, "styles", tuple(self.styles))


def resolve(resource: Resolvable) -> str | None:
    """Resolve a resource to a URL, or None if it is not available yet."""
    value = resource() if callable(resource) else resource
    return value if isinstance(value, str) else None
