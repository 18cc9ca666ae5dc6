"""External script and stylesheet dependencies."""

from handling_editor.resources.loader import ResourceLoader
from handling_editor.resources.models import Dependency, Resolvable, resolve

__all__ = [
    "Dependency",
    "Resolvable",
    "ResourceLoader",
    "resolve",
]
