"""Settings models."""

from handling_editor.models.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
