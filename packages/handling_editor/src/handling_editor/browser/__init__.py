"""Browser adapters."""

from handling_editor.browser.page import PlaywrightPage

__all__ = ["PlaywrightPage"]
