"""Toast notifications rendered by Toastify inside the page."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from handling_editor.boundaries import DocumentBoundary

logger = logging.getLogger(__name__)

PERSISTENT = -1


class ToastStyle(str, Enum):
    """Preset visual themes."""

    DEFAULT = "default"
    INFO = "info"
    ERROR = "error"


TOAST_STYLES: dict[ToastStyle, dict[str, str]] = {
    ToastStyle.DEFAULT: {
        "background": "linear-gradient(to right bottom, rgb(158, 168, 170), rgb(124, 147, 155))",
        "cursor": "initial",
    },
    ToastStyle.INFO: {
        "background": "linear-gradient(to bottom right, rgb(17, 130, 114), rgb(70, 110, 125))",
        "cursor": "initial",
    },
    ToastStyle.ERROR: {
        "background": "linear-gradient(to right bottom, rgb(162, 51, 56), rgb(130, 6, 12))",
        "cursor": "initial",
    },
}


class Toast(BaseModel, frozen=True):
    """A message for the notification widget. ``duration_ms=-1`` never expires."""

    text: str
    style: ToastStyle = ToastStyle.DEFAULT
    duration_ms: int = 5000
    dismissible: bool = True


def toastify_payload(toast: Toast) -> dict[str, Any]:
    """Build the options object passed to ``Toastify(...)``."""
    return {
        "text": toast.text,
        "duration": toast.duration_ms,
        "escapeMarkup": False,
        "close": toast.dismissible,
        "gravity": "top",
        "position": "center",
        "stopOnFocus": True,
        "style": TOAST_STYLES.get(toast.style, TOAST_STYLES[ToastStyle.DEFAULT]),
    }


def toastify_script(toast: Toast) -> str:
    """Inline script showing ``toast`` from page context."""
    payload = json.dumps(toastify_payload(toast))
    return f"{{\n    const payload = {payload}\n    Toastify(payload)?.showToast()\n}}"


class ToastifyNotifier:
    """Show toasts by running Toastify from an inline page script."""

    def __init__(self, document: DocumentBoundary) -> None:
        self._document = document

    def show_message(self, toast: Toast) -> None:
        logger.debug("Showing %s toast: %s", toast.style.value, toast.text)
        self._document.append_raw_script(toastify_script(toast))
