"""Public gui_kit API and machine-readable component catalog.

The catalog gives tools a stable way to discover reusable gui_kit components
without scraping module internals.
"""

from __future__ import annotations

from typing import TypedDict

from src.gui_kit.confirm_dialog import ConfirmDialog, TkConfirmDialogService
from src.gui_kit.error_surface import ErrorSurface
from src.gui_kit.feedback import ToastCenter
from src.gui_kit.forms import FormBuilder
from src.gui_kit.layout import BaseScreen
from src.gui_kit.table import HistoryTable


class GUIKitComponent(TypedDict):
    """Machine-readable descriptor for one public gui_kit component."""

    export: str
    module: str
    kind: str
    summary: str

__all__ = [
    "BaseScreen",
    "ConfirmDialog",
    "ErrorSurface",
    "FormBuilder",
    "GUIKitComponent",
    "HistoryTable",
    "TkConfirmDialogService",
    "ToastCenter",
    "get_component_catalog",
]

_COMPONENT_CATALOG: tuple[GUIKitComponent, ...] = (
    {
        "export": "BaseScreen",
        "module": "src.gui_kit.layout",
        "kind": "screen_base",
        "summary": "Base screen with status line and dirty-state tracking; implements can_deactivate().",
    },
    {
        "export": "ConfirmDialog",
        "module": "src.gui_kit.confirm_dialog",
        "kind": "dialog",
        "summary": "Modal two-button confirmation whose answer arrives as a future.",
    },
    {
        "export": "ErrorSurface",
        "module": "src.gui_kit.error_surface",
        "kind": "error_adapter",
        "summary": "Routes actionable error messages to dialog, status, or inline label.",
    },
    {
        "export": "FormBuilder",
        "module": "src.gui_kit.forms",
        "kind": "form_builder",
        "summary": "Grid-based helper for labeled Tk controls that mark their screen dirty.",
    },
    {
        "export": "HistoryTable",
        "module": "src.gui_kit.table",
        "kind": "table_widget",
        "summary": "Treeview listing saved distance calculations, newest first.",
    },
    {
        "export": "TkConfirmDialogService",
        "module": "src.gui_kit.confirm_dialog",
        "kind": "dialog_service",
        "summary": "Opens ConfirmDialog windows for the navigation guard.",
    },
    {
        "export": "ToastCenter",
        "module": "src.gui_kit.feedback",
        "kind": "feedback",
        "summary": "Stacked non-blocking toast notifications.",
    },
)


def get_component_catalog() -> tuple[GUIKitComponent, ...]:
    """Return stable gui_kit component metadata for tools and docs."""

    return _COMPONENT_CATALOG


def _validate_component_catalog() -> None:
    required_keys = ("export", "module", "kind", "summary")
    for index, component in enumerate(_COMPONENT_CATALOG, start=1):
        for key in required_keys:
            value = component.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(
                    f"Invalid gui_kit catalog entry #{index}: field '{key}' is missing or blank. "
                    "Fix: provide a non-empty string for each catalog field."
                )

        export = component["export"]
        if export not in __all__ or export not in globals():
            raise ValueError(
                f"Invalid gui_kit catalog entry #{index}: export '{export}' is not exported by src.gui_kit. "
                "Fix: import the symbol and list it in __all__, or correct the catalog entry."
            )

        if not component["module"].startswith("src.gui_kit."):
            raise ValueError(
                f"Invalid gui_kit catalog entry #{index}: module '{component['module']}' must start with 'src.gui_kit.'. "
                "Fix: point the entry to the canonical gui_kit module path."
            )


_validate_component_catalog()
