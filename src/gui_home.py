from __future__ import annotations

from concurrent.futures import Future
import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable

from src.config import AppConfig
from src.gui_distance import DistanceScreen
from src.gui_kit.confirm_dialog import TkConfirmDialogService
from src.gui_kit.error_surface import ErrorSurface
from src.gui_kit.layout import BaseScreen
from src.gui_new_visit import NewVisitScreen
from src.navigation.deactivation_guard import ConfirmDialogOptions
from src.navigation.deactivation_guard import DeactivationGuard
from src.navigation.deactivation_guard import guarded_navigation
from src.storage_sqlite_port import DistanceRepository, init_port_db
from src.visit_workflow import VisitWorkflow

logger = logging.getLogger("gui_home")


class HomeScreen(BaseScreen):
    """Landing screen; holds no editable state so it is always safe to leave."""

    def __init__(self, parent: tk.Widget, app: "App") -> None:
        super().__init__(parent)
        self.app = app
        self.build()

    def build(self) -> None:
        outer = ttk.Frame(self, padding=24)
        outer.pack(fill="both", expand=True)
        self.build_header(outer, title="Port Visit Tracker")

        card = ttk.Frame(outer)
        card.pack(fill="x")
        ttk.Button(
            card,
            text="New Visit -> register a ship's upcoming arrival and inbound trip",
            command=lambda: self.app.navigate("new_visit"),
        ).pack(fill="x", pady=6)
        ttk.Button(
            card,
            text="Distance to Shannon -> distance/ETA from a position report, with history",
            command=lambda: self.app.navigate("distance"),
        ).pack(fill="x", pady=6)
        self.build_status_bar(outer)


class App(ttk.Frame):
    """
    App container that manages screens and switches between them.

    Every switch goes through the deactivation guard so an edited form asks
    before its changes are thrown away. Closing the main window does too.
    """

    def __init__(
        self,
        root: tk.Tk,
        cfg: AppConfig,
        *,
        open_dialog: Callable[[ConfirmDialogOptions], Future] | None = None,
    ) -> None:
        super().__init__(root)
        self.root = root
        self.cfg = cfg

        self.root.title("Port Visit Tracker")
        self.root.geometry("1000x640")
        self.pack(fill="both", expand=True)

        self.dialogs = TkConfirmDialogService(root)
        self.guard = DeactivationGuard(open_dialog or self.dialogs.open)
        self.error_surface = ErrorSurface(
            context="Navigation",
            dialog_title="Navigation error",
            set_status=lambda text: self.screens[self.current_screen].set_status(text),
        )

        self.screen_container = ttk.Frame(self)
        self.screen_container.pack(fill="both", expand=True)

        init_port_db(cfg.sqlite_db_path)
        workflow = VisitWorkflow.for_database(cfg.sqlite_db_path, recorded_by=cfg.recorded_by)
        distance_repository = DistanceRepository(cfg.sqlite_db_path)

        self.screens: dict[str, BaseScreen] = {}
        self.screens["home"] = HomeScreen(self.screen_container, self)
        self.screens["new_visit"] = NewVisitScreen(self.screen_container, self, cfg, workflow)
        self.screens["distance"] = DistanceScreen(self.screen_container, self, cfg, distance_repository)

        for frame in self.screens.values():
            frame.grid(row=0, column=0, sticky="nsew")

        self.screen_container.rowconfigure(0, weight=1)
        self.screen_container.columnconfigure(0, weight=1)

        self.current_screen = "home"
        self.show_screen("home")
        self.root.protocol("WM_DELETE_WINDOW", self.request_close)

    def show_screen(self, name: str) -> None:
        if name not in self.screens:
            available = ", ".join(sorted(self.screens.keys()))
            raise KeyError(
                f"Unknown screen '{name}' in App.show_screen. "
                f"Available screens: {available}. "
                "Fix: call show_screen() with one of the available names."
            )
        self.current_screen = name
        self.screens[name].tkraise()
        logger.debug("Showing screen %s", name)

    def navigate(self, name: str) -> bool | Future:
        """Leave the current screen for ``name`` once the guard allows it."""

        if name == self.current_screen:
            return True
        if name not in self.screens:
            self.show_screen(name)
        leaving = self.screens[self.current_screen]

        def _go() -> None:
            leaving.discard_changes()
            self.show_screen(name)

        return guarded_navigation(
            guard=self.guard,
            form=leaving,
            navigate=_go,
            target=name,
            on_error=lambda exc: self._navigation_failed(exc, name),
        )

    def request_close(self) -> bool | Future:
        return guarded_navigation(
            guard=self.guard,
            form=self.screens[self.current_screen],
            navigate=self.root.destroy,
            target="exit",
            on_error=lambda exc: self._navigation_failed(exc, "exit"),
        )

    def _navigation_failed(self, exc: Exception, target: str) -> None:
        self.error_surface.emit_exception(
            exc,
            location=f"Open '{target}'",
            hint="try again; restart the app if the screen stays blank",
            mode="status",
        )

    def go_home(self) -> bool | Future:
        return self.navigate("home")
