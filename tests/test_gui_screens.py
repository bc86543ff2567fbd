import os
import tempfile
import tkinter as tk
import unittest
from concurrent.futures import Future

from src.config import AppConfig
from src.gui_home import App
from src.gui_kit.confirm_dialog import TkConfirmDialogService
from src.navigation.deactivation_guard import DeactivationGuard
from src.navigation.deactivation_guard import UNSAVED_CHANGES_DIALOG


class _DirtyForm:
    def can_deactivate(self) -> bool:
        return False


class _FakeDialogs:
    def __init__(self) -> None:
        self.opened = []
        self.futures: list[Future] = []

    def open(self, options) -> Future:
        future: Future = Future()
        self.opened.append(options)
        self.futures.append(future)
        return future


class _TkCase(unittest.TestCase):
    def setUp(self):
        try:
            self.root = tk.Tk()
        except tk.TclError as exc:
            self.skipTest(f"Tk GUI not available in this environment: {exc}")
            return
        self.root.withdraw()

    def tearDown(self):
        if hasattr(self, "root"):
            try:
                self.root.destroy()
            except tk.TclError:
                pass


class TestAppNavigationGuard(_TkCase):
    def setUp(self):
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        cfg = AppConfig(sqlite_db_path=os.path.join(self._tmp.name, "port_visits.db"), recorded_by="tests")
        self.dialogs = _FakeDialogs()
        self.app = App(self.root, cfg, open_dialog=self.dialogs.open)

    def test_clean_screens_switch_without_prompt(self):
        self.assertEqual(self.app.current_screen, "home")
        self.assertIs(self.app.navigate("new_visit"), True)
        self.assertEqual(self.app.current_screen, "new_visit")
        self.assertIs(self.app.go_home(), True)
        self.assertEqual(self.app.current_screen, "home")
        self.assertEqual(self.dialogs.opened, [])

    def test_unknown_screen_is_rejected(self):
        with self.assertRaises(KeyError):
            self.app.navigate("reports")

    def test_editing_marks_new_visit_dirty(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        self.assertTrue(screen.can_deactivate())
        screen.ship_name_var.set("Shannon Trader")
        self.assertTrue(screen.is_dirty)
        self.assertFalse(screen.can_deactivate())

    def test_stay_on_page_keeps_edits(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        screen.ship_name_var.set("Shannon Trader")

        pending = self.app.navigate("home")
        self.assertIsInstance(pending, Future)
        self.assertEqual(len(self.dialogs.opened), 1)
        self.assertEqual(self.app.current_screen, "new_visit")

        self.dialogs.futures[0].set_result(False)
        self.assertIs(pending.result(timeout=0), False)
        self.assertEqual(self.app.current_screen, "new_visit")
        self.assertEqual(screen.ship_name_var.get(), "Shannon Trader")
        self.assertTrue(screen.is_dirty)

    def test_leave_anyway_discards_edits_and_navigates(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        screen.ship_name_var.set("Shannon Trader")

        pending = self.app.navigate("distance")
        self.dialogs.futures[0].set_result(True)

        self.assertIs(pending.result(timeout=0), True)
        self.assertEqual(self.app.current_screen, "distance")
        self.assertFalse(screen.is_dirty)
        self.assertEqual(screen.ship_name_var.get(), "")

    def test_saved_visit_leaves_screen_clean(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        screen.ship_name_var.set("Shannon Trader")
        screen.gross_tonnage_var.set("8,900")
        screen.eta_var.set("2026-03-15 06:30")
        screen.berth_port_var.set("Foynes")

        visit_id = screen.save()
        self.assertIsNotNone(visit_id)
        self.assertTrue(screen.can_deactivate())
        self.assertIs(self.app.navigate("home"), True)

    def test_invalid_visit_shows_inline_error_and_stays_dirty(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        screen.ship_name_var.set("Shannon Trader")
        screen.gross_tonnage_var.set("lots")

        self.assertIsNone(screen.save())
        self.assertIn("Gross tonnage", screen.inline_error_var.get())
        self.assertIn("Fix:", screen.inline_error_var.get())
        self.assertFalse(screen.can_deactivate())

    def test_distance_position_edits_are_not_unsaved_changes(self):
        self.app.navigate("distance")
        screen = self.app.screens["distance"]
        screen.position_vars["speed"].set("14")
        self.assertTrue(screen.can_deactivate())
        self.assertIsNotNone(screen.last_result)

        screen.ship_name_var.set("Shannon Trader")
        self.assertFalse(screen.can_deactivate())

    def test_saving_calculation_adds_history_row(self):
        self.app.navigate("distance")
        screen = self.app.screens["distance"]
        screen.ship_name_var.set("Shannon Trader")

        record_id = screen.save_calculation()
        self.assertIsNotNone(record_id)
        self.assertTrue(screen.can_deactivate())
        self.assertEqual(screen.history.row_count(), 1)

    def test_pasted_coordinates_fill_position(self):
        self.app.navigate("distance")
        screen = self.app.screens["distance"]
        self.assertTrue(screen.apply_pasted_coordinates("52.5, -10.25"))
        self.assertEqual(screen.position_vars["lat"].get(), "52")
        self.assertEqual(screen.position_vars["longmin"].get(), "15")
        self.assertFalse(screen.apply_pasted_coordinates("nonsense"))

    def test_close_during_back_prompt_only_goes_home(self):
        self.app.navigate("new_visit")
        self.app.screens["new_visit"].ship_name_var.set("Shannon Trader")

        back = self.app.go_home()
        close = self.app.request_close()
        self.assertEqual(len(self.dialogs.opened), 1)

        self.dialogs.futures[0].set_result(True)
        self.assertIs(back.result(timeout=0), True)
        self.assertIs(close.result(timeout=0), False)
        self.assertEqual(self.app.current_screen, "home")
        self.assertTrue(self.root.winfo_exists())

    def test_failed_screen_switch_is_reported_in_status(self):
        self.app.navigate("new_visit")
        screen = self.app.screens["new_visit"]
        screen.ship_name_var.set("Shannon Trader")

        def broken_discard() -> None:
            raise tk.TclError("bad window path name")

        screen.discard_changes = broken_discard
        pending = self.app.navigate("home")
        self.dialogs.futures[0].set_result(True)

        self.assertIs(pending.result(timeout=0), True)
        self.assertEqual(self.app.current_screen, "new_visit")
        self.assertIn("bad window path name", screen.status_var.get())
        self.assertIn("Fix:", screen.status_var.get())

    def test_closing_window_with_edits_asks_first(self):
        self.app.navigate("new_visit")
        self.app.screens["new_visit"].ship_name_var.set("Shannon Trader")

        pending = self.app.request_close()
        self.assertIsInstance(pending, Future)
        self.dialogs.futures[0].set_result(None)
        self.assertIs(pending.result(timeout=0), False)
        self.assertTrue(self.root.winfo_exists())


class TestConfirmDialog(_TkCase):
    def setUp(self):
        super().setUp()
        self.service = TkConfirmDialogService(self.root)

    def test_buttons_use_configured_text(self):
        self.service.open(UNSAVED_CHANGES_DIALOG)
        [dialog] = self.service.open_dialogs
        self.assertEqual(dialog.title(), "Unsaved Changes")
        self.assertEqual(dialog.confirm_button.cget("text"), "Leave Anyway")
        self.assertEqual(dialog.cancel_button.cget("text"), "Stay on Page")
        dialog.close(None)

    def test_confirm_button_resolves_true(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        self.service.open_dialogs[0].confirm_button.invoke()
        self.assertIs(result.result(timeout=0), True)
        self.assertEqual(self.service.open_dialogs, [])

    def test_cancel_button_resolves_false(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        self.service.open_dialogs[0].cancel_button.invoke()
        self.assertIs(result.result(timeout=0), False)

    def test_window_close_is_ignored_while_modal(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        dialog = self.service.open_dialogs[0]
        dialog._on_window_close()
        self.assertFalse(result.done())
        dialog.close(None)
        self.assertIsNone(result.result(timeout=0))

    def test_escape_key_resolves_none(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        dialog = self.service.open_dialogs[0]
        dialog.cancel_button.focus_force()
        self.root.update()
        dialog.cancel_button.event_generate("<Escape>")
        self.root.update()
        self.assertIsNone(result.result(timeout=0))
        self.assertEqual(self.service.open_dialogs, [])

    def test_destroyed_window_resolves_none(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        self.service.open_dialogs[0].destroy()
        self.assertIsNone(result.result(timeout=0))

    def test_destroyed_window_does_not_block_later_prompts(self):
        guard = DeactivationGuard(self.service.open)
        form = _DirtyForm()

        first = guard.can_deactivate(form)
        self.service.open_dialogs[0].destroy()
        self.assertIs(first.result(timeout=0), False)

        second = guard.can_deactivate(form)
        self.assertIsNot(second, first)
        self.assertEqual(len(self.service.open_dialogs), 1)
        self.service.open_dialogs[0].confirm_button.invoke()
        self.assertIs(second.result(timeout=0), True)

    def test_close_is_idempotent(self):
        result = self.service.open(UNSAVED_CHANGES_DIALOG)
        dialog = self.service.open_dialogs[0]
        dialog.close(True)
        dialog.close(False)
        self.assertIs(result.result(timeout=0), True)


if __name__ == "__main__":
    unittest.main()
