import unittest

from src.gui_kit.error_surface import ErrorSurface
from src.gui_kit.error_surface import coerce_actionable_message
from src.gui_kit.error_surface import format_actionable_error
from src.gui_kit.error_surface import is_actionable_message


class TestActionableMessages(unittest.TestCase):
    def test_format_uses_canonical_shape(self):
        message = format_actionable_error("New Visit", "Gross tonnage", "value is required", "enter a whole number")
        self.assertEqual(message, "New Visit / Gross tonnage: value is required. Fix: enter a whole number.")
        self.assertTrue(is_actionable_message(message))

    def test_format_fills_blank_parts(self):
        message = format_actionable_error("", "  ", "", "")
        self.assertEqual(message, "Unknown: unknown issue. Fix: review input and retry.")

    def test_plain_text_is_not_actionable(self):
        self.assertFalse(is_actionable_message("boom"))

    def test_coerce_keeps_actionable_text_and_unwraps_key_errors(self):
        raw = KeyError("Port visits / Visit: no record with id 'x'. Fix: refresh the list and pick an existing record.")
        message = coerce_actionable_message("New Visit", raw, location="Visit", hint="retry")
        self.assertFalse(message.startswith("'"))
        self.assertTrue(message.startswith("Port visits / Visit"))

    def test_coerce_wraps_raw_failures(self):
        message = coerce_actionable_message("Distance to Shannon", RuntimeError("disk full"), location="Save", hint="free space")
        self.assertEqual(message, "Distance to Shannon / Save: disk full. Fix: free space.")


class TestErrorSurface(unittest.TestCase):
    def test_emit_routes_to_dialog_status_and_inline(self):
        calls: list[str] = []
        surface = ErrorSurface(
            context="New Visit",
            dialog_title="New visit error",
            show_dialog=lambda title, msg: calls.append(f"dialog:{title}:{msg}"),
            set_status=lambda msg: calls.append(f"status:{msg}"),
            set_inline=lambda msg: calls.append(f"inline:{msg}"),
        )

        message = surface.emit(location="Ship name", issue="ship name is required", hint="enter the vessel name", mode="mixed")
        self.assertIn(message, calls[0])
        self.assertTrue(any(item.startswith("dialog:") for item in calls))
        self.assertTrue(any(item.startswith("status:") for item in calls))
        self.assertTrue(any(item.startswith("inline:") for item in calls))

    def test_inline_mode_skips_dialog(self):
        calls: list[str] = []
        surface = ErrorSurface(
            context="New Visit",
            dialog_title="New visit error",
            show_dialog=lambda _title, msg: calls.append(f"dialog:{msg}"),
            set_inline=lambda msg: calls.append(f"inline:{msg}"),
        )
        surface.emit_exception(ValueError("bad ETA"), location="ETA", hint="use YYYY-MM-DD HH:MM", mode="inline")
        self.assertEqual(calls, ["inline:New Visit / ETA: bad ETA. Fix: use YYYY-MM-DD HH:MM."])

        surface.clear_inline()
        self.assertEqual(calls[-1], "inline:")

    def test_emit_warning_uses_warning_title_when_available(self):
        calls: list[tuple[str, str]] = []
        surface = ErrorSurface(
            context="Distance to Shannon",
            dialog_title="Distance calculation error",
            warning_title="Distance calculation warning",
            show_warning=lambda title, msg: calls.append((title, msg)),
        )
        message = surface.emit_warning(
            location="Ship name",
            issue="a ship name is required to save",
            hint="enter the vessel name",
            mode="dialog",
        )
        self.assertEqual(calls, [("Distance calculation warning", message)])
        self.assertTrue(is_actionable_message(message))

    def test_unknown_mode_falls_back_to_mixed(self):
        calls: list[str] = []
        surface = ErrorSurface(
            context="New Visit",
            dialog_title="New visit error",
            show_dialog=lambda _title, _msg: calls.append("dialog"),
            set_status=lambda _msg: calls.append("status"),
        )
        surface.emit(location="Form", issue="x", hint="y", mode="popup")
        self.assertEqual(calls, ["dialog", "status"])


if __name__ == "__main__":
    unittest.main()
