"""Unsaved-changes protection for screen transitions.

The guard asks the active form whether it can be discarded. Clean forms pass
straight through. Dirty forms get one modal confirmation and navigation waits
for the user's answer, which arrives as a one-shot future.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import logging
from typing import Callable

from src.navigation.form_capability import DeferredBool

logger = logging.getLogger("deactivation_guard")

__all__ = [
    "ConfirmDialogOptions",
    "DeactivationGuard",
    "DeactivationRequest",
    "UNSAVED_CHANGES_DIALOG",
    "guarded_navigation",
    "normalize_choice",
]

STATE_IDLE = "Idle"
STATE_QUERIED = "Queried"
STATE_AWAITING = "AwaitingConfirmation"
STATE_ALLOWED = "Allowed"
STATE_DENIED = "Denied"


@dataclass(frozen=True)
class ConfirmDialogOptions:
    title: str
    message: str
    confirm_text: str = "Confirm"
    cancel_text: str = "Cancel"
    modal: bool = True


UNSAVED_CHANGES_DIALOG = ConfirmDialogOptions(
    title="Unsaved Changes",
    message="You have unsaved changes. Are you sure you want to leave? All unsaved data will be lost.",
    confirm_text="Leave Anyway",
    cancel_text="Stay on Page",
    modal=True,
)

OpenDialog = Callable[[ConfirmDialogOptions], "Future[object]"]


def normalize_choice(result: object) -> bool:
    """Only an explicit True means leave; None, False and anything else stay."""

    return result is True


@dataclass
class DeactivationRequest:
    """One navigation attempt away from a form."""

    target: str = ""
    state: str = STATE_IDLE
    reason: str = ""

    @property
    def resolved(self) -> bool:
        return self.state in {STATE_ALLOWED, STATE_DENIED}

    def _move(self, state: str, reason: str = "") -> None:
        logger.debug("Deactivation request for '%s': %s -> %s (%s)", self.target, self.state, state, reason)
        self.state = state
        if reason:
            self.reason = reason


class DeactivationGuard:
    """Decides whether the user may leave the active form."""

    def __init__(
        self,
        open_dialog: OpenDialog,
        *,
        options: ConfirmDialogOptions = UNSAVED_CHANGES_DIALOG,
    ) -> None:
        self._open_dialog = open_dialog
        self.options = options
        self._pending: dict[int, Future] = {}

    def can_deactivate(self, form: object | None, *, target: str = "") -> bool | DeferredBool:
        """Return True/False now, or a future the caller must wait on."""

        request = DeactivationRequest(target=target)
        answer = self._query_form(form, request)

        if isinstance(answer, Future):
            return self._await_form_answer(form, answer, request)
        if answer:
            request._move(STATE_ALLOWED, "clean")
            return True
        return self._confirm(form, request)

    def _query_form(self, form: object | None, request: DeactivationRequest) -> bool | Future:
        request._move(STATE_QUERIED)
        predicate = getattr(form, "can_deactivate", None)
        if not callable(predicate):
            logger.warning(
                "Form %r does not expose can_deactivate(); asking for confirmation before leaving.",
                form,
            )
            request.reason = "missing_capability"
            return False
        try:
            answer = predicate()
        except Exception:
            logger.warning("can_deactivate() raised; asking for confirmation before leaving.", exc_info=True)
            request.reason = "form_query_failed"
            return False
        if isinstance(answer, Future):
            return answer
        return answer is True

    def _await_form_answer(
        self,
        form: object | None,
        answer: Future,
        request: DeactivationRequest,
    ) -> DeferredBool:
        outcome: Future = Future()

        def _form_answered(done: Future) -> None:
            try:
                safe = done.result() is True
            except Exception:
                logger.warning("Deferred can_deactivate() failed; asking for confirmation.", exc_info=True)
                request.reason = "form_query_failed"
                safe = False
            if safe:
                request._move(STATE_ALLOWED, "clean")
                outcome.set_result(True)
                return
            _chain(self._confirm(form, request), outcome)

        answer.add_done_callback(_form_answered)
        return outcome

    def _confirm(self, form: object | None, request: DeactivationRequest) -> bool | DeferredBool:
        key = id(form)
        pending = self._pending.get(key)
        if pending is not None and not pending.done():
            return self._join_open_prompt(form, pending, request)

        request._move(STATE_AWAITING, request.reason or "unsaved_changes")
        try:
            dialog_future = self._open_dialog(self.options)
        except Exception:
            logger.warning("Confirmation dialog could not be opened; staying on page.", exc_info=True)
            request._move(STATE_DENIED, "dialog_failed")
            return False

        outcome: Future = Future()
        self._pending[key] = outcome

        def _dialog_closed(done: Future) -> None:
            if self._pending.get(key) is outcome:
                del self._pending[key]
            try:
                raw = done.result()
            except Exception:
                logger.warning("Confirmation dialog failed; staying on page.", exc_info=True)
                raw = None
            allowed = normalize_choice(raw)
            if allowed:
                request._move(STATE_ALLOWED, "confirmed")
            elif raw is None:
                request._move(STATE_DENIED, "dialog_inconclusive")
            else:
                request._move(STATE_DENIED, "user_cancelled")
            logger.info("Leave '%s' with unsaved changes: %s", request.target or "screen", allowed)
            outcome.set_result(allowed)

        dialog_future.add_done_callback(_dialog_closed)
        return outcome

    def _join_open_prompt(
        self,
        form: object | None,
        pending: Future,
        request: DeactivationRequest,
    ) -> DeferredBool:
        """Wait on the prompt already open for ``form`` without reusing its answer.

        The user's choice belongs to the request that opened the prompt, so a
        request that arrives meanwhile is denied once that prompt closes.
        """

        logger.debug("Confirmation already open for %r; '%s' waits on it.", form, request.target)
        request._move(STATE_AWAITING, "joined_open_prompt")
        joined: Future = Future()

        def _shared_prompt_closed(_done: Future) -> None:
            request._move(STATE_DENIED, "joined_open_prompt")
            joined.set_result(False)

        pending.add_done_callback(_shared_prompt_closed)
        return joined


def _chain(source: bool | Future, target: Future) -> None:
    if not isinstance(source, Future):
        target.set_result(bool(source))
        return
    source.add_done_callback(lambda done: target.set_result(bool(done.result())))


def guarded_navigation(
    *,
    guard: DeactivationGuard,
    form: object | None,
    navigate: Callable[[], None],
    target: str = "",
    on_error: Callable[[Exception], None] | None = None,
) -> bool | DeferredBool:
    """Run ``navigate`` once the guard allows it; never on a pending decision.

    A deferred ``navigate`` runs inside a future callback; if it raises, the
    error is logged and handed to ``on_error``.
    """

    decision = guard.can_deactivate(form, target=target)
    if isinstance(decision, Future):
        def _proceed(done: Future) -> None:
            if not done.result():
                return
            try:
                navigate()
            except Exception as exc:
                logger.exception("Navigation to '%s' failed after confirmation.", target or "screen")
                if on_error is not None:
                    on_error(exc)

        decision.add_done_callback(_proceed)
        return decision

    if decision:
        navigate()
    return decision
