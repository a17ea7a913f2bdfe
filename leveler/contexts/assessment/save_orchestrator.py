"""
Save Orchestration

Schedules periodic and manual saves of an assessment and tracks the outcome as
an explicit state machine:

    Idle -> Saving -> Saved | Failed
    Saved | Failed -> Idle            (next edit)
    Saved | Failed -> Saving          (next periodic or manual trigger)

Only one save is in flight at a time. A trigger that arrives while a save is in
flight is dropped, not queued; the next periodic tick picks up whatever changed
in the meantime. The payload is snapshotted when the save is triggered, so edits
made while awaiting the response stay in the live store for the next save.

Retrying transient transport failures is the save function's job (see
leveler.contexts.transport.retry). Whatever the save function raises ends up as
a Failed state with a manual retry; nothing propagates to the caller.
Cancelling a save returns the state to Idle and re-raises. Stopping the timer
or resetting never cancels an auto-save already in flight.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Optional, Union

from leveler.contexts.assessment.codec import ui_to_api_format
from leveler.contexts.assessment.assessment_data_structure import Responses
from leveler.contexts.assessment.logger import (
    _log_debug,
    _log_info,
    log_save_result,
    log_save_started,
)
from leveler.contexts.assessment.state_store import AssessmentStateStore
from leveler.utils.settings import load_settings
from leveler.utils.timestamp import format_timestamp, now_exact


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


@dataclass(frozen=True)
class Idle:
    status: ClassVar[SaveStatus] = SaveStatus.IDLE


@dataclass(frozen=True)
class Saving:
    started_at: str
    trigger: str = "manual"
    status: ClassVar[SaveStatus] = SaveStatus.SAVING


@dataclass(frozen=True)
class Saved:
    saved_at: str
    status: ClassVar[SaveStatus] = SaveStatus.SAVED


@dataclass(frozen=True)
class Failed:
    error: str
    failed_at: str
    status: ClassVar[SaveStatus] = SaveStatus.ERROR


SaveState = Union[Idle, Saving, Saved, Failed]

# Receives the flat responses snapshot; raises on failure
SaveFunction = Callable[[Responses], Awaitable[Any]]


class SaveOrchestrator:
    """
    Drives saves of one assessment session.

    Args:
        store: Live assessment state
        save_fn: Async function persisting a responses snapshot
        auto_save_interval_ms: Periodic save interval (defaults to settings)
        on_state_change: Optional callback invoked with every new SaveState
        clock: Timestamp source for Saving/Saved/Failed states
    """

    def __init__(
        self,
        store: AssessmentStateStore,
        save_fn: SaveFunction,
        auto_save_interval_ms: Optional[int] = None,
        on_state_change: Optional[Callable[[SaveState], None]] = None,
        clock: Callable[[], str] = now_exact,
    ):
        if auto_save_interval_ms is None:
            auto_save_interval_ms = load_settings().save.auto_save_interval_ms

        self.store = store
        self.auto_save_interval_ms = auto_save_interval_ms
        self._save_fn = save_fn
        self._on_state_change = on_state_change
        self._clock = clock
        self._state: SaveState = Idle()
        self._generation = 0
        self._timer_task: Optional[asyncio.Task] = None
        self._auto_save_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def can_retry(self) -> bool:
        return isinstance(self._state, Failed)

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    def _transition(self, new_state: SaveState) -> None:
        if new_state == self._state:
            return
        _log_debug(f"Save state {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state
        if self._on_state_change is not None:
            self._on_state_change(new_state)

    # =========================================================================
    # TRIGGERS
    # =========================================================================

    async def save_now(self, trigger: str = "manual") -> SaveState:
        """
        Save the current store contents.

        Coalesced (returns the current Saving state untouched) when a save is
        already in flight.

        Args:
            trigger: What caused the save ("manual", "auto", "navigation", "submit", "retry")

        Returns:
            The state the save resolved to
        """
        if isinstance(self._state, Saving):
            _log_debug(f"Save already in flight, ignoring {trigger} trigger")
            return self._state

        generation = self._generation
        snapshot = self.store.snapshot()
        responses = ui_to_api_format(snapshot.selections, snapshot.feedback)

        self._transition(Saving(started_at=self._clock(), trigger=trigger))
        log_save_started(len(responses), trigger)
        start_time = time.perf_counter()

        try:
            await self._save_fn(responses)
        except asyncio.CancelledError:
            # Nothing is in flight any more
            if generation == self._generation:
                self._transition(Idle())
            _log_debug(f"{trigger} save cancelled")
            raise
        except Exception as e:
            outcome: SaveState = Failed(error=str(e) or type(e).__name__, failed_at=self._clock())
        else:
            outcome = Saved(saved_at=self._clock())

        if generation != self._generation:
            _log_debug("Assessment was reset during save, discarding result")
            return self._state

        self._transition(outcome)
        log_save_result(outcome, time.perf_counter() - start_time)
        return self._state

    async def retry(self) -> SaveState:
        """Manual retry after a failed save. No-op in any other state."""
        if not self.can_retry:
            return self._state
        return await self.save_now(trigger="retry")

    def notify_edit(self) -> None:
        """An edit happened: a settled Saved/Failed state returns to Idle."""
        if isinstance(self._state, (Saved, Failed)):
            self._transition(Idle())

    # =========================================================================
    # PERIODIC TIMER
    # =========================================================================

    async def _run_periodic(self) -> None:
        interval_s = self.auto_save_interval_ms / 1000
        while True:
            await asyncio.sleep(interval_s)
            if not self.store.has_selections():
                continue
            # Shielded so stop() leaves an in-flight save running
            self._auto_save_task = asyncio.ensure_future(self.save_now(trigger="auto"))
            await asyncio.shield(self._auto_save_task)

    def start(self) -> None:
        """
        Start periodic saving on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.is_running:
            return
        self._timer_task = asyncio.get_running_loop().create_task(self._run_periodic())
        _log_info(f"Auto-save every {self.auto_save_interval_ms} ms")

    def stop(self) -> None:
        """Cancel the periodic timer. An in-flight save is left to finish."""
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None

    def reset(self) -> None:
        """
        Start a new assessment.

        Cancels the timer, clears the store and returns to Idle. The result of
        a save still in flight is ignored when it arrives.
        """
        self.stop()
        self._generation += 1
        self.store.clear()
        self._transition(Idle())


def describe_save_state(state: SaveState, reference: Optional[datetime] = None) -> str:
    """
    Human-readable label for a save state, as shown next to the assessment.

    Examples:
        "Saving..." / "Saved 2m ago" / "Save failed" / ""
    """
    if isinstance(state, Saving):
        return "Saving..."
    if isinstance(state, Saved):
        return f"Saved {format_timestamp(state.saved_at, relative=True, reference=reference)}"
    if isinstance(state, Failed):
        return "Save failed"
    return ""
