"""
Callback dispatcher: drives one button press through the grid state machine.

Each inbound callback walks the states

    RECEIVED -> DECODED -> APPLIED -> SENT

or stops in FAILED with a FailureReason. Failures are logged and the event is
dropped: no retry, no reply to the user, and nothing escapes to the other events
being handled at the same time.

Steps 2-4 (read surface, mutate, write surface) run under a lock keyed by the
message identity. Two presses on the same message therefore see each other's
result instead of both mutating the same stale grid. Presses on different
messages never wait on each other.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set

from pydantic import BaseModel, Field

from .errors import (
    InvalidActionError,
    MalformedTokenError,
    TransportError,
    UnimplementedActionError,
)
from .locks import KeyedLock
from .logging_utils import log_debug, log_error, log_success
from .mutator import apply_action
from .surface import ControlSurface
from .tokens import decode_token


class DispatchState(str, Enum):
    RECEIVED = "received"
    DECODED = "decoded"
    APPLIED = "applied"
    SENT = "sent"
    FAILED = "failed"


class FailureReason(str, Enum):
    INVALID_ACTION = "invalid_action"
    MALFORMED_TOKEN = "malformed_token"
    UNIMPLEMENTED = "unimplemented"
    TRANSPORT_ERROR = "transport_error"


class DispatchOutcome(BaseModel):
    """Terminal result of dispatching one callback event."""

    token: str
    state: DispatchState
    reason: Optional[FailureReason] = None
    detail: Optional[str] = Field(None, description="Error message for failed events")
    history: List[DispatchState] = Field(
        default_factory=list, description="States visited, in order"
    )
    rows_remaining: Optional[int] = Field(
        None, description="Row count written to the surface on success"
    )

    @property
    def succeeded(self) -> bool:
        return self.state is DispatchState.SENT


@dataclass
class CallbackEvent:
    """An inbound button press: its token and the message it came from."""

    token: str
    surface: ControlSurface


class CallbackDispatcher:
    """Applies callback events to their message surfaces.

    The dispatcher holds no grid state. Its only shared state is the per-message
    lock table.
    """

    def __init__(
        self,
        locks: Optional[KeyedLock] = None,
        outcome_listeners: Optional[List[Callable[[DispatchOutcome], None]]] = None,
    ):
        """Initialize the dispatcher.

        Args:
            locks: Optional KeyedLock to share with other dispatchers
            outcome_listeners: Optional callables invoked with every DispatchOutcome
                (metrics, test recorders, audit logging)
        """
        self.locks = locks or KeyedLock()
        self.outcome_listeners = outcome_listeners or []

    async def dispatch(self, event: CallbackEvent) -> DispatchOutcome:
        """Run one callback event to completion and return its outcome."""

        history = [DispatchState.RECEIVED]

        try:
            action, identifier = decode_token(event.token)
        except MalformedTokenError as exc:
            return self._fail(event, history, FailureReason.MALFORMED_TOKEN, exc)
        except InvalidActionError as exc:
            return self._fail(event, history, FailureReason.INVALID_ACTION, exc)
        history.append(DispatchState.DECODED)
        log_debug(f"[Dispatch] {event.surface.key}: {action.name} {identifier!r}")

        async with self.locks.hold(event.surface.key):
            try:
                current = await event.surface.read_grid()
            except TransportError as exc:
                return self._fail(event, history, FailureReason.TRANSPORT_ERROR, exc)

            try:
                updated = apply_action(current, action, identifier)
            except UnimplementedActionError as exc:
                return self._fail(event, history, FailureReason.UNIMPLEMENTED, exc)
            history.append(DispatchState.APPLIED)

            try:
                await event.surface.write_grid(updated)
            except TransportError as exc:
                return self._fail(event, history, FailureReason.TRANSPORT_ERROR, exc)
            history.append(DispatchState.SENT)

        log_success(
            f"[Dispatch] {event.surface.key}: {action.name} {identifier!r} "
            f"({len(current.rows)} -> {len(updated.rows)} rows)"
        )
        return self._finish(
            DispatchOutcome(
                token=event.token,
                state=DispatchState.SENT,
                history=history,
                rows_remaining=len(updated.rows),
            )
        )

    async def serve(self, queue: "asyncio.Queue[Optional[CallbackEvent]]") -> None:
        """Drain ``queue``, handling every event in its own task.

        There is no concurrency cap. A ``None`` item stops intake; serve() returns
        once the in-flight events have finished.
        """

        tasks: Set[asyncio.Task] = set()

        def reap(task: asyncio.Task) -> None:
            # Runs for every task, including those finishing before the sentinel.
            tasks.discard(task)
            if not task.cancelled() and task.exception() is not None:
                log_error(f"[Dispatch] Unexpected handler failure: {task.exception()!r}")

        while True:
            event = await queue.get()
            if event is None:
                queue.task_done()
                break
            task = asyncio.create_task(self._dispatch_queued(queue, event))
            tasks.add(task)
            task.add_done_callback(reap)

        if tasks:
            # Failures were already logged by reap(); return_exceptions=True keeps
            # one handler bug from cancelling the rest.
            await asyncio.gather(*list(tasks), return_exceptions=True)

    async def _dispatch_queued(
        self, queue: "asyncio.Queue[Optional[CallbackEvent]]", event: CallbackEvent
    ) -> DispatchOutcome:
        try:
            return await self.dispatch(event)
        finally:
            queue.task_done()

    def _fail(
        self,
        event: CallbackEvent,
        history: List[DispatchState],
        reason: FailureReason,
        exc: Exception,
    ) -> DispatchOutcome:
        log_error(f"[Dispatch] Dropped callback {event.token!r} ({reason.value}): {exc}")
        return self._finish(
            DispatchOutcome(
                token=event.token,
                state=DispatchState.FAILED,
                reason=reason,
                detail=str(exc),
                history=history + [DispatchState.FAILED],
            )
        )

    def _finish(self, outcome: DispatchOutcome) -> DispatchOutcome:
        for listener in self.outcome_listeners:
            try:
                listener(outcome)
            except Exception as exc:  # pragma: no cover - diagnostic hook
                log_error(f"[Dispatch] Outcome listener failed: {exc}")
        return outcome
