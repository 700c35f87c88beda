"""Bounded polling of an instance state raced against a deadline.

A :class:`PollSession` starts in ``WAITING`` and moves exactly once to
``REACHED``, ``TIMED_OUT`` or ``ERRORED``. The poll loop runs on a daemon
worker thread while a :class:`DeadlineTimer` runs on its own timer thread;
whichever calls :meth:`PollSession.finish` first decides the outcome and the
loser's later transition is ignored. The calling thread only blocks on the
session, so a deadline can end the wait while a poll attempt is in flight.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from rich.console import Console
from rich.text import Text

from ec2ctl.constants import DEFAULT_POLL_INTERVAL_SECONDS, EXIT_ERROR, EXIT_SUCCESS
from ec2ctl.providers.aws.compute import waiter_name
from ec2ctl.providers.exceptions import ProviderError, is_not_ready
from ec2ctl.render import console, err_console, state_style
from ec2ctl.utils import format_elapsed

logger = logging.getLogger(__name__)


class StateChecker(Protocol):
    """Remote operations the waiter needs from a compute provider."""

    def check_state(self, instance_id: str, state: str) -> None:
        ...

    def wait_for_state(self, instance_id: str, state: str) -> None:
        ...


class WaitState(str, Enum):
    """States of a poll session."""

    WAITING = "waiting"
    REACHED = "reached"
    TIMED_OUT = "timed-out"
    ERRORED = "errored"


@dataclass(frozen=True)
class WaitResult:
    """Outcome of one ``await`` invocation."""

    instance_id: str
    target_state: str
    outcome: WaitState
    elapsed: float
    attempts: int = 0
    error: BaseException | None = None

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.outcome is WaitState.REACHED else EXIT_ERROR


class PollSession:
    """Transient state of one wait, shared by the poll loop and the deadline.

    Parameters
    ----------
    instance_id : str
        Instance being awaited
    target_state : str
        State being awaited
    timeout : float | None
        Elapsed-time budget in seconds, None for no budget
    clock : Callable[[], float]
        Monotonic clock (default: ``time.monotonic``)
    """

    def __init__(
        self,
        instance_id: str,
        target_state: str,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.instance_id = instance_id
        self.target_state = target_state
        self.timeout = timeout
        self.attempts = 0
        self._clock = clock
        self._started = clock()
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._state = WaitState.WAITING
        self._error: BaseException | None = None
        self._finished_after: float | None = None

    @property
    def state(self) -> WaitState:
        with self._lock:
            return self._state

    @property
    def terminal(self) -> bool:
        return self._done.is_set()

    def elapsed(self) -> float:
        """Seconds since the session started."""
        return self._clock() - self._started

    def within_budget(self) -> bool:
        return self.timeout is None or self.elapsed() < self.timeout

    def finish(self, state: WaitState, error: BaseException | None = None) -> bool:
        """Move the session to a terminal state.

        Parameters
        ----------
        state : WaitState
            Terminal state to move to
        error : BaseException | None
            Error that caused an ``ERRORED`` transition

        Returns
        -------
        bool
            True if this call performed the transition, False if the session
            was already terminal (the call is then a no-op)
        """
        if state is WaitState.WAITING:
            raise ValueError("finish() requires a terminal state")

        with self._lock:
            if self._state is not WaitState.WAITING:
                logger.debug(
                    "Ignoring %s for %s, session already %s",
                    state.value,
                    self.instance_id,
                    self._state.value,
                )
                return False

            self._state = state
            self._error = error
            self._finished_after = self.elapsed()

        self._done.set()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the session is terminal; False if ``timeout`` expired first."""
        return self._done.wait(timeout)

    def sleep(self, seconds: float) -> None:
        """Sleep between attempts, waking early once the session is terminal."""
        self._done.wait(seconds)

    def result(self) -> WaitResult:
        with self._lock:
            elapsed = self._finished_after
            if elapsed is None:
                elapsed = self.elapsed()

            return WaitResult(
                instance_id=self.instance_id,
                target_state=self.target_state,
                outcome=self._state,
                elapsed=elapsed,
                attempts=self.attempts,
                error=self._error,
            )


class DeadlineTimer:
    """Timer that times a session out when its budget elapses.

    Parameters
    ----------
    session : PollSession
        Session to time out
    budget : float
        Seconds until the deadline fires
    """

    def __init__(self, session: PollSession, budget: float) -> None:
        self.session = session
        self.budget = budget
        self.fired = False
        self._timer = threading.Timer(budget, self._fire)
        self._timer.daemon = True

    def _fire(self) -> None:
        self.fired = True
        if self.session.finish(WaitState.TIMED_OUT):
            logger.debug(
                "Deadline of %ss reached awaiting %s",
                self.budget,
                self.session.instance_id,
            )

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        """Disarm the timer; safe to call more than once or after it fired."""
        self._timer.cancel()

    @property
    def armed(self) -> bool:
        return not self._timer.finished.is_set()


class StateWaiter:
    """Awaits an instance state through a compute provider.

    Parameters
    ----------
    compute_provider : StateChecker
        Provider exposing ``check_state`` and ``wait_for_state``
    poll_interval : float
        Seconds to pause after a not-ready check
    timer_factory : Callable[[PollSession, float], DeadlineTimer] | None
        Factory for the deadline timer (default: DeadlineTimer)
    clock : Callable[[], float]
        Monotonic clock used by sessions
    """

    def __init__(
        self,
        compute_provider: StateChecker,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timer_factory: Callable[[PollSession, float], DeadlineTimer] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.compute_provider = compute_provider
        self.poll_interval = poll_interval
        self.timer_factory = timer_factory or DeadlineTimer
        self.clock = clock

    def wait(
        self, instance_id: str, state: str, timeout: float | None = None
    ) -> WaitResult:
        """Poll until ``instance_id`` is in ``state`` or ``timeout`` elapses.

        Parameters
        ----------
        instance_id : str
            Instance to await
        state : str
            Target state (running, stopped or terminated)
        timeout : float | None
            Budget in seconds; None or 0 issues a single blocking wait instead

        Returns
        -------
        WaitResult
            Outcome of the wait

        Raises
        ------
        ValueError
            If ``state`` cannot be awaited
        """
        waiter_name(state)

        if not timeout:
            return self.wait_bare(instance_id, state)

        session = PollSession(instance_id, state, timeout=timeout, clock=self.clock)
        timer = self.timer_factory(session, timeout)
        timer.start()

        worker = threading.Thread(
            target=self._poll,
            args=(session, timer),
            name=f"ec2ctl-poll-{instance_id}",
            daemon=True,
        )
        worker.start()

        try:
            session.wait()
        finally:
            timer.cancel()

        result = session.result()

        if result.error is not None and not isinstance(result.error, ProviderError):
            raise result.error

        return result

    def _poll(self, session: PollSession, timer: DeadlineTimer) -> None:
        try:
            while not session.terminal and session.within_budget():
                session.attempts += 1

                try:
                    self.compute_provider.check_state(
                        session.instance_id, session.target_state
                    )
                except ProviderError as e:
                    if is_not_ready(e):
                        logger.debug(
                            "%s not %s yet (attempt %d)",
                            session.instance_id,
                            session.target_state,
                            session.attempts,
                        )
                        session.sleep(self.poll_interval)
                        continue

                    session.finish(WaitState.ERRORED, error=e)
                    break

                session.finish(WaitState.REACHED)
                break
            else:
                session.finish(WaitState.TIMED_OUT)
        except Exception as e:
            session.finish(WaitState.ERRORED, error=e)
        finally:
            timer.cancel()

    def wait_bare(self, instance_id: str, state: str) -> WaitResult:
        """Issue one blocking wait-for-state call with no retry and no deadline.

        Any error, including the not-ready signal, is an ``ERRORED`` outcome.
        """
        session = PollSession(instance_id, state, clock=self.clock)
        session.attempts = 1

        try:
            self.compute_provider.wait_for_state(instance_id, state)
        except ProviderError as e:
            session.finish(WaitState.ERRORED, error=e)
        else:
            session.finish(WaitState.REACHED)

        return session.result()


def report_outcome(
    result: WaitResult, out: Console | None = None, err: Console | None = None
) -> int:
    """Print the message for a wait outcome and return its exit code.

    Parameters
    ----------
    result : WaitResult
        Outcome to report
    out : Console | None
        Console for the success message (default: stdout console)
    err : Console | None
        Console for timeout and error messages (default: stderr console)

    Returns
    -------
    int
        Process exit code for the outcome
    """
    out = out or console
    err = err or err_console

    state_text = Text(result.target_state, style=state_style(result.target_state))
    instance_text = Text(result.instance_id, style="yellow")
    elapsed = format_elapsed(result.elapsed)

    if result.outcome is WaitState.REACHED:
        out.print(
            Text.assemble("Instance ", instance_text, " is ", state_text, f" ({elapsed})")
        )
    elif result.outcome is WaitState.TIMED_OUT:
        err.print(
            Text.assemble(
                "Timeout awaiting state ",
                state_text,
                " for EC2 instance ",
                instance_text,
                f" ({elapsed})",
            )
        )
    else:
        err.print(
            Text.assemble(
                "Error awaiting state ",
                state_text,
                " for EC2 instance ",
                instance_text,
                f" ({elapsed}) : {result.error}",
            )
        )

    return result.exit_code

