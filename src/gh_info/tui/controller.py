"""
ProfileViewer: the interaction loop of the profile viewer.

This module provides the controller that:
- Owns the single ViewState and the event queue
- Runs timer, fetch and keyboard producers as asyncio tasks
- Applies gh_info.tui.state.update() to each event in arrival order
- Redraws the screen through Rich Live after every event
- Handles SIGINT/SIGTERM as a quit keypress

Producers only ever put events on the queue. The state is replaced
exclusively inside run(), one event at a time, so no locking is needed.

Order of run():
1. Register signal handlers so Ctrl+C works during startup
2. Enter the Live context and start the keyboard reader
3. Execute the startup commands (timer + fetch)
4. Consume events until a Quit command
5. Cancel outstanding tasks, restore signal handlers
"""

import asyncio
import functools
import logging
import signal
from typing import Coroutine, Protocol

from rich.console import Console
from rich.live import Live
from rich.text import Text

from gh_info.errors import FetchError
from gh_info.tui.keyboard import KeyboardTask
from gh_info.tui.render import render
from gh_info.tui.state import TICK_INTERVAL, initial_state, update
from gh_info.types import (
    Command,
    Event,
    FetchCompleted,
    KeyPressed,
    ProfileRecord,
    Quit,
    StartFetch,
    StartTimer,
    TimerFired,
    ViewState,
)

logger = logging.getLogger(__name__)


class ProfileSource(Protocol):
    """Anything that can fetch a profile (GitHubClient in production)."""

    async def get_user(self, username: str) -> ProfileRecord: ...


class ViewerError(Exception):
    """Raised when the loop's own infrastructure fails (not a fetch)."""


class _ProducerFailed:
    """Internal queue message: a producer task crashed."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


class ProfileViewer:
    """
    Runs the interactive profile view until a quit key.

    Example:
        async with create_http_client(settings) as http:
            viewer = ProfileViewer(GitHubClient(http=http), "octocat")
            await viewer.run()  # Runs until q / Ctrl+C
    """

    def __init__(
        self,
        client: ProfileSource,
        username: str,
        tick_interval: float = TICK_INTERVAL,
        console: Console | None = None,
        read_keyboard: bool = True,
        handle_signals: bool = True,
        screen: bool = True,
    ) -> None:
        """
        Initialize the viewer.

        Args:
            client: Profile source used for every fetch
            username: Profile to view
            tick_interval: Loading timer duration in seconds
            console: Rich Console to draw on (creates default if None)
            read_keyboard: Read keys from stdin; disable when keys are
                supplied through post()
            handle_signals: Treat SIGINT/SIGTERM as a quit keypress
            screen: Use the terminal's alternate screen
        """
        self.console = console if console is not None else Console()
        self._client = client
        self._username = username
        self._tick_interval = tick_interval
        self._handle_signals = handle_signals
        self._screen = screen
        self._events: asyncio.Queue[Event | _ProducerFailed] = asyncio.Queue()
        self._keyboard = KeyboardTask(on_key=self._on_key) if read_keyboard else None
        self._tasks: set[asyncio.Task] = set()
        self._fetch_task: asyncio.Task | None = None
        self._timer_task: asyncio.Task | None = None
        self._state: ViewState | None = None

    @property
    def state(self) -> ViewState | None:
        """Latest view state, None before run() starts."""
        return self._state

    def post(self, event: Event) -> None:
        """Deliver an event to the loop from outside (e.g. tests, scripts)."""
        self._events.put_nowait(event)

    async def run(self) -> ViewState:
        """
        Run the loop until a quit key is processed.

        Returns:
            The final view state

        Raises:
            ViewerError: If the keyboard reader or another producer crashed
        """
        loop = asyncio.get_running_loop()
        signals = (signal.SIGINT, signal.SIGTERM) if self._handle_signals else ()
        for sig in signals:
            loop.add_signal_handler(sig, functools.partial(self._handle_signal, sig))

        state, commands = initial_state(self._username, self._tick_interval)
        self._state = state
        try:
            with Live(
                self._renderable(state),
                console=self.console,
                auto_refresh=False,
                screen=self._screen,
            ) as live:
                if self._keyboard is not None:
                    self._spawn(self._keyboard.run())

                running = self._execute(commands)
                while running:
                    message = await self._events.get()
                    if isinstance(message, _ProducerFailed):
                        raise ViewerError(str(message.error)) from message.error

                    state, commands = update(state, message, self._tick_interval)
                    self._state = state
                    live.update(self._renderable(state), refresh=True)
                    running = self._execute(commands)
        finally:
            if self._keyboard is not None:
                self._keyboard.stop()
            await self._cancel_all()
            for sig in signals:
                loop.remove_signal_handler(sig)

        logger.info("Viewer stopped")
        return state

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _execute(self, commands: list[Command]) -> bool:
        """
        Start the tasks requested by a transition.

        Returns:
            False if a Quit command was among them, True otherwise
        """
        for command in commands:
            if isinstance(command, Quit):
                logger.info("Quit requested")
                return False
            if isinstance(command, StartFetch):
                if self._fetch_task is not None:
                    self._fetch_task.cancel()
                self._fetch_task = self._spawn(self._fetch(command.username, command.seq))
            elif isinstance(command, StartTimer):
                if self._timer_task is not None:
                    self._timer_task.cancel()
                self._timer_task = self._spawn(self._tick(command.duration))
        return True

    async def _fetch(self, username: str, seq: int) -> None:
        """Fetch a profile and deliver exactly one FetchCompleted."""
        logger.debug("Fetch #%d for %s started", seq, username)
        try:
            record = await self._client.get_user(username)
        except FetchError as e:
            logger.warning("Fetch #%d failed: %s", seq, e)
            event = FetchCompleted(seq, error=e)
        except Exception as e:
            logger.exception("Fetch #%d raised unexpectedly", seq)
            reason = str(e) or type(e).__name__
            event = FetchCompleted(seq, error=FetchError(username, f"unexpected error: {reason}"))
        else:
            event = FetchCompleted(seq, record=record)
        self._events.put_nowait(event)

    async def _tick(self, duration: float) -> None:
        await asyncio.sleep(duration)
        self._events.put_nowait(TimerFired())

    # -------------------------------------------------------------------------
    # Task bookkeeping
    # -------------------------------------------------------------------------

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._events.put_nowait(_ProducerFailed(error))

    async def _cancel_all(self) -> None:
        """Cancel in-flight fetches, timers and the keyboard reader."""
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Input and display
    # -------------------------------------------------------------------------

    def _on_key(self, key: str) -> None:
        self._events.put_nowait(KeyPressed(key))

    def _handle_signal(self, sig: signal.Signals) -> None:
        """
        Deliver SIGINT/SIGTERM as a Ctrl+C keypress.

        Signal handlers run outside the loop's dispatch, so they only
        enqueue; run() performs the actual shutdown.
        """
        logger.info("Received %s", sig.name)
        self._events.put_nowait(KeyPressed("ctrl+c"))

    def _renderable(self, state: ViewState) -> Text:
        return Text(render(state))
