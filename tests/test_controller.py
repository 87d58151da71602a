"""
Tests for the ProfileViewer interaction loop.

The viewer runs against a fake profile source and a Console writing to a
StringIO; keys are delivered through post() instead of stdin.
"""

import asyncio
import io
import signal

import pytest
from rich.console import Console

from gh_info.errors import FetchError, NetworkError
from gh_info.tui import controller as controller_module
from gh_info.tui.controller import ProfileViewer, ViewerError
from gh_info.tui.state import update as real_update
from gh_info.types import FetchCompleted, KeyPressed, ProfileRecord, TimerFired

RECORD = ProfileRecord(
    login="barkhaaroraa",
    name="Barkha Arora",
    followers=10,
    public_repos=5,
    html_url="https://github.com/barkhaaroraa",
)


class FakeSource:
    """Profile source returning scripted results, optionally gated."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[str] = []
        self.cancelled = 0
        self.gate: asyncio.Event | None = None

    async def get_user(self, username: str) -> ProfileRecord:
        self.calls.append(username)
        result = self.results.pop(0) if self.results else RECORD
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        if isinstance(result, Exception):
            raise result
        return result


def make_viewer(source, tick_interval: float = 1.0) -> ProfileViewer:
    return ProfileViewer(
        source,
        "barkhaaroraa",
        tick_interval=tick_interval,
        console=Console(file=io.StringIO(), width=80),
        read_keyboard=False,
        handle_signals=False,
        screen=False,
    )


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Poll predicate until true or fail the test."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            pytest.fail("condition not reached in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def seen_events(monkeypatch):
    """Record every event the loop passes to update()."""
    events = []

    def spy(state, event, tick_interval=1.0):
        events.append(event)
        return real_update(state, event, tick_interval)

    monkeypatch.setattr(controller_module, "update", spy)
    return events


# =============================================================================
# Startup and quit
# =============================================================================


class TestStartup:
    """Tests for the startup fetch and quitting."""

    @pytest.mark.asyncio
    async def test_startup_fetch_then_quit(self):
        source = FakeSource(RECORD)
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: viewer.state is not None and not viewer.state.loading)
        viewer.post(KeyPressed("q"))
        state = await asyncio.wait_for(task, timeout=2.0)

        assert source.calls == ["barkhaaroraa"]
        assert state.record == RECORD
        assert state.last_error is None
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_quit_while_loading_cancels_fetch(self):
        source = FakeSource()
        source.gate = asyncio.Event()
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: source.calls)
        viewer.post(KeyPressed("ctrl+c"))
        state = await asyncio.wait_for(task, timeout=2.0)

        assert state.loading is True
        assert source.cancelled == 1

    @pytest.mark.asyncio
    async def test_signal_quits(self):
        source = FakeSource()
        source.gate = asyncio.Event()
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: source.calls)
        viewer._handle_signal(signal.SIGTERM)
        await asyncio.wait_for(task, timeout=2.0)

    @pytest.mark.asyncio
    async def test_screen_shows_card(self):
        viewer = make_viewer(FakeSource(RECORD))
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: viewer.state is not None and not viewer.state.loading)
        viewer.post(KeyPressed("q"))
        await asyncio.wait_for(task, timeout=2.0)

        output = viewer.console.file.getvalue()
        assert "Barkha Arora (barkhaaroraa)" in output
        assert "Repos: 5   Followers: 10" in output


# =============================================================================
# Errors and refresh
# =============================================================================


class TestFetchErrors:
    """Tests for absorbing fetch failures."""

    @pytest.mark.asyncio
    async def test_error_is_shown_and_refresh_recovers(self):
        error = NetworkError("barkhaaroraa", "connection refused")
        source = FakeSource(error, RECORD)
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: viewer.state is not None and viewer.state.last_error is not None)
        assert viewer.state.last_error is error
        assert viewer.state.loading is False
        assert not task.done()

        viewer.post(KeyPressed("r"))
        await wait_until(lambda: viewer.state.record == RECORD)
        viewer.post(KeyPressed("q"))
        state = await asyncio.wait_for(task, timeout=2.0)

        assert source.calls == ["barkhaaroraa", "barkhaaroraa"]
        assert state.last_error is None
        assert state.request_seq == 2

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_fetch_error(self):
        source = FakeSource(KeyError("boom"))
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: viewer.state is not None and not viewer.state.loading)
        viewer.post(KeyPressed("q"))
        state = await asyncio.wait_for(task, timeout=2.0)

        assert isinstance(state.last_error, FetchError)
        assert "boom" in str(state.last_error)

    @pytest.mark.asyncio
    async def test_unexpected_exception_without_message_names_its_type(self):
        source = FakeSource(RuntimeError())
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: viewer.state is not None and not viewer.state.loading)
        viewer.post(KeyPressed("q"))
        state = await asyncio.wait_for(task, timeout=2.0)

        assert str(state.last_error) == "unexpected error: RuntimeError"

    @pytest.mark.asyncio
    async def test_refresh_cancels_in_flight_fetch(self, seen_events):
        source = FakeSource()
        source.gate = asyncio.Event()
        viewer = make_viewer(source)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: len(source.calls) == 1)
        viewer.post(KeyPressed("r"))
        await wait_until(lambda: len(source.calls) == 2)
        source.gate.set()

        await wait_until(lambda: not viewer.state.loading)
        viewer.post(KeyPressed("q"))
        await asyncio.wait_for(task, timeout=2.0)

        completions = [e for e in seen_events if isinstance(e, FetchCompleted)]
        assert source.cancelled == 1
        assert [e.seq for e in completions] == [2]


# =============================================================================
# Timer
# =============================================================================


class TestTimer:
    """Tests for timer re-arming."""

    @pytest.mark.asyncio
    async def test_ticks_while_loading_and_stops_after(self, seen_events):
        source = FakeSource()
        source.gate = asyncio.Event()
        viewer = make_viewer(source, tick_interval=0.02)
        task = asyncio.create_task(viewer.run())

        await wait_until(lambda: sum(isinstance(e, TimerFired) for e in seen_events) >= 3)
        source.gate.set()
        await wait_until(lambda: not viewer.state.loading)

        # At most one already-armed timer may still fire after completion
        await asyncio.sleep(0.1)
        ticks_after_first_wait = sum(isinstance(e, TimerFired) for e in seen_events)
        await asyncio.sleep(0.1)
        ticks_after_second_wait = sum(isinstance(e, TimerFired) for e in seen_events)

        viewer.post(KeyPressed("q"))
        await asyncio.wait_for(task, timeout=2.0)

        assert ticks_after_first_wait == ticks_after_second_wait


# =============================================================================
# Infrastructure failures
# =============================================================================


class TestProducerFailure:
    """Tests for fatal failures of the loop's own infrastructure."""

    @pytest.mark.asyncio
    async def test_keyboard_failure_is_fatal(self, monkeypatch):
        class BrokenKeyboard:
            def __init__(self, on_key):
                pass

            async def run(self):
                raise OSError("stdin is not a terminal")

            def stop(self):
                pass

        monkeypatch.setattr(controller_module, "KeyboardTask", BrokenKeyboard)
        source = FakeSource()
        source.gate = asyncio.Event()
        viewer = ProfileViewer(
            source,
            "barkhaaroraa",
            console=Console(file=io.StringIO()),
            handle_signals=False,
            screen=False,
        )

        with pytest.raises(ViewerError, match="not a terminal"):
            await asyncio.wait_for(viewer.run(), timeout=2.0)
        assert source.cancelled == 1
