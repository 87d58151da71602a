"""
Transition function for the profile viewer.

This module provides the viewer's state machine as a pure function:
update(state, event) returns the next ViewState and the commands the loop
must execute. Nothing here performs I/O; the controller owns the queue,
the tasks and the display.

Transitions:
- FetchCompleted (current request): store record or error, stop loading
- FetchCompleted (older request): discarded
- TimerFired while loading: re-arm the timer
- TimerFired while ready: ignored
- "r": start loading, issue a new fetch and a new timer
- "q" / "ctrl+c": quit
- Any other key: ignored
"""

import logging
from dataclasses import replace

from gh_info.types import (
    Command,
    Event,
    FetchCompleted,
    KeyPressed,
    Quit,
    StartFetch,
    StartTimer,
    TimerFired,
    ViewState,
)

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0
"""Default seconds between loading timer ticks."""

REFRESH_KEYS = frozenset({"r"})
QUIT_KEYS = frozenset({"q", "ctrl+c"})


def initial_state(
    username: str, tick_interval: float = TICK_INTERVAL
) -> tuple[ViewState, list[Command]]:
    """
    Build the startup state and its two concurrent requests.

    Args:
        username: Profile to view for the lifetime of the program
        tick_interval: Loading timer duration in seconds

    Returns:
        Loading state with request_seq 1, plus StartTimer and StartFetch
    """
    state = ViewState(username=username, loading=True, request_seq=1)
    return state, [StartTimer(tick_interval), StartFetch(username, seq=1)]


def update(
    state: ViewState, event: Event, tick_interval: float = TICK_INTERVAL
) -> tuple[ViewState, list[Command]]:
    """
    Apply one event to the view state.

    Args:
        state: Current state (never modified)
        event: Event to process
        tick_interval: Loading timer duration for re-armed timers

    Returns:
        Tuple of (next state, commands to execute in order)
    """
    if isinstance(event, FetchCompleted):
        return _on_fetch_completed(state, event)

    if isinstance(event, TimerFired):
        if state.loading:
            return state, [StartTimer(tick_interval)]
        return state, []

    if isinstance(event, KeyPressed):
        if event.key in QUIT_KEYS:
            return state, [Quit()]
        if event.key in REFRESH_KEYS:
            seq = state.request_seq + 1
            next_state = replace(state, loading=True, request_seq=seq)
            return next_state, [StartFetch(state.username, seq), StartTimer(tick_interval)]
        return state, []

    raise TypeError(f"Unknown event: {event!r}")


def _on_fetch_completed(
    state: ViewState, event: FetchCompleted
) -> tuple[ViewState, list[Command]]:
    # Only the most recently issued request may change the view
    if event.seq != state.request_seq:
        logger.debug(
            "Discarding stale response (seq %d, current %d)",
            event.seq,
            state.request_seq,
        )
        return state, []

    if event.error is not None:
        return replace(state, loading=False, last_error=event.error), []

    return replace(state, loading=False, record=event.record, last_error=None), []
