"""
TUI module for the interactive profile view.

This module provides the building blocks of the viewer:
- update / initial_state: Pure state transitions
- render: ViewState to screen text
- KeyboardTask: Async cbreak-mode key reader
- ProfileViewer: Interaction loop with Rich Live display
"""

from gh_info.tui.controller import ProfileSource, ProfileViewer, ViewerError
from gh_info.tui.keyboard import KeyboardTask, normalize_key
from gh_info.tui.render import format_card, render
from gh_info.tui.state import TICK_INTERVAL, initial_state, update

__all__ = [
    "KeyboardTask",
    "ProfileSource",
    "ProfileViewer",
    "TICK_INTERVAL",
    "ViewerError",
    "format_card",
    "initial_state",
    "normalize_key",
    "render",
    "update",
]
