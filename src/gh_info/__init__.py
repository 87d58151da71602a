"""
gh-info: terminal viewer for GitHub user profiles.

Exports the shared data types; see gh_info.tui for the interaction loop
and gh_info.github for the API client.
"""

import logging

from gh_info.errors import (
    DecodeError,
    FetchError,
    InvalidUsernameError,
    NetworkError,
    ProtocolError,
    RequestTimeoutError,
)
from gh_info.types import (
    FetchCompleted,
    KeyPressed,
    ProfileRecord,
    Quit,
    StartFetch,
    StartTimer,
    TimerFired,
    ViewState,
)

__all__ = [
    "DecodeError",
    "FetchCompleted",
    "FetchError",
    "InvalidUsernameError",
    "KeyPressed",
    "NetworkError",
    "ProfileRecord",
    "ProtocolError",
    "Quit",
    "RequestTimeoutError",
    "StartFetch",
    "StartTimer",
    "TimerFired",
    "ViewState",
]

# Silent unless the CLI configures a log file
logging.getLogger(__name__).addHandler(logging.NullHandler())
