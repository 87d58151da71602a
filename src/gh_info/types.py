"""
Shared data types for the profile viewer.

This module defines the values that flow through the interaction loop:
- ProfileRecord: A decoded user profile
- ViewState: The single state value driving rendering
- Events: Inputs to the loop (TimerFired, FetchCompleted, KeyPressed)
- Commands: Side effects requested by a transition (StartTimer, StartFetch, Quit)

All types are frozen dataclasses. The loop never mutates a ViewState in place;
each transition returns a new one. Pydantic models are reserved for parsing
API responses (see gh_info.github.types).
"""

from dataclasses import dataclass

from gh_info.errors import FetchError


@dataclass(frozen=True)
class ProfileRecord:
    """
    A user profile as shown on the card.

    Attributes:
        login: Account handle (e.g., "barkhaaroraa")
        name: Display name, empty if the user has not set one
        bio: Profile bio, empty if the user has not set one
        followers: Follower count
        public_repos: Public repository count
        html_url: Link to the profile page
        avatar_url: Link to the avatar image
    """

    login: str
    name: str = ""
    bio: str = ""
    followers: int = 0
    public_repos: int = 0
    html_url: str = ""
    avatar_url: str = ""


@dataclass(frozen=True)
class ViewState:
    """
    Complete state of the viewer.

    Attributes:
        username: Profile being viewed, fixed at startup
        loading: True from startup or refresh until the matching fetch completes
        record: Last successfully fetched profile, None until the first success
        last_error: Outcome of the last completed fetch if it failed
        request_seq: Sequence number of the most recently issued fetch
    """

    username: str
    loading: bool = True
    record: ProfileRecord | None = None
    last_error: FetchError | None = None
    request_seq: int = 0


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class TimerFired:
    """The loading timer elapsed."""


@dataclass(frozen=True)
class FetchCompleted:
    """
    A profile fetch finished.

    Exactly one of record or error is set.

    Attributes:
        seq: Sequence number of the request this result answers
        record: Decoded profile on success
        error: Failure description on error
    """

    seq: int
    record: ProfileRecord | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class KeyPressed:
    """
    A key was pressed.

    Attributes:
        key: Single character, or a name such as "ctrl+c"
    """

    key: str


Event = TimerFired | FetchCompleted | KeyPressed


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True)
class StartTimer:
    """Arm a one-shot timer that delivers TimerFired."""

    duration: float = 1.0


@dataclass(frozen=True)
class StartFetch:
    """Fetch a profile and deliver FetchCompleted tagged with seq."""

    username: str
    seq: int


@dataclass(frozen=True)
class Quit:
    """Stop the interaction loop."""


Command = StartTimer | StartFetch | Quit
