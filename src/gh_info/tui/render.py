"""
Rendering of the viewer state.

render() is a pure function of ViewState with three branches:
- loading: a blank placeholder
- error: a single "Error: ..." line, no profile fields
- success: the profile card with the key footer

The text is plain (no Rich markup) so that user-supplied fields such as the
bio can never be interpreted as styling. The controller wraps it in a
rich.text.Text for display.
"""

from gh_info.types import ProfileRecord, ViewState

LOADING_PLACEHOLDER = " "
EMPTY_FIELD = "—"  # — (em dash)
FOOTER = "[r] refresh   [q] quit"

_RULE = "*" * 30


def render(state: ViewState) -> str:
    """
    Render the view state as displayable text.

    Args:
        state: Current viewer state

    Returns:
        Text for the whole screen
    """
    if state.loading:
        return LOADING_PLACEHOLDER
    if state.last_error is not None:
        # API messages and transport errors may span lines; the view may not
        description = " ".join(str(state.last_error).split())
        return f"\n  Error: {description}\n"
    if state.record is None:
        return LOADING_PLACEHOLDER
    return format_card(state.record)


def format_card(record: ProfileRecord, footer: bool = True) -> str:
    """
    Format a profile as a multi-line card.

    Args:
        record: Profile to format
        footer: Include the key hints line

    Returns:
        Card text
    """
    lines = [
        "",
        f"  {_RULE}",
        f"  {record.name} ({record.login})",
        "",
        f"  Bio:  {or_placeholder(record.bio)}",
        f"  Repos: {record.public_repos}   Followers: {record.followers}",
        "",
        f"  Profile: {record.html_url}",
        "",
    ]
    if footer:
        lines += [f"  {FOOTER}"]
    lines += [f"  {_RULE}", ""]
    return "\n".join(lines)


def or_placeholder(value: str, placeholder: str = EMPTY_FIELD) -> str:
    """Return value, or placeholder when value is empty."""
    return value if value else placeholder
