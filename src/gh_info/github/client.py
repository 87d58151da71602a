"""
GitHub API client for user profile lookups.

GitHubClient receives an injected httpx.AsyncClient with base_url set to the
API server. Unlike a plain raise_for_status() client, every failure is
translated into a gh_info.errors.FetchError subclass so the interaction loop
can display it without knowing about httpx or pydantic.

API Documentation:
- https://docs.github.com/en/rest/users/users#get-a-user
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from gh_info.config import Settings
from gh_info.errors import (
    DecodeError,
    InvalidUsernameError,
    NetworkError,
    ProtocolError,
    RequestTimeoutError,
)
from gh_info.github.types import GitHubUserResponse
from gh_info.types import ProfileRecord

logger = logging.getLogger(__name__)


@dataclass
class GitHubClient:
    """
    GitHub API client with injected httpx client.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the API
            server and the User-Agent header applied.

    Example:
        async with create_http_client(Settings()) as http:
            client = GitHubClient(http=http)
            record = await client.get_user("octocat")
            print(f"{record.name} has {record.followers} followers")
    """

    http: httpx.AsyncClient

    async def get_user(self, username: str) -> ProfileRecord:
        """
        Get a user's public profile.

        Calls GET /users/{username} and converts the response to a
        ProfileRecord.

        Args:
            username: Account handle to look up.

        Returns:
            The decoded profile.

        Raises:
            RequestTimeoutError: The request exceeded the client timeout.
            NetworkError: Connection or DNS failure.
            ProtocolError: Non-2xx response (the body is not decoded).
            DecodeError: Body is not JSON or not a valid user object.
            InvalidUsernameError: Username is empty, "." or "..".
        """
        # Dot segments would be resolved away by URL normalization
        if username.strip() in ("", ".", ".."):
            raise InvalidUsernameError(username)

        logger.debug("Fetching profile for %s", username)
        try:
            # The name is a single path segment; "/", "?" and "#" must not escape it
            response = await self.http.get(f"/users/{quote(username, safe='')}")
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(username, self.http.timeout.read) from e
        except httpx.TransportError as e:
            raise NetworkError(username, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise ProtocolError(username, response.status_code, _error_reason(response))

        try:
            data = GitHubUserResponse.model_validate(response.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            raise DecodeError(username, _decode_reason(e)) from e

        logger.debug("Fetched profile for %s", data.login)
        return data.to_record()


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """
    Create an httpx client configured for the GitHub API.

    Args:
        settings: Viewer settings supplying base URL, user agent, token
            and timeout.

    Returns:
        httpx.AsyncClient ready to be injected into GitHubClient. The caller
        owns it and must close it.
    """
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "application/vnd.github+json",
    }
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"

    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        headers=headers,
        timeout=settings.timeout,
    )


def _error_reason(response: httpx.Response) -> str:
    """Prefer the API's "message" field, fall back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase


def _decode_reason(error: ValueError) -> str:
    if isinstance(error, ValidationError):
        first = error.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        return f"{location}: {first['msg']}"
    return f"malformed JSON ({error})"
