"""
GitHub API access for the profile viewer.

- GitHubClient: Async client returning ProfileRecord values
- GitHubUserResponse: Pydantic model for GET /users/{username}
- create_http_client: httpx client factory from Settings
"""

from gh_info.github.client import GitHubClient, create_http_client
from gh_info.github.types import GitHubUserResponse

__all__ = [
    "GitHubClient",
    "GitHubUserResponse",
    "create_http_client",
]
