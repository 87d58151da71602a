"""
GitHub API Pydantic response types.

These are API response types for external data validation. The internal
ProfileRecord is a dataclass in gh_info.types.

Notes:
- "name" and "bio" are null for users who never set them
- Unknown fields in the response are ignored
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gh_info.types import ProfileRecord


class GitHubUserResponse(BaseModel):
    """
    Response from GET /users/{username}.

    Example response (trimmed):
    {
        "login": "octocat",
        "name": "The Octocat",
        "bio": null,
        "followers": 9000,
        "public_repos": 8,
        "html_url": "https://github.com/octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4"
    }
    """

    model_config = ConfigDict(extra="ignore")

    login: str
    name: str = ""
    bio: str = ""
    followers: int = Field(default=0, ge=0)
    public_repos: int = Field(default=0, ge=0)
    html_url: str = ""
    avatar_url: str = ""

    @field_validator("name", "bio", "html_url", "avatar_url", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    def to_record(self) -> ProfileRecord:
        """Convert to the internal ProfileRecord."""
        return ProfileRecord(
            login=self.login,
            name=self.name,
            bio=self.bio,
            followers=self.followers,
            public_repos=self.public_repos,
            html_url=self.html_url,
            avatar_url=self.avatar_url,
        )
