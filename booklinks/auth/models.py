"""GitHub profile payload as returned by ``GET /user``."""

from pydantic import BaseModel, field_validator


class GitHubUser(BaseModel):
    """The fields of a GitHub profile BookLinks keeps."""

    id: int
    login: str
    email: str | None = None
    avatar_url: str | None = None
    name: str | None = None

    @field_validator("email", "name", "avatar_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        # GitHub sends "" for unset profile fields
        if isinstance(v, str):
            v = v.strip()
        return v or None

    def is_admin(self, admin_usernames: set[str]) -> bool:
        """Whether the login is listed in ``ADMIN_USERNAMES`` (case-insensitive)."""
        return self.login.lower() in admin_usernames
