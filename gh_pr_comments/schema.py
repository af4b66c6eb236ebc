"""Schema contract for resolved pull request references."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Reference(BaseModel):
    """Resolved (owner, repository, number) triple naming one pull request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    owner: str = Field(min_length=1)
    repository: str = Field(min_length=1)
    number: int = Field(ge=1)

    @field_validator("owner", "repository")
    @classmethod
    def validate_path_segment(cls, value: str) -> str:
        """Reject values that would not form a single URL path segment."""
        if "/" in value:
            raise ValueError("owner and repository must not contain '/'.")
        return value

    @property
    def full_name(self) -> str:
        """Return the repository in owner/repo format."""
        return f"{self.owner}/{self.repository}"

    @property
    def api_path(self) -> str:
        """Return the REST API path of the pull request."""
        return f"/repos/{self.owner}/{self.repository}/pulls/{self.number}"
