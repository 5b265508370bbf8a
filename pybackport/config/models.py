"""Pydantic models for config types."""

from typing import List, Optional
from pydantic import BaseModel, Field

DEFAULT_LABEL_PATTERN = r"^backport (?P<base>([^ ]+))$"


class TemplateConfig(BaseModel):
    """Jinja templates used to derive each backport pull request."""
    title: str = "[Backport {{ base }}] {{ title }}"
    head: str = "backport-{{ number }}-to-{{ base }}"
    body: str = "Backport {{ merge_commit_sha }} from #{{ number }}."
    labels: str = "[]"

    class Config:
        """Pydantic config."""
        extra = "forbid"


class GitConfig(BaseModel):
    """Git settings for the working clone."""
    remote: str = "origin"
    user_name: str = "github-actions[bot]"
    user_email: str = "github-actions[bot]@users.noreply.github.com"
    workdir: str = "."

    class Config:
        """Pydantic config."""
        extra = "forbid"


class BackportConfig(BaseModel):
    """Full pybackport configuration."""
    label_pattern: str = DEFAULT_LABEL_PATTERN
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    issue_labels: List[str] = Field(default_factory=list)
    git: GitConfig = Field(default_factory=GitConfig)
    github_token: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "forbid"
