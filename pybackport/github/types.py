"""Protocols for the PyGithub objects the backporter talks to."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class GitHubPullRequestProtocol(Protocol):
    """Protocol for GitHub pull request objects (real or fake)."""
    @property
    def number(self) -> int:
        """Get the PR number."""
        ...


@runtime_checkable
class GitHubIssueProtocol(Protocol):
    """Protocol for GitHub issue objects; every pull request is also an issue."""
    @property
    def number(self) -> int:
        """Get the issue number."""
        ...

    def set_labels(self, *labels: str) -> None:
        """Replace all labels on the issue."""
        ...

    def create_comment(self, body: str) -> None:
        """Add a comment to the issue."""
        ...


@runtime_checkable
class GitHubRepoProtocol(Protocol):
    """Protocol for GitHub repository objects (real or fake)."""
    @property
    def full_name(self) -> str:
        """Get owner/name."""
        ...

    @property
    def allow_merge_commit(self) -> Optional[bool]:
        """Whether the repository allows merge commit merges."""
        ...

    def create_pull(self, title: str, body: str, base: str, head: str) -> GitHubPullRequestProtocol:
        """Create a new pull request."""
        ...

    def get_issue(self, number: int) -> GitHubIssueProtocol:
        """Get an issue (or pull request) by number."""
        ...


class PyGithubProtocol(Protocol):
    """Protocol for the top level PyGithub object (real or fake)."""
    def get_repo(self, full_name_or_id: str) -> GitHubRepoProtocol:
        """Get a repository by full name."""
        ...
