"""Adapter classes to wrap PyGithub objects with our protocol interfaces."""

from typing import Optional
import logging

from github import Auth, Github
from github.Issue import Issue
from github.PullRequest import PullRequest as PyGithubPullRequest
from github.Repository import Repository

from .types import (
    GitHubIssueProtocol,
    GitHubPullRequestProtocol,
    GitHubRepoProtocol,
    PyGithubProtocol,
)

logger = logging.getLogger(__name__)


class PyGithubPullRequestAdapter(GitHubPullRequestProtocol):
    """Adapter for PyGithub PullRequest objects."""
    
    def __init__(self, pr: PyGithubPullRequest) -> None:
        self._pr = pr
    
    @property
    def number(self) -> int:
        return self._pr.number


class PyGithubIssueAdapter(GitHubIssueProtocol):
    """Adapter for PyGithub Issue objects."""

    def __init__(self, issue: Issue) -> None:
        self._issue = issue

    @property
    def number(self) -> int:
        return self._issue.number

    def set_labels(self, *labels: str) -> None:
        """Replace all labels (PUT /repos/{owner}/{repo}/issues/{number}/labels)."""
        self._issue.set_labels(*labels)

    def create_comment(self, body: str) -> None:
        """Add a comment to the issue."""
        self._issue.create_comment(body)


class PyGithubRepoAdapter(GitHubRepoProtocol):
    """Adapter for PyGithub Repository objects."""
    
    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    @property
    def full_name(self) -> str:
        return self._repo.full_name

    @property
    def allow_merge_commit(self) -> Optional[bool]:
        return self._repo.allow_merge_commit
    
    def create_pull(self, title: str, body: str, base: str, head: str) -> GitHubPullRequestProtocol:
        """Create a new pull request."""
        pr = self._repo.create_pull(title=title, body=body, base=base, head=head)
        return PyGithubPullRequestAdapter(pr)

    def get_issue(self, number: int) -> GitHubIssueProtocol:
        """Get an issue by number."""
        return PyGithubIssueAdapter(self._repo.get_issue(number))


class PyGithubAdapter(PyGithubProtocol):
    """Adapter for the main PyGithub object."""
    
    def __init__(self, github: Github) -> None:
        self._github = github
    
    def get_repo(self, full_name_or_id: str) -> GitHubRepoProtocol:
        """Get a repository by full name."""
        return PyGithubRepoAdapter(self._github.get_repo(full_name_or_id))


def create_github(token: str) -> PyGithubAdapter:
    """Create a real PyGithub client wrapped in our adapter."""
    return PyGithubAdapter(Github(auth=Auth.Token(token)))
