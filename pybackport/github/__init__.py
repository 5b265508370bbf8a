"""GitHub interfaces and implementation."""

import os
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import yaml

from .types import (
    GitHubIssueProtocol,
    GitHubPullRequestProtocol,
    GitHubRepoProtocol,
    PyGithubProtocol,
)

__all__ = [
    "GitHubClient",
    "GitHubIssueProtocol",
    "GitHubPullRequestProtocol",
    "GitHubRepoProtocol",
    "PyGithubProtocol",
    "find_github_token",
]

# Get module logger
logger = logging.getLogger(__name__)

MERGE_COMMIT_WARNING = "\n".join([
    "Your repository allows merge commits.",
    " However, Backport only supports rebased and merged pull requests and squashed and merged pull requests.",
    " Consider only allowing rebase and squash merging.",
    " See https://help.github.com/en/github/administering-a-repository/about-merge-methods-on-github for more information.",
])

def find_github_token(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Find GitHub token from action input, env var or gh CLI config."""
    if environ is None:
        environ = os.environ

    # Action input first, then the plain environment variable
    for name in ("INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"):
        token = environ.get(name)
        if token:
            return token

    # Then try gh CLI config at ~/.config/gh/hosts.yml
    try:
        gh_config_path = Path.home() / ".config" / "gh" / "hosts.yml"
        if gh_config_path.exists():
            with open(gh_config_path, "r") as f:
                gh_config = yaml.safe_load(f)
                if gh_config and "github.com" in gh_config:
                    github_config: Dict[str, object] = gh_config["github.com"]
                    token = github_config.get("oauth_token")
                    if isinstance(token, str) and token:
                        return token
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error reading gh CLI config: {e}")
    return None


class GitHubClient:
    """The four GitHub operations a backport run needs, on one repository."""
    def __init__(self, github_client: PyGithubProtocol, owner: str, name: str):
        """Initialize with a GitHub client implementation (real or fake) and the target repository."""
        self.client = github_client
        self.owner = owner
        self.name = name
        self._repo: Optional[GitHubRepoProtocol] = None

    @property
    def repo(self) -> GitHubRepoProtocol:
        """Get GitHub repository, fetching it on first use."""
        if self._repo is None:
            self._repo = self.client.get_repo(f"{self.owner}/{self.name}")
        return self._repo

    @repo.setter
    def repo(self, value: GitHubRepoProtocol) -> None:
        """Set the GitHub repository."""
        self._repo = value

    def allows_merge_commits(self) -> bool:
        """Check the repository merge settings."""
        logger.info(f"> github get repo {self.owner}/{self.name}")
        return bool(self.repo.allow_merge_commit)

    def warn_if_merge_commit_allowed(self) -> None:
        """Log a warning when the repository allows merge commits."""
        if self.allows_merge_commits():
            logger.warning(MERGE_COMMIT_WARNING)

    def create_pull_request(self, base: str, head: str, title: str, body: str) -> int:
        """Create pull request from head into base, returning its number."""
        logger.info(f"> github create {head} -> {base} : {title}")
        pr = self.repo.create_pull(title=title, body=body, base=base, head=head)
        return pr.number

    def set_labels(self, number: int, labels: Sequence[str]) -> None:
        """Replace the labels of an issue or pull request in one call."""
        logger.info(f"> github set labels #{number} : {list(labels)}")
        self.repo.get_issue(number).set_labels(*labels)

    def comment(self, number: int, body: str) -> None:
        """Comment on an issue or pull request."""
        logger.info(f"> github add comment #{number}")
        self.repo.get_issue(number).create_comment(body)
