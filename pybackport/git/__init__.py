"""Git interfaces and implementation."""

import os
import shlex
import logging
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, quote
import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from ..typing import GitError
from ..config.models import GitConfig

# Get module logger
logger = logging.getLogger(__name__)

TOKEN_USERNAME = "x-access-token"

def authenticated_clone_url(clone_url: str, token: str) -> str:
    """Embed the access token into an http(s) clone URL.

    Other URLs (file paths, ssh) are returned unchanged.
    """
    parts = urlsplit(clone_url)
    if parts.scheme not in ("http", "https") or not token:
        return clone_url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{TOKEN_USERNAME}:{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))

def redact_url(url: str) -> str:
    """Hide credentials embedded in a URL so it can be logged."""
    parts = urlsplit(url)
    if not parts.password:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, f"{parts.username}:***@{host}", parts.path, parts.query, parts.fragment))

def _git_error_message(e: GitCommandError) -> str:
    stderr = (e.stderr or "").strip()
    # GitPython wraps stderr as "  stderr: '...'"
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'")
    return stderr or str(e)

class RealGit:
    """Real Git implementation backed by GitPython.

    Commands run in `directory`, which is fixed per instance. Cloning
    returns a new instance bound to the clone.
    """
    def __init__(self, config: GitConfig, directory: Optional[str] = None):
        """Initialize with config and working directory."""
        self.config: GitConfig = config
        self.directory: Optional[str] = directory

    def clone(self, url: str, directory: str) -> 'RealGit':
        """Clone url into directory."""
        logger.info(f"> git clone {redact_url(url)} {directory}")
        try:
            git.Repo.clone_from(url, directory)
        except GitCommandError as e:
            # The command line holds the token; only keep git's own message
            raise GitError("clone", f"Git command failed: git clone {redact_url(url)}\n{_git_error_message(e)}") from None
        return RealGit(self.config, directory)

    def configure_identity(self) -> None:
        """Set the commit identity for this clone only."""
        self.must_git(f"config user.email {shlex.quote(self.config.user_email)}")
        self.must_git(f"config user.name {shlex.quote(self.config.user_name)}")

    def run_cmd(self, command: str) -> str:
        """Run git command."""
        cmd_str = command.strip()

        # Always log git commands
        logger.info(f"> git {cmd_str}")
        try:
            repo = git.Repo(self.directory or os.getcwd(), search_parent_directories=True)
            git_cmd = repo.git
            # Convert command to method call
            cmd_parts = shlex.split(cmd_str)
            git_command = cmd_parts[0]
            git_args = cmd_parts[1:]
            method = getattr(git_cmd, git_command.replace('-', '_'))
            result = method(*git_args)
            return result if isinstance(result, str) else str(result)
        except GitCommandError as e:
            raise GitError(cmd_str, f"Git command failed: git {cmd_str}\n{_git_error_message(e)}") from e
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError(cmd_str, f"Not in a git repository: {self.directory}") from e

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        return self.run_cmd(command)

