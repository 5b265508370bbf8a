"""Common types used across the codebase."""

from typing import Optional, Protocol, NewType

BranchName = NewType('BranchName', str)
# Either a single sha or a "<sha>~N..<sha>" range
CommitSpec = NewType('CommitSpec', str)


class GitInterface(Protocol):
    """Protocol for what the backporter expects from a git runner."""
    directory: Optional[str]

    def clone(self, url: str, directory: str) -> 'GitInterface':
        """Clone url into directory and return a runner bound to the clone."""
        ...

    def configure_identity(self) -> None:
        """Set the commit author/committer identity for this clone."""
        ...

    def run_cmd(self, command: str) -> str:
        """Run git command."""
        ...

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        ...


class BackportError(Exception):
    """Base class for errors raised by pybackport."""


class ConfigurationError(BackportError):
    """Malformed branch pattern, template or other user supplied setting.

    Always fatal: the whole run stops.
    """


class PreconditionError(BackportError):
    """The triggering event does not describe a merged pull request."""


class UnsupportedEventError(BackportError):
    """The event payload is not a closed or labeled pull request event."""


class GitError(BackportError):
    """A git command failed."""

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(message)
