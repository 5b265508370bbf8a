"""Backport implementation.

A merged pull request carrying labels such as ``backport stable-1.x`` is
replayed onto every branch named by those labels. Each branch gets its own
cherry-pick and follow-up pull request; a branch that fails is reported on
the original pull request with the commands needed to finish it by hand,
and the remaining branches are still attempted.
"""

import os
import re
import shlex
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple, Union

from ..config import Config
from ..config.models import GitConfig
from ..events import ClosedEvent, LabeledEvent
from ..git import authenticated_clone_url
from ..github import GitHubClient
from ..pretty import log_group
from ..templates import Templates
from ..util import ensure
from ..typing import BranchName, CommitSpec, ConfigurationError, GitError, GitInterface, PreconditionError

logger = logging.getLogger(__name__)

TriggerEvent = Union[ClosedEvent, LabeledEvent]

# JavaScript style named group, "(?<name>" but not lookbehind "(?<=" / "(?<!"
_JS_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")

PRECONDITION_MESSAGE = "For security reasons, this action should only run on merged PRs."


def compile_label_pattern(pattern: str) -> Pattern[str]:
    """Compile a label pattern, accepting (?<base>...) as well as (?P<base>...)."""
    try:
        return re.compile(_JS_NAMED_GROUP.sub("(?P<", pattern))
    except re.error as e:
        raise ConfigurationError(f'Invalid label pattern "{pattern}": {e}') from e


def get_base_branch_from_label(label: str, label_pattern: Pattern[str]) -> Optional[BranchName]:
    """Return the base branch named by label, or None if the pattern does not match."""
    match = label_pattern.search(label)
    if not match:
        return None
    base = match.groupdict().get("base")
    if not base:
        raise ConfigurationError(
            f'RegExp "{label_pattern.pattern}" matched "{label}" but missed a "base" named capturing group.'
        )
    return BranchName(base)


def resolve_base_branches(label_pattern: Pattern[str], event: TriggerEvent) -> List[BranchName]:
    """Get the distinct target base branches for an event.

    A labeled event only looks at the label that was just added; a closed
    event looks at every label of the pull request.
    """
    if isinstance(event, LabeledEvent):
        labels = [event.label.name]
    else:
        labels = event.pull_request.label_names

    branches: List[BranchName] = []
    for label in labels:
        base = get_base_branch_from_label(label, label_pattern)
        if base is not None and base not in branches:
            branches.append(base)
    return branches


def get_commit_spec(merge_commit_sha: str, commit_count: int) -> CommitSpec:
    """Commit or range to cherry-pick for a squashed or rebased pull request."""
    if commit_count < 1:
        raise ValueError(f"Commit count must be at least 1, got {commit_count}")
    if commit_count == 1:
        return CommitSpec(merge_commit_sha)
    return CommitSpec(f"{merge_commit_sha}~{commit_count}..{merge_commit_sha}")


def render_recovery_comment(base: str, head: str, commit_spec: str, error_message: str) -> str:
    """Comment body explaining how to finish a failed backport manually."""
    worktree_path = f".worktrees/backport-{base}"
    return "\n".join([
        f"The backport to `{base}` failed:",
        "```",
        error_message,
        "```",
        "To backport manually, run these commands in your terminal:",
        "```bash",
        "# Fetch latest updates from GitHub",
        "git fetch",
        "# Create a new working tree",
        f"git worktree add {worktree_path} {base}",
        "# Navigate to the new working tree",
        f"cd {worktree_path}",
        "# Create a new branch",
        f"git switch --create {head}",
        "# Cherry-pick the merged commits of this pull request and resolve the conflicts",
        f"git cherry-pick -x {commit_spec}",
        "# Push it to GitHub",
        f"git push --set-upstream origin {head}",
        "# Go back to the original working tree",
        "cd ../..",
        "# Delete the working tree",
        f"git worktree remove {worktree_path}",
        "```",
        f"Then, create a pull request where the `base` branch is `{base}` and the `compare`/`head` branch is `{head}`.",
    ])


def merge_labels(labels: Sequence[str], issue_labels: Sequence[str]) -> List[str]:
    """Template labels followed by static issue labels, without duplicates."""
    merged: List[str] = []
    for label in list(labels) + list(issue_labels):
        if label not in merged:
            merged.append(label)
    return merged


@dataclass(frozen=True)
class BackportRequest:
    """Everything one backport run needs: template functions, pattern, event and token."""
    get_body: Callable[..., str]
    get_head: Callable[..., str]
    get_labels: Callable[..., List[str]]
    get_title: Callable[..., str]
    label_pattern: Pattern[str]
    event: TriggerEvent
    token: str
    issue_labels: Tuple[str, ...] = ()


def build_request(config: Config, event: TriggerEvent, token: str) -> BackportRequest:
    """Build a BackportRequest from configuration."""
    templates = Templates(config.templates)
    return BackportRequest(
        get_body=templates.get_body,
        get_head=templates.get_head,
        get_labels=templates.get_labels,
        get_title=templates.get_title,
        label_pattern=compile_label_pattern(config.label_pattern),
        event=event,
        token=token,
        issue_labels=tuple(config.issue_labels),
    )


@dataclass
class BackportAttempt:
    """State for backporting to one base branch."""
    base: BranchName
    head: str
    title: str
    body: str
    commit_spec: CommitSpec
    labels: List[str] = field(default_factory=list)


@dataclass
class BackportOutcome:
    """Result of one attempt: a pull request number or the error that stopped it."""
    base: BranchName
    number: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def backport_once(attempt: BackportAttempt, git_cmd: GitInterface, github: GitHubClient,
                  remote: str = "origin") -> int:
    """Cherry-pick onto a new branch off base, push it and open a pull request.

    Any failure propagates. A failed cherry-pick is aborted first so the
    clone is clean for the next branch.
    """
    for name in (attempt.base, attempt.head):
        # git would read these as options
        if name.startswith("-"):
            raise ValueError(f"Invalid branch name \"{name}\".")
    base = shlex.quote(attempt.base)
    head = shlex.quote(attempt.head)

    git_cmd.must_git(f"switch {base}")
    git_cmd.must_git(f"switch --create {head}")
    try:
        logger.info(f"Cherry-picking range: {attempt.commit_spec}")
        git_cmd.must_git(f"cherry-pick -x {shlex.quote(attempt.commit_spec)}")
    except Exception:
        try:
            git_cmd.must_git("cherry-pick --abort")
        except GitError as abort_error:
            # Nothing to abort when the cherry-pick never started
            logger.warning(f"cherry-pick --abort failed: {abort_error}")
        raise

    git_cmd.must_git(f"push --set-upstream {shlex.quote(remote)} {head}")
    number = github.create_pull_request(base=attempt.base, head=attempt.head,
                                        title=attempt.title, body=attempt.body)
    if attempt.labels:
        github.set_labels(number, attempt.labels)

    logger.info(f"PR #{number} has been created.")
    return number


class Backport:
    """Backport a merged pull request to every branch its labels select."""

    def __init__(self, request: BackportRequest, github: GitHubClient, git_cmd: GitInterface,
                 git_config: Optional[GitConfig] = None):
        """Initialize with the request, GitHub and git clients."""
        self.request = request
        self.github = github
        self.git_cmd = git_cmd
        self.git_config = git_config or GitConfig()

    def check_preconditions(self) -> None:
        """Refuse to act on anything but a merged pull request."""
        pr = self.request.event.pull_request
        if pr.merged is not True or not pr.merge_commit_sha:
            # pull_request_target runs with write access even for untrusted PRs
            raise PreconditionError(PRECONDITION_MESSAGE)

    def clone_repository(self) -> GitInterface:
        """Clone the repository once and set up the bot identity in the clone."""
        repository = self.request.event.repository
        url = authenticated_clone_url(repository.clone_url, self.request.token)
        directory = os.path.join(self.git_config.workdir, repository.name)
        clone = self.git_cmd.clone(url, directory)
        clone.configure_identity()
        return clone

    def prepare_attempt(self, base: BranchName, commit_spec: CommitSpec) -> BackportAttempt:
        """Derive head, title, body and labels for one base branch.

        Template errors are configuration errors and stop the run.
        """
        pr = self.request.event.pull_request
        label_pattern = self.request.label_pattern
        # The labels that selected the branches are not carried over
        original_labels = [label for label in pr.label_names if not label_pattern.search(label)]
        labels = self.request.get_labels(base=base, labels=original_labels)
        return BackportAttempt(
            base=base,
            head=self.request.get_head(base=base, number=pr.number),
            title=self.request.get_title(base=base, number=pr.number, title=pr.title),
            body=self.request.get_body(base=base, body=pr.body or "",
                                       merge_commit_sha=commit_spec, number=pr.number),
            commit_spec=commit_spec,
            labels=merge_labels(labels, self.request.issue_labels),
        )

    def attempt(self, clone: GitInterface, attempt: BackportAttempt) -> BackportOutcome:
        """Run backport_once, capturing its failure instead of raising it."""
        try:
            number = backport_once(attempt, clone, self.github, remote=self.git_config.remote)
        except Exception as e:
            logger.error(f"Backport to {attempt.base} failed: {e}")
            return BackportOutcome(attempt.base, error=e)
        return BackportOutcome(attempt.base, number=number)

    def report_failure(self, attempt: BackportAttempt, error: Exception) -> None:
        """Post the manual recovery steps on the original pull request."""
        number = self.request.event.pull_request.number
        body = render_recovery_comment(attempt.base, attempt.head, attempt.commit_spec, str(error))
        try:
            self.github.comment(number, body)
        except Exception as e:
            logger.error(f"Failed to comment on #{number} about {attempt.base}: {e}")

    def run(self) -> Dict[str, int]:
        """Backport to all selected branches, returning base branch -> new PR number."""
        self.check_preconditions()
        event = self.request.event
        pr = event.pull_request

        base_branches = resolve_base_branches(self.request.label_pattern, event)
        if not base_branches:
            logger.info("No backports required.")
            return {}

        self.github.warn_if_merge_commit_allowed()

        commit_spec = get_commit_spec(str(pr.merge_commit_sha), pr.commits)
        logger.info(f"Backporting {commit_spec} from #{pr.number}.")

        clone = self.clone_repository()

        created: Dict[str, int] = {}
        # One branch at a time: they all share the clone's working tree
        for base in base_branches:
            attempt = self.prepare_attempt(base, commit_spec)
            with log_group(f"Backporting to {base} on {attempt.head}."):
                outcome = self.attempt(clone, attempt)
                if outcome.ok:
                    created[base] = ensure(outcome.number, "PR number")
                else:
                    self.report_failure(attempt, ensure(outcome.error, "error"))
        return created


def run_backport(request: BackportRequest, github: GitHubClient, git_cmd: GitInterface,
                 git_config: Optional[GitConfig] = None) -> Dict[str, int]:
    """Run one backport; see Backport.run."""
    return Backport(request, github, git_cmd, git_config).run()
