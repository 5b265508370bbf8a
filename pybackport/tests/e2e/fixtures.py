"""Fixtures for end-to-end tests against real git repositories."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Generator

import pytest

from pybackport.tests.utils import run_cmd
from pybackport.tests.e2e.fake_pygithub import FakeGithub

logger = logging.getLogger(__name__)

OWNER = "testorg"
NAME = "testrepo"


@dataclass
class RemoteRepo:
    """A bare repository standing in for GitHub, seeded with release branches.

    History:
        main:       base -- feature (squash merged PR #42) -- followup
        stable-1.x: base
        stable-2.x: base -- conflicting change to shared.txt
    """
    path: Path
    seed: Path
    merge_commit_sha: str
    range_tip_sha: str

    def git(self, cmd: str) -> str:
        return run_cmd(f"git {cmd}", cwd=str(self.path))

    def branch_exists(self, branch: str) -> bool:
        return run_cmd(f"git rev-parse --verify --quiet refs/heads/{branch}", cwd=str(self.path), check=False) != ""

    def log(self, branch: str) -> str:
        return self.git(f"log --format=%B {branch}")

    def show_file(self, branch: str, file: str) -> str:
        return self.git(f"show {branch}:{file}")


def _commit(seed: Path, file: str, content: str, msg: str) -> str:
    (seed / file).write_text(content)
    run_cmd(f"git add {file}", cwd=str(seed))
    run_cmd(f'git commit -q -m "{msg}"', cwd=str(seed))
    return run_cmd("git rev-parse HEAD", cwd=str(seed))


def create_remote_repo(root: Path) -> RemoteRepo:
    """Build the seed history and publish it as a bare repository."""
    seed = root / "seed"
    seed.mkdir()
    run_cmd("git init -q", cwd=str(seed))
    run_cmd("git symbolic-ref HEAD refs/heads/main", cwd=str(seed))
    run_cmd("git config user.name 'Test User'", cwd=str(seed))
    run_cmd("git config user.email test@example.com", cwd=str(seed))
    run_cmd("git config commit.gpgsign false", cwd=str(seed))

    _commit(seed, "shared.txt", "one\ntwo\nthree\n", "Initial commit")
    run_cmd("git branch stable-1.x", cwd=str(seed))
    run_cmd("git branch stable-2.x", cwd=str(seed))

    merge_commit_sha = _commit(seed, "shared.txt", "one\ntwo (fixed)\nthree\n", "Fix the frobnicator (#42)")
    range_tip_sha = _commit(seed, "feature.txt", "feature\n", "Add feature docs")

    run_cmd("git switch -q stable-2.x", cwd=str(seed))
    _commit(seed, "shared.txt", "one\ntwo (patched differently)\nthree\n", "Diverge on stable-2.x")
    run_cmd("git switch -q main", cwd=str(seed))

    bare = root / f"{NAME}.git"
    run_cmd(f"git clone -q --bare {seed} {bare}", cwd=str(root))
    return RemoteRepo(bare, seed, merge_commit_sha, range_tip_sha)


@pytest.fixture
def remote_repo(tmp_path: Path) -> Generator[RemoteRepo, None, None]:
    """A fresh bare remote per test."""
    yield create_remote_repo(tmp_path)


@pytest.fixture
def fake_github(remote_repo: RemoteRepo) -> FakeGithub:
    """Fake GitHub whose testorg/testrepo is backed by remote_repo and holds PR #42."""
    github = FakeGithub()
    repo = github.create_repo(f"{OWNER}/{NAME}", remote_path=remote_repo.path)
    repo.add_issue(42, "Fix the frobnicator", ["backport stable-1.x"])
    return github
