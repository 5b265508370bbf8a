"""Shared utilities for pybackport tests."""
import subprocess
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

def make_payload(action: str = "closed", number: int = 42, merged: Optional[bool] = True,
                 merge_commit_sha: Optional[str] = "abc123", commits: int = 1,
                 title: str = "Fix the frobnicator", body: Optional[str] = "Fixes #41.",
                 labels: Optional[List[str]] = None, label: Optional[str] = None,
                 owner: str = "testorg", repo: str = "testrepo",
                 clone_url: Optional[str] = None) -> Dict[str, Any]:
    """Build a pull_request webhook payload like the one GitHub sends."""
    if labels is None:
        labels = ["backport stable-1.x"]
    payload: Dict[str, Any] = {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "state": "closed",
            "title": title,
            "body": body,
            "merged": merged,
            "merge_commit_sha": merge_commit_sha,
            "commits": commits,
            "labels": [{"id": i, "name": name, "color": "ededed"} for i, name in enumerate(labels)],
        },
        "repository": {
            "name": repo,
            "full_name": f"{owner}/{repo}",
            "owner": {"login": owner},
            "clone_url": clone_url or f"https://github.com/{owner}/{repo}.git",
        },
        "sender": {"login": "octocat"},
    }
    if action == "labeled":
        payload["label"] = {"name": label if label is not None else labels[0]}
    return payload

def run_cmd(cmd: str, cwd: Optional[str] = None, check: bool = True) -> str:
    """Run shell command and return output.
    
    Args:
        cmd: Command to run
        cwd: Working directory
        check: Whether to check return code
        
    Returns:
        str: Command output
    """
    logger.debug(f"Running command: {cmd}")
    result = subprocess.run(
        cmd, shell=True, check=check, cwd=cwd,
        capture_output=True, text=True
    )
    logger.debug(f"Command output: {result.stdout.strip()}")
    if result.stderr:
        logger.debug(f"Command stderr: {result.stderr.strip()}")
    return result.stdout.strip()
