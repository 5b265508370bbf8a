"""Pretty formatting utilities for CLI output."""

import json
import os
import shutil
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Optional

def get_term_width() -> int:
    """Get terminal width, default to 80 if can't detect."""
    try:
        return shutil.get_terminal_size().columns
    except (OSError, ValueError):
        return 80


def header(text: str) -> str:
    """Create a boxed header."""
    width = max(get_term_width(), len(text) + 4)
    
    h_line = "─" * (width - 2)  
    v_line = "│"
    
    result = [
        f"┌{h_line}┐",
        f"{v_line} {text}{' ' * (width - len(text) - 3)}{v_line}",
        f"└{h_line}┘"
    ]
    
    return "\n".join(result)


def in_github_actions() -> bool:
    """Whether we are running inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


@contextmanager
def log_group(title: str, file: Optional[IO[str]] = None) -> Iterator[None]:
    """Group the output produced inside the block.

    Uses the ::group:: workflow command on GitHub Actions, a header elsewhere.
    """
    if file is None:
        file = sys.stderr
    actions = in_github_actions()
    if actions:
        # Workflow commands are only recognised on stdout
        print(f"::group::{title}", file=sys.stdout, flush=True)
    else:
        print(header(title), file=file, flush=True)
    try:
        yield
    finally:
        if actions:
            print("::endgroup::", file=sys.stdout, flush=True)


def pretty_json(data: object, prefix: str = "") -> str:
    """Format JSON data with optional prefix."""
    raw = json.dumps(data, indent=2)
    if prefix:
        lines = raw.split("\n")
        return "\n".join(f"{prefix}{line}" for line in lines)
    return raw


def print_json(data: object, prefix: str = "", file: Optional[IO[str]] = None) -> None:
    """Print JSON data to file (default stdout)."""
    if file is None:
        file = sys.stdout
    print(pretty_json(data, prefix), file=file)


def write_github_output(name: str, value: str, path: Optional[str] = None) -> bool:
    """Append name=value to the GITHUB_OUTPUT file. Returns False when there is none."""
    if path is None:
        path = os.environ.get("GITHUB_OUTPUT")
    if not path:
        return False
    with open(path, "a") as f:
        f.write(f"{name}={value}\n")
    return True
