"""CLI entry point."""

import json
import os
import sys
import click
from typing import Any, Dict, List, Optional
from click import Context

from ... import get_logger
from ...backport import build_request, compile_label_pattern, resolve_base_branches, run_backport
from ...config import Config
from ...config.config_parser import parse_config
from ...events import load_event
from ...git import RealGit
from ...github import GitHubClient, find_github_token
from ...github.adapters import create_github
from ...pretty import print_json, write_github_output
from ...typing import BackportError, ConfigurationError

logger = get_logger(__name__)

OUTPUT_NAME = "created_pull_requests"

def check(err: Exception) -> None:
    """Log a fatal error and exit."""
    logger.error(f"{err}")
    sys.exit(1)

class AliasedGroup(click.Group):
    """Command group with support for aliases."""

    def __init__(self, name: Optional[str] = None, commands: Optional[Dict[str, click.Command]] = None, **attrs: Any) -> None:
        """Initialize with aliases map."""
        super().__init__(name, commands, **attrs)
        self.aliases: Dict[str, str] = {}

    def add_alias(self, alias: str, command: str) -> None:
        """Add an alias for a command."""
        self.aliases[alias] = command

    def get_command(self, ctx: Context, cmd_name: str) -> Optional[click.Command]:
        """Get a command by name, supporting aliases."""
        if cmd_name in self.aliases:
            cmd_name = self.aliases[cmd_name]
        return super().get_command(ctx, cmd_name)

@click.group(cls=AliasedGroup)
@click.pass_context
def cli(ctx: Context) -> None:
    """Backport merged pull requests to the branches named by their labels."""
    ctx.obj = {}

def event_path_option(f: Any) -> Any:
    return click.option('--event-path', type=click.Path(exists=True, dir_okay=False),
                        envvar='GITHUB_EVENT_PATH', required=True,
                        help="Path to the pull_request event payload (defaults to $GITHUB_EVENT_PATH)")(f)

def build_overrides(label_pattern: Optional[str], title_template: Optional[str] = None,
                    head_template: Optional[str] = None, body_template: Optional[str] = None,
                    labels_template: Optional[str] = None, issue_label: Optional[List[str]] = None,
                    token: Optional[str] = None, workdir: Optional[str] = None) -> Dict[str, Any]:
    """Turn CLI options into a raw config dict, skipping unset options."""
    overrides: Dict[str, Any] = {}
    if label_pattern:
        overrides['label_pattern'] = label_pattern
    templates = {
        key: value for key, value in (
            ('title', title_template), ('head', head_template),
            ('body', body_template), ('labels', labels_template),
        ) if value is not None
    }
    if templates:
        overrides['templates'] = templates
    if issue_label:
        overrides['issue_labels'] = list(issue_label)
    if token:
        overrides['github_token'] = token
    if workdir:
        overrides['git'] = {'workdir': workdir}
    return overrides

@cli.command(name="run", help="Backport a merged pull request to the branches selected by its labels")
@event_path_option
@click.option('--label-pattern', help="Regular expression with a 'base' named group matched against labels")
@click.option('--title-template', help="Jinja template for the backport PR title ({{ base }}, {{ number }}, {{ title }})")
@click.option('--head-template', help="Jinja template for the backport branch name ({{ base }}, {{ number }})")
@click.option('--body-template', help="Jinja template for the backport PR body ({{ base }}, {{ body }}, {{ merge_commit_sha }}, {{ number }})")
@click.option('--labels-template', help="Jinja template rendering a JSON array of labels ({{ base }}, {{ labels }})")
@click.option('--issue-label', '-l', multiple=True, help="Add the specified label to every backport pull request")
@click.option('--token', help="GitHub token (defaults to $INPUT_GITHUB_TOKEN, $GITHUB_TOKEN or the gh CLI login)")
@click.option('--workdir', type=click.Path(file_okay=False), help="Directory the repository is cloned into")
@click.option('-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")
@click.pass_context
def run(ctx: Context, event_path: str, label_pattern: Optional[str], title_template: Optional[str],
        head_template: Optional[str], body_template: Optional[str], labels_template: Optional[str],
        issue_label: List[str], token: Optional[str], workdir: Optional[str], verbose: int) -> None:
    """Run command."""
    from ... import setup_logging
    setup_logging(verbose)

    try:
        overrides = build_overrides(label_pattern, title_template, head_template, body_template,
                                    labels_template, issue_label, token, workdir)
        config = Config(parse_config(overrides))
        event = load_event(event_path)
        github_token = config.github_token or find_github_token()
        if not github_token:
            raise ConfigurationError(
                "No GitHub token found. Try one of:\n1. Pass --token\n2. Set GITHUB_TOKEN env var\n3. Log in with 'gh auth login'"
            )
        request = build_request(config, event, github_token)
        github = GitHubClient(create_github(github_token), event.repository.owner.login, event.repository.name)
        git_cmd = RealGit(config.git, os.path.abspath(config.git.workdir))
        created = run_backport(request, github, git_cmd, config.git)
    except BackportError as e:
        check(e)
        return

    print_json(created)
    write_github_output(OUTPUT_NAME, json.dumps(created))

@cli.command(name="branches", help="Show the base branches a pull request event would be backported to")
@event_path_option
@click.option('--label-pattern', help="Regular expression with a 'base' named group matched against labels")
@click.option('-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")
@click.pass_context
def branches(ctx: Context, event_path: str, label_pattern: Optional[str], verbose: int) -> None:
    """Branches command."""
    from ... import setup_logging
    setup_logging(verbose)

    try:
        config = Config(parse_config(build_overrides(label_pattern)))
        event = load_event(event_path)
        base_branches = resolve_base_branches(compile_label_pattern(config.label_pattern), event)
    except BackportError as e:
        check(e)
        return

    print_json(base_branches)


cli.add_alias('ls', 'branches')


def main() -> None:
    """Main entry point."""
    cli(obj={})

if __name__ == "__main__":
    main()
