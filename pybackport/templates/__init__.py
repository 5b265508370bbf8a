"""Template functions deriving the title, head branch, body and labels of a backport PR."""

import json
import logging
from typing import List, Sequence

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..config.models import TemplateConfig
from ..typing import ConfigurationError

logger = logging.getLogger(__name__)


class Templates:
    """Compiled templates, one render method per template kind.

    Each method only receives the variables listed in its signature; a template
    referencing anything else fails with ConfigurationError.
    """

    def __init__(self, config: TemplateConfig):
        self._env = Environment(undefined=StrictUndefined, keep_trailing_newline=True)
        self._title = self._compile("title", config.title)
        self._head = self._compile("head", config.head)
        self._body = self._compile("body", config.body)
        self._labels = self._compile("labels", config.labels)

    def _compile(self, name: str, source: str) -> Template:
        try:
            return self._env.from_string(source)
        except TemplateError as e:
            raise ConfigurationError(f"Invalid {name} template {source!r}: {e}") from e

    @staticmethod
    def _render(name: str, template: Template, **context: object) -> str:
        try:
            return template.render(**context)
        except TemplateError as e:
            raise ConfigurationError(f"Could not render {name} template: {e}") from e

    def get_title(self, base: str, number: int, title: str) -> str:
        return self._render("title", self._title, base=base, number=number, title=title)

    def get_head(self, base: str, number: int) -> str:
        return self._render("head", self._head, base=base, number=number)

    def get_body(self, base: str, body: str, merge_commit_sha: str, number: int) -> str:
        return self._render("body", self._body, base=base, body=body,
                            merge_commit_sha=merge_commit_sha, number=number)

    def get_labels(self, base: str, labels: Sequence[str]) -> List[str]:
        """Render the labels template and parse it as a JSON array of strings."""
        rendered = self._render("labels", self._labels, base=base, labels=list(labels))
        try:
            parsed = json.loads(rendered)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Could not parse labels from invalid JSON: {rendered}.") from e
        if not isinstance(parsed, list) or not all(isinstance(label, str) for label in parsed):
            raise ConfigurationError(f"Labels template must render a JSON array of strings, got: {rendered}.")
        logger.debug(f"Labels for {base}: {parsed}")
        return parsed
