"""Pydantic models for the pull request events that trigger a backport."""

import json
import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..typing import UnsupportedEventError

logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = ("closed", "labeled")


class Label(BaseModel):
    name: str

    class Config:
        frozen = True


class Owner(BaseModel):
    login: str

    class Config:
        frozen = True


class Repository(BaseModel):
    name: str
    owner: Owner
    clone_url: str

    class Config:
        frozen = True


class PullRequestPayload(BaseModel):
    """The `pull_request` object of the webhook payload."""
    number: int
    title: str
    body: Optional[str] = None
    merged: Optional[bool] = None
    merge_commit_sha: Optional[str] = None
    commits: int = Field(ge=1)
    labels: List[Label] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]


class ClosedEvent(BaseModel):
    """A pull request was closed, possibly merged."""
    action: Literal["closed"]
    pull_request: PullRequestPayload
    repository: Repository

    class Config:
        frozen = True


class LabeledEvent(BaseModel):
    """A single label was just added to a pull request."""
    action: Literal["labeled"]
    label: Label
    pull_request: PullRequestPayload
    repository: Repository

    class Config:
        frozen = True


TriggerEvent = Annotated[Union[ClosedEvent, LabeledEvent], Field(discriminator="action")]

_trigger_event_adapter = TypeAdapter(TriggerEvent)


def parse_event(payload: Dict[str, Any]) -> Union[ClosedEvent, LabeledEvent]:
    """Parse a webhook payload into a ClosedEvent or LabeledEvent."""
    action = payload.get("action")
    if "pull_request" not in payload:
        raise UnsupportedEventError(f"Unsupported event action: {action}.")
    if action not in SUPPORTED_ACTIONS:
        raise UnsupportedEventError(f"Unsupported pull request event action: {action}.")
    try:
        return _trigger_event_adapter.validate_python(payload)
    except ValidationError as e:
        raise UnsupportedEventError(f"Invalid pull request event payload: {e}") from e


def load_event(path: str) -> Union[ClosedEvent, LabeledEvent]:
    """Load and parse the event payload stored at path (GITHUB_EVENT_PATH)."""
    logger.debug(f"Loading event payload from {path}")
    with open(path, "r") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise UnsupportedEventError(f"Event payload {path} is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise UnsupportedEventError(f"Event payload {path} must be a JSON object")
    return parse_event(payload)
