"""Config parser logic."""

import os
from typing import Dict, List, Mapping, Optional, Any
import logging
import yaml

from ...typing import ConfigurationError

# Get module logger
logger = logging.getLogger(__name__)

RawConfig = Dict[str, Any]  # Use Any since yaml can return various types

CONFIG_FILE = ".backport.yaml"

# GitHub Action input name -> (section, key); section None means top level
ACTION_INPUTS = {
    'label_pattern': (None, 'label_pattern'),
    'title_template': ('templates', 'title'),
    'head_template': ('templates', 'head'),
    'body_template': ('templates', 'body'),
    'labels_template': ('templates', 'labels'),
    'issue_labels': (None, 'issue_labels'),
    'github_token': (None, 'github_token'),
}

def parse_issue_labels(value: Optional[str]) -> List[str]:
    """Split a comma separated label list, dropping blank entries."""
    if not value:
        return []
    return [label.strip() for label in value.split(",") if label.strip()]

def _set(config: RawConfig, section: Optional[str], key: str, value: Any) -> None:
    if section is None:
        config[key] = value
    else:
        config.setdefault(section, {})[key] = value

def load_config_file(path: str = CONFIG_FILE) -> RawConfig:
    """Load a YAML config file, returning an empty dict if it is missing."""
    try:
        with open(path, 'r') as f:
            logger.info(f"Found {path}, loading...")
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug(f"No {path} found, using defaults")
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data

def action_inputs(environ: Mapping[str, str]) -> RawConfig:
    """Read GitHub Action inputs (INPUT_<NAME> variables) into a raw config."""
    config: RawConfig = {}
    for name, (section, key) in ACTION_INPUTS.items():
        value = environ.get(f"INPUT_{name.upper()}")
        # Actions pass unset inputs as empty strings
        if not value:
            continue
        if name == 'issue_labels':
            _set(config, section, key, parse_issue_labels(value))
        else:
            _set(config, section, key, value)
    return config

def merge_config(base: RawConfig, override: RawConfig) -> RawConfig:
    """Merge override into base, one level deep for sections."""
    merged: RawConfig = {k: (dict(v) if isinstance(v, dict) else v) for k, v in base.items()}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged

def parse_config(overrides: Optional[RawConfig] = None, path: str = CONFIG_FILE,
                 environ: Optional[Mapping[str, str]] = None) -> RawConfig:
    """Parse config from the repository config file, action inputs and CLI overrides.

    Later sources win: file < INPUT_* environment < overrides.
    """
    if environ is None:
        environ = os.environ
    config = load_config_file(path)
    config = merge_config(config, action_inputs(environ))
    if overrides:
        config = merge_config(config, overrides)
    logger.debug(f"Config keys: {sorted(config)}")
    return config
