"""Config module."""

from typing import Dict, Any
from pydantic import ValidationError

from .models import BackportConfig, GitConfig, TemplateConfig
from ..typing import ConfigurationError

class Config(BackportConfig):
    """Config object holding label pattern, templates and git settings.
    
    Built from the nested dict produced by the config parser.
    """
    def __init__(self, config: Dict[str, Any]):
        """Initialize with parsed config dict."""
        unknown = set(config) - set(BackportConfig.model_fields)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        top_level = {
            key: config[key]
            for key in ('label_pattern', 'issue_labels', 'github_token')
            if config.get(key) is not None
        }
        try:
            super().__init__(
                templates=TemplateConfig.model_validate(config.get('templates') or {}),
                git=GitConfig.model_validate(config.get('git') or {}),
                **top_level
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

def default_config() -> Config:
    """Get default config without reading any file or environment."""
    return Config({})
