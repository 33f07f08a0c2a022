import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from page_assembler import RenderingOptions

# --- Logging Setup ---
app_logger = logging.getLogger('hyperpage')

CONFIG_ENV_VAR = 'HYPERPAGE_CONFIG'


class ConfigError(Exception):
    """Raised when a config file is missing or cannot be parsed."""


class PageConfig:
    """Holds page defaults read from the 'page_settings' section of a YAML config file."""
    def __init__(self, config_dict: Optional[Dict]):
        config_dict = config_dict or {}
        page_settings = config_dict.get('page_settings') or {}
        if not isinstance(page_settings, dict):
            raise ConfigError("'page_settings' must be a mapping")
        markdown_options = page_settings.get('markdown') or {}
        if not isinstance(markdown_options, dict):
            raise ConfigError("'page_settings.markdown' must be a mapping")

        self.title = page_settings.get('title')
        self.css_file = page_settings.get('css_file')
        self.no_default_styles = bool(page_settings.get('no_default_styles', False))

        # Raw HTML injection points
        self.before_head_end = page_settings.get('before_head_end')
        self.after_body_start = page_settings.get('after_body_start')
        self.before_body_end = page_settings.get('before_body_end')

        # Passed through to the markdown renderer
        self.markdown_options = dict(markdown_options)

        self.log_level = str(page_settings.get('log_level', 'WARNING')).upper()

    def read_css(self, base_dir: Union[str, Path, None] = None) -> Optional[str]:
        """Reads css_file, resolved against base_dir when relative."""
        if not self.css_file:
            return None
        css_path = Path(self.css_file)
        if base_dir is not None and not css_path.is_absolute():
            css_path = Path(base_dir) / css_path
        try:
            return css_path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            raise ConfigError(f"Failed to read CSS file: {css_path}") from e

    def to_options(self, base_dir: Union[str, Path, None] = None) -> RenderingOptions:
        """Builds RenderingOptions from the configured values."""
        return RenderingOptions(
            title=self.title,
            css=self.read_css(base_dir),
            no_default_styles=self.no_default_styles,
            before_head_end=self.before_head_end,
            after_body_start=self.after_body_start,
            before_body_end=self.before_body_end,
            renderer_options=self.markdown_options or None,
        )


def load_config(config_path: Union[str, Path]) -> PageConfig:
    """Loads a YAML config file."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {config_path}") from e

    if config_dict is not None and not isinstance(config_dict, dict):
        raise ConfigError(f"Failed to parse config file: {config_path}")

    try:
        config = PageConfig(config_dict)
    except ConfigError as e:
        raise ConfigError(f"Failed to parse config file: {config_path} ({e})") from e

    app_logger.info(f"Loaded config from {config_path}")
    return config


def find_config_path(explicit_path: Optional[str] = None) -> Optional[str]:
    """Returns the config file to use: the explicit path, else $HYPERPAGE_CONFIG, else None."""
    return explicit_path or os.environ.get(CONFIG_ENV_VAR) or None
