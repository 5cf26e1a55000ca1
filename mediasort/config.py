"""
Configuration management for mediasort.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import DEFAULT_CONVERT_COMMAND, DEFAULT_CONVERT_EXTENSION, PROGRAM


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(PROGRAM).warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            logging.getLogger(PROGRAM).warning(f"Ignoring malformed config: {self.config_path}")
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(PROGRAM).error(f"Could not save config: {e}")

    def get_last_input(self) -> Optional[str]:
        """Get the last used input directory."""
        return self.data.get('last_input')

    def get_last_output(self) -> Optional[str]:
        """Get the last used output directory."""
        return self.data.get('last_output')

    def get_convert_command(self) -> str:
        """Get the converter command template; ``{source}`` is the file to convert."""
        return self.data.get('convert_command') or DEFAULT_CONVERT_COMMAND

    def get_convert_extension(self) -> str:
        return self.data.get('convert_extension') or DEFAULT_CONVERT_EXTENSION

    def update_paths(self, input_dir: str, output_dir: str) -> None:
        """Update and save the last used paths."""
        self.data['last_input'] = input_dir
        self.data['last_output'] = output_dir
        self.save_config()
