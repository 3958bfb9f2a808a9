#!/usr/bin/env python3
"""
Settings loader for the Statist build pipeline.
Supports configuration from statist.yml, statist.yaml, or statist.json files.
"""

import os
import json
import logging
import yaml
from typing import Dict, Any, Optional

from .errors import SettingsError


class StatistSettings:
    """Load and manage Statist configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'dest': 'output',
        'content': 'content/**/*.md',
        'templates': 'templates/*.html',
        'strip_prefix': None,
        'site': {},
        'log_dir': None,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['statist.yml', 'statist.yaml', 'statist.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = {k: (v.copy() if isinstance(v, dict) else v)
                         for k, v in self.DEFAULT_SETTINGS.items()}
        self.config_file_path = None
        self.logger = logging.getLogger('Statist')

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings

        Raises:
            SettingsError: If the config file cannot be read or parsed
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if not isinstance(loaded_settings, dict):
                raise SettingsError(f"Configuration file {config_file} must contain a mapping")
            if not isinstance(loaded_settings.get('site', {}), dict):
                raise SettingsError(f"'site' in {config_file} must be a mapping")
            # Merge with defaults, giving preference to loaded settings
            self.settings.update(loaded_settings)
            self.logger.debug(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        try:
            file_ext = os.path.splitext(config_path)[1].lower()

            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise SettingsError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in configuration file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in configuration file {config_path}: {e}") from e
        except (IOError, OSError) as e:
            raise SettingsError(f"Error reading configuration file {config_path}: {e}") from e

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        sample_config = {
            'dest': 'output',
            'content': 'content/**/*.md',
            'templates': 'templates/*.html',
            'strip_prefix': 'content',
            'site': {
                'title': 'My Static Site',
                'url': 'https://example.com',
            },
        }

        if file_format not in ('yml', 'yaml', 'json'):
            raise SettingsError(f"Unsupported config file format: {file_format}")

        filename = f'statist.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    # Custom YAML output with comments
                    f.write("# Statist Configuration File\n\n")
                    f.write("# Output directory for rendered pages\n")
                    f.write("dest: output\n\n")
                    f.write("# Glob patterns for pages and templates\n")
                    f.write("content: content/**/*.md\n")
                    f.write("templates: templates/*.html\n\n")
                    f.write("# Removed from page directories to build their links\n")
                    f.write("strip_prefix: content\n\n")
                    f.write("# Data available to every template\n")
                    f.write("site:\n")
                    f.write("  title: My Static Site\n")
                    f.write("  url: https://example.com\n")
                elif file_format == 'json':
                    json.dump(sample_config, f, indent=2)
        except (IOError, OSError) as e:
            raise SettingsError(f"Error writing configuration file {config_path}: {e}") from e

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None and key in merged:
                merged[key] = value

        return merged
