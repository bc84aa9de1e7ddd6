"""
PDF Fusion Configuration Loader

Default grid, progress pacing and output settings, read from
config/pdf_fusion.yaml and environment variables.

Copyright 2025-2026 Andre Lorbach
Licensed under Apache License 2.0
"""

import logging
import os
from pathlib import Path

# YAML support (optional)
try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False

logger = logging.getLogger(__name__)


class FusionConfig:
    """Settings for PDF Fusion."""

    CONFIG_FILE = "config/pdf_fusion.yaml"

    def __init__(self, root_dir=None, config_path=None):
        """
        Initialize configuration.

        Args:
            root_dir: Root directory of the project. If None, auto-detected.
            config_path: Explicit YAML file. Overrides root_dir/CONFIG_FILE.
        """
        if root_dir:
            self.root_dir = Path(root_dir)
        else:
            # Auto-detect: go up from this file's location
            self.root_dir = Path(__file__).parent.parent.parent

        if config_path:
            self.config_path = Path(config_path)
        elif os.environ.get('PDF_FUSION_CONFIG'):
            self.config_path = Path(os.environ['PDF_FUSION_CONFIG'])
        else:
            self.config_path = self.root_dir / self.CONFIG_FILE

        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from file and environment variables."""
        config = {
            'layout': {
                'rows': 2,
                'columns': 2,
                'orientation': 'horizontal',
                'max_rows': 8,
                'max_columns': 8,
            },
            'progress': {
                'delay_ms': 50,
                'merge_restructure_delay_ms': 20,
            },
            'output': {
                'directory': '',
                'ask_save_location': True,
                'open_after_save': False,
            },
            'settings': {
                'prefer_env_vars': True,
            }
        }

        if self.config_path.exists() and YAML_AVAILABLE:
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        self._merge_config(config, file_config)
                logger.info(f"Loaded PDF Fusion config from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Could not load config file {self.config_path}: {e}")
        elif self.config_path.exists() and not YAML_AVAILABLE:
            logger.warning("PyYAML not installed. Cannot load config file. Install with: pip install pyyaml")

        if config['settings'].get('prefer_env_vars', True):
            self._load_env_vars(config)

        return config

    def _merge_config(self, base, override):
        """Recursively merge override into base config."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _load_env_vars(self, config):
        """Override settings from PDF_FUSION_* environment variables."""
        for env_name, section, key in (
            ('PDF_FUSION_ROWS', 'layout', 'rows'),
            ('PDF_FUSION_COLUMNS', 'layout', 'columns'),
            ('PDF_FUSION_PROGRESS_DELAY_MS', 'progress', 'delay_ms'),
        ):
            value = os.environ.get(env_name)
            if value:
                try:
                    config[section][key] = int(value)
                except ValueError:
                    logger.warning(f"Ignoring {env_name}={value!r}: not an integer")

        if os.environ.get('PDF_FUSION_ORIENTATION'):
            config['layout']['orientation'] = os.environ['PDF_FUSION_ORIENTATION'].strip().lower()
        if os.environ.get('PDF_FUSION_OUTPUT_DIR'):
            config['output']['directory'] = os.environ['PDF_FUSION_OUTPUT_DIR']

    def save_config(self):
        """Save current configuration to file."""
        if not YAML_AVAILABLE:
            logger.error("PyYAML not installed. Cannot save config file.")
            return False

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.config, f, default_flow_style=False, indent=2)
            logger.info(f"Saved PDF Fusion config to {self.config_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to save PDF Fusion config: {e}")
            return False

    @staticmethod
    def _clamp(value, low, high):
        return max(low, min(high, value))

    def _int_setting(self, section, key, default):
        """Integer setting from the loaded config; falls back to `default` if not a number."""
        value = self.config.get(section, {}).get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring {section}.{key}={value!r}: not an integer")
            return default

    @property
    def max_rows(self):
        return self._int_setting('layout', 'max_rows', 8)

    @property
    def max_columns(self):
        return self._int_setting('layout', 'max_columns', 8)

    @property
    def rows(self):
        return self._clamp(self._int_setting('layout', 'rows', 2), 1, self.max_rows)

    @rows.setter
    def rows(self, value):
        self.config['layout']['rows'] = int(value)

    @property
    def columns(self):
        return self._clamp(self._int_setting('layout', 'columns', 2), 1, self.max_columns)

    @columns.setter
    def columns(self, value):
        self.config['layout']['columns'] = int(value)

    @property
    def orientation(self):
        value = self.config['layout'].get('orientation', 'horizontal')
        return value if value in ('horizontal', 'vertical') else 'horizontal'

    @orientation.setter
    def orientation(self, value):
        self.config['layout']['orientation'] = value

    @property
    def progress_delay(self):
        """Pause after each progress step, in seconds."""
        return max(0, self._int_setting('progress', 'delay_ms', 50)) / 1000.0

    @property
    def merge_restructure_delay(self):
        return max(0, self._int_setting('progress', 'merge_restructure_delay_ms', 20)) / 1000.0

    @property
    def output_dir(self):
        return self.config['output'].get('directory') or ''

    @output_dir.setter
    def output_dir(self, value):
        self.config['output']['directory'] = str(value)

    @property
    def ask_save_location(self):
        return bool(self.config['output'].get('ask_save_location', True))

    @property
    def open_after_save(self):
        return bool(self.config['output'].get('open_after_save', False))

    def get_status_text(self):
        """Get a human-readable summary of the configuration."""
        lines = [
            f"Default grid: {self.rows} x {self.columns} ({self.orientation})",
            f"Grid limits: {self.max_rows} rows, {self.max_columns} columns",
            f"Output directory: {self.output_dir or '(ask each time)'}",
        ]
        if not YAML_AVAILABLE:
            lines.append("PyYAML not installed: settings file disabled")
        return '\n'.join(lines)


# Singleton instance for easy import
_config_instance = None

def get_fusion_config(root_dir=None):
    """Get the shared configuration instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = FusionConfig(root_dir)
    return _config_instance
