"""
Config Manager

Loads YAML configuration (with include support) and turns it into an
AppConfig. Falls back to factory defaults when the main file is unusable.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.config import AppConfig
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).resolve().parent.parent


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, section by section."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to load modular
    YAML files. Relative paths resolve against src/.

    Example:
        config = ConfigManager()
        app_config = config.load()

        fps = app_config.source.fps
        policy = app_config.playback.policy
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Args:
            config_path: Path to main config.yaml (relative to src/ or absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}
        self.config: Optional[AppConfig] = None

    @staticmethod
    def _resolve(path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else SRC_DIR / path

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
        """
        Load YAML configuration

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Fallback to factory defaults on failure
        4. Apply overrides (CLI flags) on top
        5. Parse into AppConfig (raises ValueError on invalid values)
        """
        try:
            main_config = self._read_yaml(self.config_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                includes = main_config.pop('include')
                self.data = deep_merge(
                    self._load_with_includes(includes, self.config_path.parent),
                    main_config,
                )
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError) as ex:
            log.error(f"Failed to load {self.config_path.name}", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.factory_defaults_path)

        if overrides:
            self.data = deep_merge(self.data, overrides)

        self.config = AppConfig.from_dict(self.data)
        log.info(
            "Configuration loaded",
            source=self.config.source.path,
            fps=self.config.source.fps,
            policy=self.config.playback.policy.name,
        )
        return self.config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data or {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["source.yaml", "playback.yaml"])
            config_dir: Directory containing config files
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
                if file_data:
                    merged = deep_merge(merged, file_data)
                    log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise

        log.debug("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged
