"""Configuration management for note_match components."""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..scale_note import ScaleNote

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager for note_match components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/note_match by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "note_match")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "tuner": {
                "transposition": "C",
                "use_flats": False,
                "min_frequency": 0.0,  # 0 disables the lower bound
                "max_frequency": 0.0,  # 0 disables the upper bound
                "in_tune_cents": 5.0,
                "strict_invariants": True,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                logger.info(f"Loaded configuration from {config_file}")
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()

            if not isinstance(config, dict):
                logger.error(f"Configuration in {config_file} is not an object")
                return default_config.copy()

            # Ensure all default keys are present
            for key, value in default_config.items():
                if key not in config:
                    config[key] = value

            return self.validate_config(name, config)
        else:
            # Create default configuration
            config = default_config.copy()
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary
        """
        return self.configs.get(name, {}).copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name].update(updates)
        self.configs[name] = self.validate_config(name, self.configs[name])
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Args:
            name: Configuration name

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = self.default_configs[name].copy()
        return self.save_config(name, self.configs[name])

    def validate_config(self, name: str, config: Dict[str, Any]) -> Dict[str, Any]:
        """Replace invalid values with their defaults.

        Each rejected value is logged. Only the "tuner" section has rules.

        Args:
            name: Configuration name
            config: Configuration dictionary to check

        Returns:
            The configuration with every invalid value reset to its default
        """
        if name != "tuner":
            return config

        defaults = self.default_configs[name]
        config = config.copy()

        def reject(key: str, reason: str) -> None:
            logger.error(
                f"Invalid {name} setting {key}={config[key]!r} ({reason}), "
                f"using default {defaults[key]!r}"
            )
            config[key] = defaults[key]

        try:
            ScaleNote.from_name(config["transposition"])
        except ValueError:
            reject("transposition", "unknown note name")

        for key in ("use_flats", "strict_invariants"):
            if not isinstance(config[key], bool):
                reject(key, "expected true or false")

        for key in ("min_frequency", "max_frequency", "in_tune_cents"):
            value = config[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                reject(key, "expected a number")
            elif not value >= 0:
                reject(key, "expected a non-negative number")

        low, high = config["min_frequency"], config["max_frequency"]
        if low and high and low > high:
            reject("min_frequency", f"above max_frequency {high}")

        return config
