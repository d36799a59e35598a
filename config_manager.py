"""
Configuration management for the Snowplow tracker.
Handles loading, validating, and providing access to collector and tracker settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class CollectorConfig:
    """Collector connection settings."""
    endpoint: str
    scheme: str
    path: str
    timeout: float
    proxy: Optional[str]


@dataclass
class TrackerConfig:
    """Tracker instance settings."""
    namespace: str
    app_id: str
    platform: str
    encode_base64: bool
    contracts: bool
    debug: bool
    track: bool


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manages tracker configuration loading and access."""

    def __init__(self, config_file: str = "tracker_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "collector": {
                "endpoint": "",
                "scheme": "https",
                "path": "/i",
                "timeout": 5.0,
                "proxy": None
            },
            "tracker": {
                "namespace": "default",
                "app_id": "",
                "platform": "pc",
                "encode_base64": True,
                "contracts": True,
                "debug": False,
                "track": True
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        collector = self._config["collector"]
        tracker = self._config["tracker"]

        if os.getenv("SNOWPLOW_COLLECTOR_URI"):
            collector["endpoint"] = os.getenv("SNOWPLOW_COLLECTOR_URI")

        if os.getenv("SNOWPLOW_COLLECTOR_SCHEME"):
            collector["scheme"] = os.getenv("SNOWPLOW_COLLECTOR_SCHEME")

        if os.getenv("SNOWPLOW_COLLECTOR_PATH"):
            collector["path"] = os.getenv("SNOWPLOW_COLLECTOR_PATH")

        if os.getenv("SNOWPLOW_COLLECTOR_TIMEOUT"):
            collector["timeout"] = float(os.getenv("SNOWPLOW_COLLECTOR_TIMEOUT"))

        if os.getenv("SNOWPLOW_PROXY"):
            collector["proxy"] = os.getenv("SNOWPLOW_PROXY")

        if os.getenv("SNOWPLOW_NAMESPACE"):
            tracker["namespace"] = os.getenv("SNOWPLOW_NAMESPACE")

        if os.getenv("SNOWPLOW_APP_ID"):
            tracker["app_id"] = os.getenv("SNOWPLOW_APP_ID")

        if os.getenv("SNOWPLOW_PLATFORM"):
            tracker["platform"] = os.getenv("SNOWPLOW_PLATFORM")

        for key in ("encode_base64", "contracts", "debug", "track"):
            value = os.getenv(f"SNOWPLOW_{key.upper()}")
            if value:
                tracker[key] = _env_flag(value)

    def get_collector_config(self) -> CollectorConfig:
        """Get collector configuration."""
        collector = self._config["collector"]
        return CollectorConfig(
            endpoint=collector["endpoint"],
            scheme=collector["scheme"],
            path=collector["path"],
            timeout=float(collector["timeout"]),
            proxy=collector.get("proxy")
        )

    def get_tracker_config(self) -> TrackerConfig:
        """Get tracker configuration."""
        tracker = self._config["tracker"]
        return TrackerConfig(
            namespace=tracker["namespace"],
            app_id=tracker["app_id"],
            platform=tracker["platform"],
            encode_base64=bool(tracker["encode_base64"]),
            contracts=bool(tracker["contracts"]),
            debug=bool(tracker["debug"]),
            track=bool(tracker["track"])
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_collector_config() -> CollectorConfig:
    """Get collector configuration."""
    return config_manager.get_collector_config()


def get_tracker_config() -> TrackerConfig:
    """Get tracker configuration."""
    return config_manager.get_tracker_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration."""
    config_manager.save_config()
