# -*- coding: utf-8 -*-

"""
Centralized registry of connection profiles used by the command line.

A profile stores the instance URL, the API version and polling defaults
under a name. Session ids are never written to the registry; they come from
the environment.
"""

import platformdirs
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional, List
import logging

from .misc import read_yaml, write_yaml


PROFILE_KEYS = ("instance_url", "api_version", "number_of_tries", "wait_time")

# Global registry instance
_registry = None


class ProfileRegistry:
    """Registry of named connection profiles stored as YAML."""

    def __init__(self, registry_path: Optional[str | Path] = None):
        self.registry_path = Path(registry_path) if registry_path else self._get_registry_path()
        self._ensure_registry_exists()

    def _get_registry_path(self) -> Path:
        """Get the platform-specific registry path."""
        config_dir = platformdirs.user_config_dir("bulk-batch-client", "bulk-batch-client")
        return Path(config_dir) / "profiles.yaml"

    def _ensure_registry_exists(self):
        """Ensure the registry directory and file exist."""
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.registry_path.exists():
            self._save_registry({"profiles": {}})

    def _load_registry(self) -> Dict:
        """Load the registry from disk."""
        try:
            registry = read_yaml(self.registry_path)
        except Exception as e:
            logging.warning(f"Error loading profile registry: {e}. Creating new registry.")
            return {"profiles": {}}
        if not registry or not isinstance(registry.get("profiles"), dict):
            return {"profiles": {}}
        return registry

    def _save_registry(self, registry: Dict):
        """Save the registry to disk."""
        try:
            write_yaml(registry, self.registry_path)
        except Exception as e:
            logging.error(f"Error saving profile registry: {e}")
            raise

    def save_profile(self, name: str, settings: Dict) -> Dict:
        """
        Create or update a profile.

        Args:
            name (str): Profile name.
            settings (dict): Values for any of PROFILE_KEYS. Unknown keys are
                rejected; None values are ignored.

        Returns:
            dict: The stored profile.
        """
        unknown = set(settings) - set(PROFILE_KEYS)
        if unknown:
            raise ValueError(f"Unknown profile settings: {sorted(unknown)}")

        registry = self._load_registry()
        now = datetime.now().isoformat()
        profile = registry["profiles"].get(name, {"created_at": now})
        profile.update({k: v for k, v in settings.items() if v is not None})
        profile["updated_at"] = now
        registry["profiles"][name] = profile

        self._save_registry(registry)
        logging.debug(f"Saved profile '{name}' in registry")
        return profile

    def get_profile(self, name: str) -> Optional[Dict]:
        """Get the settings of a profile, or None if it is not registered."""
        return self._load_registry()["profiles"].get(name)

    def list_profiles(self) -> List[Dict]:
        """List all profiles, most recently updated first."""
        profiles = [
            {"name": name, **settings}
            for name, settings in self._load_registry()["profiles"].items()
        ]
        return sorted(profiles, key=lambda x: x.get("updated_at", ""), reverse=True)

    def remove_profile(self, name: str) -> bool:
        """Remove a profile from the registry."""
        registry = self._load_registry()

        if name in registry["profiles"]:
            del registry["profiles"][name]
            self._save_registry(registry)
            logging.info(f"Removed profile '{name}' from registry")
            return True

        return False


def get_registry() -> ProfileRegistry:
    """Get the global profile registry instance."""
    global _registry
    if _registry is None:
        _registry = ProfileRegistry()
    return _registry
