"""Loads room and policy configuration from a directory."""

from pathlib import Path

from .policy import SchedulingPolicy
from .rooms import RoomConfig


class ConfigLoader:
    """Reads the optional rooms.csv and policy.json of a config directory."""

    def __init__(self, config_dir: Path | None = None):
        """
        Args:
            config_dir: Directory that may hold rooms.csv (id, name, type,
                capacity) and policy.json. Either file, or the directory
                itself, may be absent; the built-in defaults are used then.
        """
        self.config_dir = Path(config_dir) if config_dir is not None else None

        self.rooms = RoomConfig(self._get_path("rooms.csv"))

        policy_path = self._get_path("policy.json")
        self.policy = SchedulingPolicy.load(policy_path) if policy_path else SchedulingPolicy()

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        if self.config_dir is None:
            return None
        path = self.config_dir / filename
        return path if path.exists() else None
