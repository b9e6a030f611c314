import json
import os
from typing import Any, Dict, List


class Config:
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self):
        config_path = os.getenv("CONFIG_PATH") or os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "data", "config.json"
        )
        try:
            with open(config_path, "r") as f:
                self._config = json.load(f)
        except Exception as e:
            raise RuntimeError(f"Failed to load config.json: {str(e)}")

    def get(self, *keys: str) -> Any:
        """Get a nested config value using a sequence of keys."""
        value = self._config
        for key in keys:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
            if value is None:
                return None
        return value

    def get_addon_name(self, addon_id: str) -> str:
        name = self.get("addon_details", addon_id, "name")
        return name if name else addon_id

    def get_supported_services(self, addon_id: str) -> List[str]:
        services = self.get("addon_details", addon_id, "supported_services")
        return list(services) if services else []

    @property
    def addon_url(self) -> str:
        return self._config.get("addon_url")

    @property
    def peerflix_url(self) -> str:
        url = os.getenv("PEERFLIX_URL") or self._config.get("peerflix_url")
        return url if url.endswith("/") else f"{url}/"

    @property
    def default_peerflix_timeout(self) -> int:
        """Default indexer timeout in milliseconds."""
        return int(self._config.get("default_peerflix_timeout", 15000))


config = Config()
