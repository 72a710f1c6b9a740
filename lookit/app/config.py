import os
import yaml
from typing import Any

from dotenv import load_dotenv

load_dotenv()

CONFIG_PATH = os.environ.get("LOOKIT_CONFIG", "configs/lookit.yaml")


class Settings:
    def __init__(self, path: str | None = None) -> None:
        self._cfg: dict[str, Any] = {}
        path = path or CONFIG_PATH
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._cfg = yaml.safe_load(f) or {}

    def get(self, key: str, default: Any = None) -> Any:
        # Env wins over YAML
        env_key = key.upper().replace(".", "_")
        if env_key in os.environ:
            return os.environ[env_key]

        # Dot path lookup in YAML
        parts = key.split(".")
        cur: Any = self._cfg
        for p in parts:
            if isinstance(cur, dict) and p in cur:
                cur = cur[p]
            else:
                return default
        return cur

    def get_int(self, key: str, default: int) -> int:
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: float | None = None) -> float | None:
        value = self.get(key, default)
        if value in (None, ""):
            return default
        return float(value)


settings = Settings()
