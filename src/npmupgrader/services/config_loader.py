"""Configuration loader for npm-windows-upgrade."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from npmupgrader.errors import UpgraderError


class ConfigLoader:
    """Loads `.npmupgrader.yml` defaults for the CLI."""

    STRING_KEYS = {
        "version",
        "log_file",
        "npm_command",
        "powershell_command",
        "script_path",
        "install_path",
        "dns_host",
    }
    BOOLEAN_KEYS = {"verbose"}
    SUPPORTED_KEYS = STRING_KEYS | BOOLEAN_KEYS

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise UpgraderError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise UpgraderError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise UpgraderError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            raise UpgraderError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = {key: value for key, value in parsed.items() if value is not None}
        self._validate_types(values)
        return values

    def _validate_types(self, values: Dict[str, Any]):
        for key, value in values.items():
            if key in self.BOOLEAN_KEYS and not isinstance(value, bool):
                raise UpgraderError(f"Config key '{key}' must be true or false.")
            if key in self.STRING_KEYS and not isinstance(value, str):
                hint = " Quote it, e.g. version: '3.0.0'." if key == "version" else ""
                raise UpgraderError(f"Config key '{key}' must be a string.{hint}")
            if key in self.STRING_KEYS and not value.strip():
                raise UpgraderError(f"Config key '{key}' must not be empty.")
