"""Configuration loader for retagpush."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from retagpush.errors import TransferError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    STRING_KEYS = {"version", "repository_prefix", "source_prefix", "runtime", "log_file", "report_file"}
    BOOL_KEYS = {"tls_verify", "cleanup", "cleanup_source", "abort_on_retag_failure", "dry_run", "verbose"}
    SUPPORTED_KEYS = STRING_KEYS | BOOL_KEYS | {"services", "max_attempts", "retry_delay_seconds"}

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise TransferError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise TransferError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise TransferError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise TransferError(f"Unknown configuration keys: {unknown_list}")

        services = parsed.get("services")
        if services is not None and (
            not isinstance(services, list) or not all(isinstance(item, str) for item in services)
        ):
            raise TransferError("Config key 'services' must be a list of service names.")

        self._check_types(parsed)

        return parsed

    def _check_types(self, values: Dict[str, Any]):
        for key, value in values.items():
            if key == "report_file" and value is None:
                continue
            if key in self.STRING_KEYS and not isinstance(value, str):
                raise TransferError(
                    f"Config key '{key}' must be a string; quote values such as '3.10'."
                )
            if key in self.BOOL_KEYS and not isinstance(value, bool):
                raise TransferError(f"Config key '{key}' must be true or false.")
            if key == "max_attempts" and (isinstance(value, bool) or not isinstance(value, int)):
                raise TransferError("Config key 'max_attempts' must be an integer.")
            if key == "retry_delay_seconds" and (
                isinstance(value, bool) or not isinstance(value, (int, float))
            ):
                raise TransferError("Config key 'retry_delay_seconds' must be a number.")
