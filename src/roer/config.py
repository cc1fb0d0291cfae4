"""User configuration in ~/.roer/config.toml.

The ``[spinnaker]`` table supplies defaults for settings that were not given
as a command-line flag or environment variable::

    [spinnaker]
    api = "https://gate.example.com"
    cert_path = "/etc/roer/client.crt"
    key_path = "/etc/roer/client.key"
    client_timeout = 10
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import toml  # type: ignore[import-untyped]

from roer.spinnaker.config import DEFAULT_CLIENT_TIMEOUT, ClientConfig
from roer.spinnaker.errors import ClientConfigError

SECTION = "spinnaker"
SETTINGS: dict[str, type] = {
    "api": str,
    "cert_path": Path,
    "key_path": Path,
    "api_session": str,
    "iap_token": str,
    "client_timeout": float,
    "insecure": bool,
}
_TRUTHY_VALUES = {"1", "true", "yes", "on"}


class RoerConfig:
    """Manage the user configuration file."""

    def __init__(self, config_file: Optional[Path] = None) -> None:
        self.config_dir = Path.home() / ".roer"
        self.config_file = config_file or self.config_dir / "config.toml"

    def load(self) -> dict[str, Any]:
        """Return the ``[spinnaker]`` table, empty when the file is missing."""
        if not self.config_file.exists():
            return {}
        try:
            config: dict[str, Any] = toml.load(self.config_file)
        except (toml.TomlDecodeError, OSError) as exc:
            raise ClientConfigError(f"reading {self.config_file}: {exc}") from exc
        section = config.get(SECTION)
        return dict(section) if isinstance(section, dict) else {}

    def get(self, key: str) -> Any:
        return self.load().get(key)

    def set(self, key: str, value: str) -> Any:
        """Store *value* under *key*, converted to the setting's type."""
        if key not in SETTINGS:
            raise ClientConfigError(f"Unknown setting '{key}'. Expected one of: {', '.join(SETTINGS)}")
        converted = _convert(key, value)

        config: dict[str, Any] = {}
        if self.config_file.exists():
            config = toml.load(self.config_file)
        section = config.get(SECTION)
        if not isinstance(section, dict):
            section = {}
            config[SECTION] = section
        section[key] = str(converted) if isinstance(converted, Path) else converted

        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as handle:
            toml.dump(config, handle)
        return converted


def _convert(key: str, value: Any) -> Any:
    kind = SETTINGS[key]
    if kind is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY_VALUES
    if kind is float:
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ClientConfigError(f"Setting '{key}' must be a number, got '{value}'") from exc
    if kind is Path:
        return Path(str(value)).expanduser()
    return str(value)


def resolve_client_config(
    overrides: Mapping[str, Any],
    user_config: Optional[RoerConfig] = None,
) -> ClientConfig:
    """Merge flag/env *overrides* over the user config file and validate.

    ``None`` in *overrides* means "not given"; the file value, then the
    built-in default, is used instead.
    """
    file_values = (user_config or RoerConfig()).load()

    def pick(key: str) -> Any:
        value = overrides.get(key)
        if value is None and file_values.get(key) is not None:
            value = _convert(key, file_values[key])
        return value

    client_timeout = pick("client_timeout")
    config = ClientConfig(
        endpoint=pick("api") or "",
        cert_path=pick("cert_path"),
        key_path=pick("key_path"),
        session=pick("api_session"),
        bearer_token=pick("iap_token"),
        fiat_user=overrides.get("fiat_user"),
        fiat_pass=overrides.get("fiat_pass"),
        client_timeout=client_timeout if client_timeout is not None else DEFAULT_CLIENT_TIMEOUT,
        insecure=bool(pick("insecure")),
    )
    return config.validate()


__all__ = ["RoerConfig", "SETTINGS", "resolve_client_config"]
