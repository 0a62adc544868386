"""Site settings: an optional YAML file layered under command-line overrides."""

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from domainbuild.errors import BuildError
from domainbuild.models import BuildSettings


def _string_list(key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(item, str) and item.strip() for item in value
    ):
        raise BuildError(f"Setting '{key}' must be a list of non-empty strings.")
    return tuple(item.strip() for item in value)


def _coerce(key: str, default: Any, value: Any) -> Any:
    """Validate ``value`` against the kind of the field's default."""
    if isinstance(default, tuple):
        return _string_list(key, value)
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise BuildError(f"Setting '{key}' must be a non-negative integer.")
        return value
    if not isinstance(value, str) or not value.strip():
        raise BuildError(f"Setting '{key}' must be a non-empty string.")
    return value.strip()


class ConfigLoader:
    """Builds the run's BuildSettings from a YAML file and CLI values.

    Every BuildSettings field may be set in the file; anything else is
    rejected. Overrides that are None leave the file value (or the default)
    in place.
    """

    def load(self, config_path: Optional[str], **overrides: Any) -> BuildSettings:
        values = self._read(config_path)
        values.update({key: value for key, value in overrides.items() if value is not None})

        defaults = {field.name: field.default for field in fields(BuildSettings)}
        unknown = sorted(set(values) - set(defaults), key=str)
        if unknown:
            unknown_list = ", ".join(str(key) for key in unknown)
            raise BuildError(f"Unknown configuration keys: {unknown_list}")

        return BuildSettings(
            **{key: _coerce(key, defaults[key], value) for key, value in values.items()}
        )

    def _read(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BuildError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BuildError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BuildError(f"Config file '{config_path}' must contain a YAML mapping at the root.")
        return dict(parsed)
