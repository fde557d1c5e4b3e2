"""Generator settings.

Resolution order for every setting: explicit value (CLI flag) >
confgen.yaml > environment > default.

Relative directories in a settings file are taken relative to the
file's own directory; explicit and environment values are relative to
the current directory.

Environment variables:
    CONFGEN_MAIN_DIR — directory holding the templates (default: .)
    CONFGEN_CONTRIB_DIR — directory of extension sources (default: .)
    CONFGEN_OUTPUT_DIR — where generated files go (default: contrib dir)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from confgen.errors import ConfigurationError
from confgen.generate import CONFIG_NAME, DEFAULT_SUFFIX, MANIFEST_NAME

DEFAULT_SETTINGS_FILE = "confgen.yaml"

_ENV = {
    "main_dir": "CONFGEN_MAIN_DIR",
    "contrib_dir": "CONFGEN_CONTRIB_DIR",
    "output_dir": "CONFGEN_OUTPUT_DIR",
}
_KEYS = {"main_dir", "contrib_dir", "output_dir", "mode", "manifest", "config_source", "suffix"}
MODES = ("active", "passive")


@dataclass(frozen=True)
class Settings:
    main_dir: Path
    contrib_dir: Path
    output_dir: Path
    active: bool = False
    manifest: str = MANIFEST_NAME
    config_source: str = CONFIG_NAME
    suffix: str = DEFAULT_SUFFIX


def load_settings_file(path: Path | str) -> dict:
    """Load a confgen.yaml file.

    Raises:
        ConfigurationError: If the file is unreadable, not a mapping,
            or holds unknown keys.
    """
    settings_path = Path(path)
    try:
        with open(settings_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file {settings_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed settings file {settings_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {settings_path} is not a YAML mapping")

    unknown = sorted(set(data) - _KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown settings in {settings_path}: {', '.join(unknown)}"
        )
    return data


def parse_mode(mode: str) -> bool:
    """Translate "active"/"passive" into the active flag."""
    key = str(mode).lower()
    if key not in MODES:
        raise ConfigurationError(f"Invalid mode '{mode}'. Expected one of: {', '.join(MODES)}")
    return key == "active"


def resolve_settings(
    config_path: Path | str | None = None,
    main_dir: str | None = None,
    contrib_dir: str | None = None,
    output_dir: str | None = None,
    mode: str | None = None,
) -> Settings:
    """Merge explicit values, the settings file, and the environment."""
    if not config_path and Path(DEFAULT_SETTINGS_FILE).is_file():
        config_path = DEFAULT_SETTINGS_FILE
    file_values = load_settings_file(config_path) if config_path else {}
    base = Path(config_path).parent if config_path else Path(".")

    def pick(key: str, explicit: str | None) -> Path | None:
        if explicit:
            return Path(explicit).expanduser()
        if file_values.get(key):
            return base / Path(str(file_values[key])).expanduser()
        env_var = _ENV.get(key)
        env = os.environ.get(env_var) if env_var else None
        return Path(env).expanduser() if env else None

    main = pick("main_dir", main_dir) or Path(".")
    contrib = pick("contrib_dir", contrib_dir) or Path(".")
    out = pick("output_dir", output_dir) or contrib

    return Settings(
        main_dir=main,
        contrib_dir=contrib,
        output_dir=out,
        active=parse_mode(mode or file_values.get("mode") or "passive"),
        manifest=file_values.get("manifest") or MANIFEST_NAME,
        config_source=file_values.get("config_source") or CONFIG_NAME,
        suffix=file_values.get("suffix") or DEFAULT_SUFFIX,
    )
