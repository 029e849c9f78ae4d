"""Configuration management for Hinged.

Settings are loaded once and passed explicitly to whatever needs them;
there is no module-level settings instance.
"""

from __future__ import annotations

import configparser
import os
import re
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from hinged.enums import CatalogSystem, CenteringGrade, CollectionStatus, GumCondition
from hinged.errors import ConfigError

BUILTIN_CATALOG_PREFIX = "builtin:"
CUSTOM_CATALOG_PREFIX = "custom:"


class DefaultsConfig(BaseModel):
    """Defaults applied to new collections and stamps."""

    # "builtin:<raw value>" or "custom:<catalog name>"
    catalog_system: str = "builtin:scott"
    collection_status: CollectionStatus = CollectionStatus.WANTED
    gum_condition: GumCondition | None = None
    centering_grade: CenteringGrade | None = None
    currency_symbol: str = "$"

    @property
    def is_using_builtin_catalog(self) -> bool:
        return self.catalog_system.startswith(BUILTIN_CATALOG_PREFIX)

    @property
    def builtin_catalog_system(self) -> CatalogSystem | None:
        """The selected built-in catalog, or None if a custom one is selected."""
        if not self.is_using_builtin_catalog:
            return None
        raw = self.catalog_system[len(BUILTIN_CATALOG_PREFIX) :]
        try:
            return CatalogSystem(raw)
        except ValueError:
            return None

    @property
    def custom_catalog_name(self) -> str | None:
        """The selected custom catalog name, or None if a built-in one is selected."""
        if not self.catalog_system.startswith(CUSTOM_CATALOG_PREFIX):
            return None
        return self.catalog_system[len(CUSTOM_CATALOG_PREFIX) :]

    @property
    def effective_catalog_system(self) -> CatalogSystem:
        """Built-in catalog to use, falling back to Scott for custom catalogs."""
        return self.builtin_catalog_system or CatalogSystem.SCOTT

    def set_default_catalog(self, system: CatalogSystem | None = None, custom_name: str | None = None) -> None:
        """Select a built-in catalog or a custom catalog by name."""
        if system is not None:
            self.catalog_system = f"{BUILTIN_CATALOG_PREFIX}{system.value}"
        elif custom_name:
            self.catalog_system = f"{CUSTOM_CATALOG_PREFIX}{custom_name}"


class GapsConfig(BaseModel):
    """Gap analysis configuration."""

    max_span: int = 1000  # Skip gap enumeration when max - min reaches this
    display_limit: int = 50  # Missing numbers shown before "+N more"


class OptionsConfig(BaseModel):
    """General options configuration."""

    recent_days: int = 30  # Window for the Recent Additions smart collection


class PathsConfig(BaseModel):
    """File locations."""

    library: str | None = None  # Library JSON file; default is next to the config


class Settings(BaseModel):
    """Application settings."""

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    gaps: GapsConfig = Field(default_factory=GapsConfig)
    options: OptionsConfig = Field(default_factory=OptionsConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    # Where these settings were loaded from, None for defaults
    source_path: Path | None = Field(default=None, exclude=True)

    def library_path(self) -> Path:
        """Resolve the library file location."""
        from hinged.store import LIBRARY_FILENAME

        if self.paths.library:
            return Path(self.paths.library).expanduser()
        if self.source_path is not None:
            return self.source_path.parent / LIBRARY_FILENAME
        return get_exe_directory() / LIBRARY_FILENAME

    def stamp_defaults(self) -> dict[str, Any]:
        """Field defaults for a newly entered stamp."""
        defaults: dict[str, Any] = {"collection_status": self.defaults.collection_status}
        if self.defaults.gum_condition is not None:
            defaults["gum_condition"] = self.defaults.gum_condition
        if self.defaults.centering_grade is not None:
            defaults["centering_grade"] = self.defaults.centering_grade
        return defaults


def get_exe_directory() -> Path:
    """Get the directory containing the executable (or the cwd for scripts)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    return Path.cwd()


def get_config_dir() -> Path:
    """Get the user config directory (not created)."""
    return Path.home() / ".hinged"


def get_config_paths() -> list[Path]:
    """Get list of config file paths to search, in priority order.

    Search order:
    1. Exe directory
    2. Current working directory
    3. User home directory (~/.hinged/)
    4. Legacy YAML files in the cwd and home directory

    Returns:
        List of paths to check for config files.
    """
    paths = []

    exe_dir = get_exe_directory()
    home_dir = get_config_dir()
    cwd = Path.cwd()

    paths.append(exe_dir / "hinged.ini")
    if cwd != exe_dir:
        paths.append(cwd / "hinged.ini")
    paths.append(home_dir / "hinged.ini")

    paths.append(cwd / "hinged.yaml")
    paths.append(cwd / "hinged.yml")
    paths.append(home_dir / "config.yaml")
    paths.append(home_dir / "config.yml")

    return paths


def find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in get_config_paths():
        if path.exists():
            return path
    return None


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and $VAR in config values.

    Unset variables expand to an empty string.
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, "")

        return pattern.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _load_ini_config(path: Path) -> dict[str, Any]:
    """Load configuration from an INI file.

    Empty values are dropped so the model defaults apply.

    Returns:
        Dictionary structure matching the Settings schema.
    """
    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")

    config: dict[str, Any] = {}

    if parser.has_section("defaults"):
        defaults = {
            key: parser.get("defaults", key).strip()
            for key in (
                "catalog_system",
                "collection_status",
                "gum_condition",
                "centering_grade",
                "currency_symbol",
            )
            if parser.has_option("defaults", key)
        }
        defaults = {k: v for k, v in defaults.items() if v}
        if defaults:
            config["defaults"] = defaults

    if parser.has_section("gaps"):
        gaps: dict[str, int] = {}
        for key in ("max_span", "display_limit"):
            if parser.has_option("gaps", key):
                try:
                    gaps[key] = int(parser.get("gaps", key))
                except ValueError:
                    pass  # Keep default
        if gaps:
            config["gaps"] = gaps

    if parser.has_section("options") and parser.has_option("options", "recent_days"):
        try:
            config["options"] = {"recent_days": int(parser.get("options", "recent_days"))}
        except ValueError:
            pass  # Keep default

    if parser.has_section("paths") and parser.has_option("paths", "library"):
        value = parser.get("paths", "library").strip()
        if value:
            config["paths"] = {"library": value}

    return config


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path | None = None) -> Settings:
    """Load settings from file.

    Supports INI (.ini/.cfg) and YAML (.yaml/.yml). Environment variables
    are expanded in all values.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded settings, or defaults when no config file exists.

    Raises:
        ConfigError: If the file can't be parsed or holds invalid values.
    """
    if path is None:
        path = find_config_file()

    if path is None or not path.exists():
        return Settings()

    try:
        if path.suffix in (".ini", ".cfg"):
            raw_config = _load_ini_config(path)
        else:
            raw_config = _load_yaml_config(path)
        settings = Settings.model_validate(_expand_env_vars(raw_config))
    except (configparser.Error, yaml.YAMLError) as e:
        raise ConfigError(path, (str(e).splitlines() or [type(e).__name__])[0]) from e
    except ValidationError as e:
        raise ConfigError(path, f"invalid settings ({e.error_count()} errors)") from e
    settings.source_path = path
    return settings


def save_default_config(path: Path | None = None) -> Path:
    """Save a default INI config file.

    Args:
        path: Where to save. Defaults to ./hinged.ini.

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / "hinged.ini"

    default_config = """\
# Hinged Configuration
# You can use environment variables with ${VAR} syntax

[defaults]
# Catalog for new collections: builtin:<scott|stanleyGibbons|michel|yvertTellier|sakura|facit|other>
# or custom:<catalog name>
catalog_system = builtin:scott
# Status for new stamps: owned, wanted or notCollecting
collection_status = wanted
# Optional gum condition / centering grade for new stamps
gum_condition =
centering_grade =
currency_symbol = $

[gaps]
# Only list missing numbers when highest - lowest is below this
max_span = 1000
# Missing numbers shown in reports before "...and N more"
display_limit = 50

[options]
# Days covered by the Recent Additions smart collection
recent_days = 30

[paths]
# Library file (default: hinged.library.json next to this file)
# library = ~/Stamps/hinged.library.json
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path
