"""Load and validate the declarations file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from dotkit.config.types import (
    ChmodEntry,
    Config,
    ExtensionEntry,
    GitSettingEntry,
    PackageEntry,
    SymlinkEntry,
    SystemdUnitEntry,
)
from dotkit.errors import (
    CONFIG_REASON_MISSING,
    CONFIG_REASON_PARSE_ERROR,
    ConfigurationError,
)

SECTIONS: tuple[str, ...] = ("symlinks", "chmod", "packages", "vscode_extensions", "systemd_units", "git_config")
SUPPORTED_MANAGERS: tuple[str, ...] = ("pacman",)


def config_path_for_root(root: Path) -> Path:
    """Return canonical declarations file path for a dotfiles root."""
    return root.resolve() / "conf" / "dotkit.yaml"


def load_config(root: Path) -> Config:
    """Load, normalize, and validate the declarations under ``root``."""
    path = config_path_for_root(root)
    if not path.exists():
        raise ConfigurationError(f"Missing declarations file at {path}", CONFIG_REASON_MISSING)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"dotkit.yaml parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            "dotkit.yaml parse error: expected mapping at top level",
            CONFIG_REASON_PARSE_ERROR,
        )

    unknown = sorted(set(raw) - set(SECTIONS))
    if unknown:
        raise ConfigurationError(f"dotkit.yaml has unknown sections: {', '.join(unknown)}")

    return Config(
        root=root.resolve(),
        symlinks=tuple(_symlink_entry(item) for item in _section(raw, "symlinks")),
        chmod=tuple(_chmod_entry(item) for item in _section(raw, "chmod")),
        packages=tuple(_package_entry(item) for item in _section(raw, "packages")),
        vscode_extensions=tuple(_extension_entry(item) for item in _section(raw, "vscode_extensions")),
        systemd_units=tuple(_systemd_unit_entry(item) for item in _section(raw, "systemd_units")),
        git_config=_git_settings(raw.get("git_config")),
        path=path,
    )


def validate(config: Config, home: Path) -> list[str]:
    """Return non-fatal warnings about the loaded declarations."""
    warnings: list[str] = []
    seen: dict[Path, str] = {}
    for entry in config.symlinks:
        target = entry.target_path(home)
        if target in seen:
            warnings.append(f"symlinks: {entry.source} and {seen[target]} both target {target}")
        else:
            seen[target] = entry.source
        if not entry.source_path(config.root).exists():
            warnings.append(f"symlinks: source {entry.source} does not exist")

    names = [entry.name for entry in config.packages]
    for name in sorted({name for name in names if names.count(name) > 1}):
        warnings.append(f"packages: {name} is declared more than once")

    ids = [entry.id for entry in config.vscode_extensions]
    for ext in sorted({ext for ext in ids if ids.count(ext) > 1}):
        warnings.append(f"vscode_extensions: {ext} is declared more than once")

    units = [entry.name for entry in config.systemd_units]
    for unit in sorted({unit for unit in units if units.count(unit) > 1}):
        warnings.append(f"systemd_units: {unit} is declared more than once")
    return warnings


def _section(raw: dict[str, Any], name: str) -> list[Any]:
    value = raw.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"{name} must be a list")
    return value


def _symlink_entry(item: Any) -> SymlinkEntry:
    if isinstance(item, str):
        return SymlinkEntry(source=_clean(item, "symlinks"))
    if isinstance(item, dict):
        source = _clean(item.get("source"), "symlinks.source")
        target = item.get("target")
        if target is not None:
            target = _clean(target, f"symlinks.{source}.target")
        return SymlinkEntry(source=source, target=target)
    raise ConfigurationError("symlinks entries must be strings or mappings")


def _chmod_entry(item: Any) -> ChmodEntry:
    if not isinstance(item, dict):
        raise ConfigurationError("chmod entries must be mappings with `path` and `mode`")
    path = _clean(item.get("path"), "chmod.path")
    return ChmodEntry(path=path, mode=parse_mode(item.get("mode"), f"chmod.{path}.mode"))


def _package_entry(item: Any) -> PackageEntry:
    if isinstance(item, str):
        return PackageEntry(name=_clean(item, "packages"))
    if isinstance(item, dict):
        name = _clean(item.get("name"), "packages.name")
        manager = str(item.get("manager", "pacman")).strip().lower()
        if manager not in SUPPORTED_MANAGERS:
            raise ConfigurationError(
                f"packages.{name}.manager must be one of {SUPPORTED_MANAGERS}, got `{manager}`"
            )
        return PackageEntry(name=name, manager=manager)
    raise ConfigurationError("packages entries must be strings or mappings")


def _extension_entry(item: Any) -> ExtensionEntry:
    if isinstance(item, dict):
        item = item.get("id")
    return ExtensionEntry(id=_clean(item, "vscode_extensions").lower())


def _systemd_unit_entry(item: Any) -> SystemdUnitEntry:
    if isinstance(item, dict):
        item = item.get("name")
    return SystemdUnitEntry(name=_clean(item, "systemd_units"))


def _git_settings(value: Any) -> tuple[GitSettingEntry, ...]:
    """Accept ``{key: value}``; YAML booleans and numbers become git's spelling."""
    if value is None:
        return ()
    if not isinstance(value, dict):
        raise ConfigurationError("git_config must be a mapping of key to value")
    entries: list[GitSettingEntry] = []
    for raw_key, raw in value.items():
        key = _clean(raw_key, "git_config")
        if isinstance(raw, bool):
            text = "true" if raw else "false"
        elif isinstance(raw, (int, float, str)):
            text = str(raw)
        else:
            raise ConfigurationError(f"git_config.{key} must be a scalar value")
        entries.append(GitSettingEntry(key=key, value=text))
    return tuple(entries)


def parse_mode(value: Any, field_name: str) -> int:
    """Parse an octal permission string such as ``"600"`` or ``"0o755"``."""
    if isinstance(value, int) and not isinstance(value, bool):
        # Unquoted 600 and 0600 load as different ints.
        raise ConfigurationError(f"{field_name} must be a quoted octal string, e.g. \"600\"")
    if isinstance(value, str):
        text = value.strip().lower().removeprefix("0o")
        try:
            mode = int(text, 8)
        except ValueError as exc:
            raise ConfigurationError(f"{field_name} must be an octal mode, got `{value}`") from exc
    else:
        raise ConfigurationError(f"{field_name} must be an octal mode string")
    if not 0 <= mode <= 0o7777:
        raise ConfigurationError(f"{field_name} out of range: {oct(mode)}")
    return mode


def _clean(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{field_name} must be a non-empty string")
    return value.strip()
