"""Configuration loading for color-inspector (.color-inspector.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".color-inspector.yml"

DEFAULT_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".css",
    ".scss",
    ".sass",
    ".less",
    ".json",
    ".vue",
    ".svelte",
    ".html",
)

PRECEDENCE_CHOICES = ("first", "last")
REPORT_FORMATS = ("markdown", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ImportConfig:
    """How far and how the import graph is followed."""

    max_files: int = 160
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    aliases: Dict[str, str] = field(default_factory=lambda: {"@/": "", "~/": ""})
    exclude_paths: List[str] = field(default_factory=lambda: ["node_modules/"])


@dataclass
class ContextConfig:
    """Look-back windows for scope inference, in lines."""

    markup_window: int = 15
    component_window: int = 60
    stylesheet_window: int = 40
    sample_length: int = 220


@dataclass
class ThemeConfig:
    attributes: List[str] = field(default_factory=lambda: ["data-theme-mode"])


@dataclass
class VariableConfig:
    precedence: str = "first"


@dataclass
class AggregateConfig:
    per_file: bool = True


@dataclass
class ReportConfig:
    format: str = "markdown"
    auto_scan_minutes: int = 0
    max_usages: int = 50


@dataclass
class InspectorConfig:
    """Represents the settings defined in .color-inspector.yml."""

    root: Path
    imports: ImportConfig = field(default_factory=ImportConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    themes: ThemeConfig = field(default_factory=ThemeConfig)
    variables: VariableConfig = field(default_factory=VariableConfig)
    aggregate: AggregateConfig = field(default_factory=AggregateConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(config_path: Path) -> InspectorConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return InspectorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    imports = ImportConfig()
    import_data = _as_dict(data.get("imports"))
    if import_data:
        max_files = _as_int(import_data.get("max_files"))
        if max_files is not None:
            if max_files < 1:
                raise ConfigError("imports.max_files must be at least 1")
            imports.max_files = max_files
        if "extensions" in import_data:
            imports.extensions = [
                ext if ext.startswith(".") else f".{ext}"
                for ext in _as_str_list(import_data.get("extensions"))
            ]
        aliases = _as_dict(import_data.get("aliases"))
        if aliases:
            imports.aliases = {
                str(prefix): (_as_str(target) or "") for prefix, target in aliases.items()
            }
        if "exclude_paths" in import_data:
            imports.exclude_paths = _as_str_list(import_data.get("exclude_paths"))

    context = ContextConfig()
    context_data = _as_dict(data.get("context"))
    for name in ("markup_window", "component_window", "stylesheet_window", "sample_length"):
        value = _as_int(context_data.get(name))
        if value is not None:
            setattr(context, name, max(0, value))

    themes = ThemeConfig()
    theme_data = _as_dict(data.get("themes"))
    if "attributes" in theme_data:
        themes.attributes = _as_str_list(theme_data.get("attributes"))

    variables = VariableConfig()
    variable_data = _as_dict(data.get("variables"))
    precedence = _as_str(variable_data.get("precedence"))
    if precedence:
        precedence = precedence.lower()
        if precedence not in PRECEDENCE_CHOICES:
            raise ConfigError(
                f"variables.precedence must be one of {', '.join(PRECEDENCE_CHOICES)}"
            )
        variables.precedence = precedence

    aggregate = AggregateConfig()
    per_file = _as_bool(_as_dict(data.get("aggregate")).get("per_file"))
    if per_file is not None:
        aggregate.per_file = per_file

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    fmt = _as_str(report_data.get("format"))
    if fmt:
        fmt = fmt.lower()
        if fmt not in REPORT_FORMATS:
            raise ConfigError(f"report.format must be one of {', '.join(REPORT_FORMATS)}")
        report.format = fmt
    minutes = _as_int(report_data.get("auto_scan_minutes"))
    if minutes is not None:
        report.auto_scan_minutes = clamp_scan_minutes(minutes)
    max_usages = _as_int(report_data.get("max_usages"))
    if max_usages is not None:
        report.max_usages = max(1, max_usages)

    return InspectorConfig(
        root=root,
        imports=imports,
        context=context,
        themes=themes,
        variables=variables,
        aggregate=aggregate,
        report=report,
    )


def clamp_scan_minutes(minutes: int) -> int:
    """0 (or less) disables periodic scans; anything else is clamped to 1..10."""
    if minutes <= 0:
        return 0
    return max(1, min(10, minutes))


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AggregateConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ContextConfig",
    "DEFAULT_EXTENSIONS",
    "ImportConfig",
    "InspectorConfig",
    "PRECEDENCE_CHOICES",
    "REPORT_FORMATS",
    "ReportConfig",
    "ThemeConfig",
    "VariableConfig",
    "clamp_scan_minutes",
    "load_config",
]
