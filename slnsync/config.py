"""Configuration loading for slnsync (.slnsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".slnsync.yml"

PACKAGE_SOURCES = (
    "embedded",
    "local",
    "registry",
    "git",
    "builtin",
    "local_tarball",
    "unknown",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AnalyzerConfig:
    """Controls the external analyzer package reference."""

    include_package: bool = False
    package_id: str = "Microsoft.Unity.Analyzers"
    package_version: str = "*"


@dataclass
class PackageConfig:
    """Package sources whose files stay part of the generated projects."""

    include: List[str] = field(default_factory=lambda: ["embedded", "local"])


@dataclass
class VerifyConfig:
    """Post-sync build verification step."""

    enabled: bool = True
    command: List[str] = field(default_factory=lambda: ["dotnet", "build"])


@dataclass
class SyncConfig:
    """Represents the settings defined in .slnsync.yml."""

    root: Path
    project_name: Optional[str] = None
    folders_dir: str = "CSharpProjFolders"
    solution_extension: str = "sln"
    project_extension: str = "csproj"
    extensions: List[str] = field(default_factory=list)
    analyzers: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    primary_source_root: str = "Assets"
    build_defines: List[str] = field(default_factory=list)
    system_reference_dirs: List[str] = field(default_factory=list)
    packages: PackageConfig = field(default_factory=PackageConfig)
    verify: VerifyConfig = field(default_factory=VerifyConfig)

    @property
    def effective_project_name(self) -> str:
        return self.project_name or self.root.name or "Project"


def load_config(config_path: Path) -> SyncConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SyncConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SyncConfig(root=root)
    config.project_name = _as_str(data.get("project_name"))
    config.folders_dir = _as_str(data.get("folders_dir")) or config.folders_dir
    config.solution_extension = (
        _strip_dot(_as_str(data.get("solution_extension"))) or config.solution_extension
    )
    config.project_extension = (
        _strip_dot(_as_str(data.get("project_extension"))) or config.project_extension
    )
    config.extensions = [
        ext for ext in (_strip_dot(item) for item in _as_str_list(data.get("extensions"))) if ext
    ]
    config.primary_source_root = (
        _as_str(data.get("primary_source_root")) or config.primary_source_root
    )
    config.build_defines = _as_str_list(data.get("build_defines"))
    config.system_reference_dirs = _as_str_list(data.get("system_reference_dirs"))

    analyzer_data = _as_dict(data.get("analyzers"))
    if analyzer_data:
        include = _as_bool(analyzer_data.get("include_package"))
        config.analyzers = AnalyzerConfig(
            include_package=bool(include),
            package_id=_as_str(analyzer_data.get("package_id")) or AnalyzerConfig.package_id,
            package_version=(
                _as_str(analyzer_data.get("package_version")) or AnalyzerConfig.package_version
            ),
        )

    package_data = _as_dict(data.get("packages"))
    if package_data and "include" in package_data:
        sources = [source.lower() for source in _as_str_list(package_data.get("include"))]
        unknown = sorted(set(sources) - set(PACKAGE_SOURCES))
        if unknown:
            raise ConfigError(f"Unknown package sources in {CONFIG_FILENAME}: {', '.join(unknown)}")
        config.packages = PackageConfig(include=sources)

    verify_data = _as_dict(data.get("verify"))
    if verify_data:
        enabled = _as_bool(verify_data.get("enabled"))
        command = _as_str_list(verify_data.get("command"))
        config.verify = VerifyConfig(
            enabled=True if enabled is None else enabled,
            command=command or VerifyConfig().command,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _strip_dot(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().lstrip(".")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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
