"""Sync engine keeping solution and project files in step with the unit graph."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .config import ConfigError, SyncConfig, load_config
from .descriptors import (
    AnalyzerPackage,
    ConfigurationError,
    ProjectDescriptorBuilder,
    SolutionDescriptorBuilder,
    render_project,
    render_solution,
)
from .extensions import ExtensionClassifier, should_sync_on_reimport
from .logging import get_logger
from .models import CompilationUnit
from .postproc import HookChain, HookKind, Transform
from .providers import BINARY_SUFFIX, GraphProvider
from .responses import ResponseFileResolver, make_absolute
from .stores import FileStore
from .verifier import BuildVerifier


class SyncEngine:
    """Coordinates full and incremental regeneration of solution artifacts.

    Callers must serialise sync calls against one project directory. Neither
    entry point raises: failures are logged and reported through the result.
    """

    def __init__(
        self,
        project_root: Path | str,
        provider: GraphProvider,
        *,
        config: SyncConfig | None = None,
        hooks: HookChain | None = None,
        store: FileStore | None = None,
        verifier: BuildVerifier | None = None,
    ) -> None:
        self.project_root = Path(project_root).expanduser().resolve()
        self.provider = provider
        self.hooks = hooks or HookChain()
        self.store = store or FileStore()
        self.logger = get_logger("engine")
        self._verifier_override = verifier
        self.last_error: Optional[str] = None
        self.last_written = 0
        self.config = config or self._load_config(self.project_root)
        self.classifier = ExtensionClassifier(
            self.config.extensions, is_excluded=provider.is_excluded_path
        )
        self._configure()

    # ------------------------------------------------------------------
    # Entry points

    def sync(self) -> bool:
        """Regenerate the solution and every project, then verify the build."""
        self._reset_result()
        try:
            self.classifier.reload(self.config.extensions)
            units = self._snapshot()
            assets = self._asset_index()
            self.logger.info("Full sync of %d units in %s", len(units), self.project_root)

            written = self._sync_solution(units)
            graph = {unit.name: unit for unit in units}
            for unit in self._relevant(units):
                written += self._sync_project(unit, assets, graph)
            self.last_written = written
            self.logger.debug("Full sync wrote %d artifact(s)", written)

            self._verify_build()
            self.hooks.notify_generated()
            return True
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            self.logger.exception("Full sync failed for %s", self.project_root)
            return False

    def sync_if_needed(
        self, affected: Iterable[str], reimported: Iterable[str]
    ) -> bool:
        """Rewrite the solution and implicated projects; True when anything was written.

        A False result is either a skip or a failure; ``last_error`` tells them apart.
        """
        self._reset_result()
        try:
            affected_paths = list(affected)
            reimported_paths = list(reimported)
            self.classifier.reload(self.config.extensions)

            if not self._has_relevant_changes(affected_paths, reimported_paths):
                self.logger.debug("No relevant file changes; skipping sync")
                return False

            units = self._snapshot()
            written = self._sync_solution(units)
            assets = self._asset_index()
            implicated = self._implicated_units([*affected_paths, *reimported_paths])
            self.logger.debug("Changes implicate units: %s", ", ".join(sorted(implicated)))

            graph = {unit.name: unit for unit in units}
            for unit in self._relevant(units):
                if unit.name not in implicated:
                    continue
                written += self._sync_project(unit, assets, graph)
            self.last_written = written
            return written > 0
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            self.logger.exception("Incremental sync failed for %s", self.project_root)
            return False

    def create_if_missing(self) -> bool:
        """Run a full sync only when no solution file exists yet."""
        if self.solution_exists():
            return False
        return self.sync()

    # ------------------------------------------------------------------
    # Public helpers

    def register_post_process_hook(self, kind: HookKind | str, transform: Transform) -> None:
        self.hooks.register(kind, transform)

    def reload_config(self) -> None:
        self.config = self._load_config(self.project_root)
        self.classifier.reload(self.config.extensions)
        self._configure()

    def solution_path(self) -> Path:
        name = self.config.effective_project_name
        return self.project_root / f"{name}.{self.config.solution_extension}"

    def project_path(self, unit_name: str) -> Path:
        path = Path(self.project_builder.project_path(unit_name))
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def solution_exists(self) -> bool:
        return self.store.exists(self.solution_path())

    # ------------------------------------------------------------------
    # Internals

    def _reset_result(self) -> None:
        self.last_error = None
        self.last_written = 0

    def _configure(self) -> None:
        config = self.config
        self.provider.set_included_sources(config.packages.include)
        project_name = config.effective_project_name
        self.project_builder = ProjectDescriptorBuilder(
            self.project_root,
            classifier=self.classifier,
            project_name=project_name,
            folders_dir=config.folders_dir,
            project_extension=config.project_extension,
            primary_source_root=config.primary_source_root,
            build_defines=config.build_defines,
            analyzer_package=AnalyzerPackage(
                package_id=config.analyzers.package_id,
                version=config.analyzers.package_version,
                always_include=config.analyzers.include_package,
            ),
        )
        self.solution_builder = SolutionDescriptorBuilder(
            project_name,
            has_sources=self.project_builder.has_sources,
            relative_project_path=self.project_builder.relative_project_path,
        )
        self.resolver = ResponseFileResolver(
            self.provider, self.project_root, config.system_reference_dirs
        )
        if self._verifier_override is not None:
            self.verifier: Optional[BuildVerifier] = self._verifier_override
        elif config.verify.enabled:
            self.verifier = BuildVerifier(config.verify.command)
        else:
            self.verifier = None

    def _load_config(self, project_root: Path) -> SyncConfig:
        try:
            return load_config(project_root)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return SyncConfig(root=project_root)

    def _snapshot(self) -> List[CompilationUnit]:
        units: Dict[str, CompilationUnit] = {}
        for unit in self.provider.list_units(self.classifier.is_eligible):
            if unit.name in units:
                self.logger.warning("Duplicate unit name %s; keeping the first", unit.name)
                continue
            units[unit.name] = unit
        return [units[name] for name in sorted(units)]

    def _relevant(self, units: Sequence[CompilationUnit]) -> List[CompilationUnit]:
        return [unit for unit in units if self.project_builder.has_sources(unit)]

    def _has_relevant_changes(self, affected: Sequence[str], reimported: Sequence[str]) -> bool:
        return any(self.classifier.is_eligible(path) for path in affected) or any(
            should_sync_on_reimport(path) for path in reimported
        )

    def _implicated_units(self, paths: Iterable[str]) -> Set[str]:
        names: Set[str] = set()
        for path in paths:
            name = self.provider.unit_name_for_path(path)
            if name and name.strip():
                names.add(_strip_output_suffix(name.strip()))
        return names

    def _asset_index(self) -> Dict[str, List[str]]:
        """Map unit names to the non-source assets they own."""
        index: Dict[str, List[str]] = {}
        for asset in self.provider.list_all_asset_paths():
            if self.provider.is_excluded_path(asset):
                continue
            if not self.classifier.is_asset(asset):
                continue
            owner = self.provider.unit_name_for_path(asset)
            if not owner:
                continue
            index.setdefault(_strip_output_suffix(owner), []).append(
                make_absolute(asset, self.project_root)
            )
        return index

    def _sync_solution(self, units: Sequence[CompilationUnit]) -> int:
        descriptor = self.solution_builder.build(units)
        return self._write(HookKind.SOLUTION, self.solution_path(), render_solution(descriptor))

    def _sync_project(
        self,
        unit: CompilationUnit,
        assets: Mapping[str, Sequence[str]],
        graph: Mapping[str, CompilationUnit],
    ) -> int:
        response_files, _ = self.resolver.resolve(unit)
        try:
            descriptor = self.project_builder.build(
                unit, response_files, assets.get(unit.name, ()), graph=graph
            )
        except ConfigurationError as exc:
            self.logger.error("Skipping project for %s: %s", unit.name, exc)
            return 0
        return self._write(HookKind.PROJECT, Path(descriptor.path), render_project(descriptor))

    def _write(self, kind: HookKind, path: Path, content: str) -> int:
        content = self.hooks.apply(kind, str(path), content)
        return 1 if self.store.write_if_changed(path, content) else 0

    def _verify_build(self) -> None:
        if self.verifier is None:
            return
        self.verifier.verify(self.project_root)


def _strip_output_suffix(name: str) -> str:
    if name.lower().endswith(BINARY_SUFFIX):
        return name[: -len(BINARY_SUFFIX)]
    return name


__all__ = ["SyncEngine"]
