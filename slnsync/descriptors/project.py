"""Project descriptor construction and rendering."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..extensions import ExtensionClassifier, extension_of
from ..identifiers import project_identifier
from ..logging import get_logger
from ..models import (
    CompilationUnit,
    ProjectDescriptor,
    ProjectReferenceEntry,
    ReferenceEntry,
    ResponseFileData,
)
from ..responses import (
    allow_unsafe,
    analyzer_paths,
    language_version,
    make_absolute,
    merge_other_arguments,
    ruleset_paths,
)

LEGACY_TARGET_FRAMEWORK = "net48"
STANDARD_TARGET_FRAMEWORK = "netstandard2.1"

_TARGET_FRAMEWORKS: Dict[str, str] = {
    "NET_2_0": LEGACY_TARGET_FRAMEWORK,
    "NET_2_0_Subset": LEGACY_TARGET_FRAMEWORK,
    "NET_Web": LEGACY_TARGET_FRAMEWORK,
    "NET_Micro": LEGACY_TARGET_FRAMEWORK,
    "NET_4_6": LEGACY_TARGET_FRAMEWORK,
    "NET_Unity_4_8": LEGACY_TARGET_FRAMEWORK,
    "NET_Standard": STANDARD_TARGET_FRAMEWORK,
    "NET_Standard_2_0": STANDARD_TARGET_FRAMEWORK,
}

SEED_DEFINES = ("DEBUG", "TRACE")

_WARNING_LEVEL = "4"
_NO_WARN = "USG0001"
_DEFAULT_ITEM_EXCLUDES = "$(DefaultItemExcludes);Library/;**/*.*"
_PACKAGE_INCLUDE_ASSETS = "runtime; build; native; contentfiles; analyzers"


class ConfigurationError(ValueError):
    """Raised when a unit carries settings that cannot be mapped to a project."""


def target_framework_for(compatibility_level: str) -> str:
    try:
        return _TARGET_FRAMEWORKS[compatibility_level]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported API compatibility level '{compatibility_level}'"
        ) from None


@dataclass
class AnalyzerPackage:
    """External analyzer package appended to eligible projects."""

    package_id: str = "Microsoft.Unity.Analyzers"
    version: str = "*"
    always_include: bool = False


class ProjectDescriptorBuilder:
    """Turns one compilation unit into a project descriptor.

    Referenced units resolve to project references when they have source files
    of their own and to binary references on their output otherwise.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        classifier: ExtensionClassifier,
        project_name: str,
        folders_dir: str = "CSharpProjFolders",
        project_extension: str = "csproj",
        primary_source_root: str = "Assets",
        build_defines: Sequence[str] = (),
        analyzer_package: AnalyzerPackage | None = None,
    ) -> None:
        self.project_root = project_root
        self.classifier = classifier
        self.project_name = project_name
        self.folders_dir = folders_dir
        self.project_extension = project_extension.lstrip(".")
        self.primary_source_root = primary_source_root
        self.build_defines = list(build_defines)
        self.analyzer_package = analyzer_package or AnalyzerPackage()
        self.logger = get_logger("descriptors.project")

    def project_path(self, unit_name: str) -> str:
        folder = os.path.join(str(self.project_root), self.folders_dir, unit_name)
        return os.path.join(folder, f"{unit_name}.{self.project_extension}")

    def relative_project_path(self, unit_name: str) -> str:
        return f"{self.folders_dir}/{unit_name}/{unit_name}.{self.project_extension}"

    def has_sources(self, unit: CompilationUnit) -> bool:
        return any(self.classifier.is_source(path) for path in unit.source_files)

    def build(
        self,
        unit: CompilationUnit,
        response_files: Sequence[ResponseFileData],
        owned_assets: Iterable[str] = (),
        *,
        graph: Mapping[str, CompilationUnit] | None = None,
    ) -> ProjectDescriptor:
        """Build the descriptor for ``unit``; raises ``ConfigurationError``."""
        graph = graph or {}
        target_framework = target_framework_for(unit.compiler_options.api_compatibility_level)
        other_arguments = merge_other_arguments(response_files)
        sources = [path for path in unit.source_files if self.classifier.is_source(path)]

        descriptor = ProjectDescriptor(
            name=unit.name,
            path=self.project_path(unit.name),
            target_framework=target_framework,
            compile_root=self._compile_root(sources),
            compile_extensions=sorted({extension_of(path) for path in sources}),
            asset_includes=sorted(set(owned_assets)),
            analyzers=analyzer_paths(unit, other_arguments, self.project_root),
            defines=self._defines(unit, response_files),
            language_version=language_version(unit, other_arguments),
            allow_unsafe=allow_unsafe(unit, response_files),
            rulesets=ruleset_paths(unit, other_arguments, self.project_root),
        )

        source_refs: List[CompilationUnit] = []
        binary_refs: List[str] = []
        for name in sorted(set(unit.references)):
            referenced = graph.get(name)
            if referenced is None:
                self.logger.warning("Unit %s references unknown unit %s", unit.name, name)
                continue
            if self.has_sources(referenced):
                source_refs.append(referenced)
            elif referenced.output_path:
                binary_refs.append(referenced.output_path)

        references = [
            *sorted(unit.precompiled_references),
            *(ref for data in response_files for ref in data.full_path_references),
            *binary_refs,
        ]
        descriptor.references = [
            ReferenceEntry(name=PurePath(path).stem, hint_path=path)
            for path in dict.fromkeys(make_absolute(ref, self.project_root) for ref in references)
        ]
        descriptor.project_references = [
            ProjectReferenceEntry(
                path=self.project_path(ref.name),
                identifier=project_identifier(self.project_name, ref.name),
                name=f"{ref.name}.{self.project_extension}",
            )
            for ref in source_refs
        ]

        if self.analyzer_package.always_include or self._under_primary_root(sources):
            descriptor.analyzer_package = {
                "id": self.analyzer_package.package_id,
                "version": self.analyzer_package.version,
            }
        return descriptor

    def _compile_root(self, sources: Sequence[str]) -> Optional[str]:
        if not sources:
            return None
        directories = {
            os.path.dirname(make_absolute(path, self.project_root)) for path in sources
        }
        return os.path.commonpath(sorted(directories)).replace("\\", "/")

    def _defines(
        self, unit: CompilationUnit, response_files: Sequence[ResponseFileData]
    ) -> List[str]:
        ordered = [
            *SEED_DEFINES,
            *unit.defines,
            *(define for data in response_files for define in data.defines),
            *self.build_defines,
        ]
        return list(dict.fromkeys(define for define in ordered if define))

    def _under_primary_root(self, sources: Sequence[str]) -> bool:
        prefix = self.primary_source_root.replace("\\", "/").strip("/").lower()
        if not prefix:
            return False
        root = str(self.project_root).replace("\\", "/").rstrip("/") + "/"
        for path in sources:
            normalised = path.replace("\\", "/")
            if normalised.startswith(root):
                normalised = normalised[len(root) :]
            if normalised.lower().startswith(f"{prefix}/"):
                return True
        return False


def render_project(descriptor: ProjectDescriptor) -> str:
    """Render ``descriptor`` as an SDK-style project document."""
    project = ET.Element("Project", {"Sdk": "Microsoft.NET.Sdk"})

    framework_group = ET.SubElement(project, "PropertyGroup")
    _text(framework_group, "TargetFramework", descriptor.target_framework)
    _text(framework_group, "DisableImplicitNamespaceImports", "true")
    _text(framework_group, "GenerateAssemblyInfo", "false")

    item_group = ET.SubElement(project, "PropertyGroup")
    _text(item_group, "DefaultItemExcludes", _DEFAULT_ITEM_EXCLUDES)
    _text(item_group, "EnableDefaultCompileItems", "false")

    define_group = ET.SubElement(project, "PropertyGroup")
    _text(define_group, "DefineConstants", ";".join(descriptor.defines))

    common = ET.SubElement(project, "PropertyGroup")
    _text(common, "LangVersion", descriptor.language_version)
    _text(common, "AllowUnsafeBlocks", str(descriptor.allow_unsafe))
    _text(common, "WarningLevel", _WARNING_LEVEL)
    _text(common, "NoWarn", _NO_WARN)
    _text(common, "NoStdLib", "true")
    _text(common, "AssemblyName", descriptor.name)
    for ruleset in descriptor.rulesets:
        _text(common, "CodeAnalysisRuleSet", ruleset)

    if descriptor.compile_includes:
        group = ET.SubElement(project, "ItemGroup")
        for include in descriptor.compile_includes:
            ET.SubElement(group, "Compile", {"Include": include})

    if descriptor.asset_includes:
        group = ET.SubElement(project, "ItemGroup")
        for include in descriptor.asset_includes:
            ET.SubElement(group, "None", {"Include": include})

    if descriptor.references:
        group = ET.SubElement(project, "ItemGroup")
        for reference in descriptor.references:
            element = ET.SubElement(group, "Reference", {"Include": reference.name})
            _text(element, "HintPath", reference.hint_path)

    if descriptor.project_references:
        group = ET.SubElement(project, "ItemGroup")
        for reference in descriptor.project_references:
            element = ET.SubElement(group, "ProjectReference", {"Include": reference.path})
            _text(element, "Project", f"{{{reference.identifier}}}")
            _text(element, "Name", reference.name)

    analyzers = ET.SubElement(project, "ItemGroup")
    for analyzer in descriptor.analyzers:
        ET.SubElement(analyzers, "Analyzer", {"Include": analyzer})

    if descriptor.analyzer_package:
        group = ET.SubElement(project, "ItemGroup")
        package = ET.SubElement(
            group,
            "PackageReference",
            {
                "Include": descriptor.analyzer_package["id"],
                "Version": descriptor.analyzer_package["version"],
            },
        )
        _text(package, "PrivateAssets", "all")
        _text(package, "IncludeAssets", _PACKAGE_INCLUDE_ASSETS)

    ET.indent(project, space="  ")
    return ET.tostring(project, encoding="unicode") + "\n"


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = value
    return element


__all__ = [
    "AnalyzerPackage",
    "ConfigurationError",
    "LEGACY_TARGET_FRAMEWORK",
    "ProjectDescriptorBuilder",
    "SEED_DEFINES",
    "STANDARD_TARGET_FRAMEWORK",
    "render_project",
    "target_framework_for",
]
