"""Solution descriptor construction and rendering."""

from __future__ import annotations

from typing import Callable, Iterable

from ..identifiers import project_identifier, solution_type_identifier
from ..models import CompilationUnit, SolutionDescriptor, SolutionEntry

WINDOWS_NEWLINE = "\r\n"

FORMAT_VERSION = "11.00"
GENERATOR_VERSION = "2022"

_SOLUTION_TEMPLATE = WINDOWS_NEWLINE.join(
    [
        "",
        "Microsoft Visual Studio Solution File, Format Version {format_version}",
        "# Visual Studio {generator_version}",
        "{entries}",
        "Global",
        "    GlobalSection(SolutionConfigurationPlatforms) = preSolution",
        "        {configuration} = {configuration}",
        "    EndGlobalSection",
        "    GlobalSection(ProjectConfigurationPlatforms) = postSolution",
        "{configurations}",
        "    EndGlobalSection",
        "    GlobalSection(SolutionProperties) = preSolution",
        "        HideSolutionNode = FALSE",
        "    EndGlobalSection",
        "EndGlobal",
        "",
    ]
).replace("    ", "\t")

_ENTRY_TEMPLATE = WINDOWS_NEWLINE.join(
    [
        'Project("{{{type_id}}}") = "{name}", "{path}", "{{{project_id}}}"',
        "EndProject",
    ]
)

_CONFIGURATION_TEMPLATE = WINDOWS_NEWLINE.join(
    [
        "        {{{project_id}}}.{configuration}.ActiveCfg = {configuration}",
        "        {{{project_id}}}.{configuration}.Build.0 = {configuration}",
    ]
).replace("    ", "\t")


class SolutionDescriptorBuilder:
    """Lists every unit that owns source files, in the order it was given."""

    def __init__(
        self,
        project_name: str,
        *,
        has_sources: Callable[[CompilationUnit], bool],
        relative_project_path: Callable[[str], str],
    ) -> None:
        self.project_name = project_name
        self._has_sources = has_sources
        self._relative_project_path = relative_project_path

    def build(self, units: Iterable[CompilationUnit]) -> SolutionDescriptor:
        entries = [
            SolutionEntry(
                identifier=project_identifier(self.project_name, unit.name),
                name=unit.name,
                relative_path=self._relative_project_path(unit.name),
            )
            for unit in units
            if self._has_sources(unit)
        ]
        return SolutionDescriptor(entries=entries, project_type_id=solution_type_identifier())


def render_solution(descriptor: SolutionDescriptor) -> str:
    entries = WINDOWS_NEWLINE.join(
        _ENTRY_TEMPLATE.format(
            type_id=descriptor.project_type_id,
            name=entry.name,
            path=entry.relative_path,
            project_id=entry.identifier,
        )
        for entry in descriptor.entries
    )
    configurations = WINDOWS_NEWLINE.join(
        _CONFIGURATION_TEMPLATE.format(
            project_id=entry.identifier,
            configuration=descriptor.configuration,
        )
        for entry in descriptor.entries
    )
    return _SOLUTION_TEMPLATE.format(
        format_version=FORMAT_VERSION,
        generator_version=GENERATOR_VERSION,
        entries=entries,
        configuration=descriptor.configuration,
        configurations=configurations,
    )


__all__ = [
    "FORMAT_VERSION",
    "GENERATOR_VERSION",
    "SolutionDescriptorBuilder",
    "WINDOWS_NEWLINE",
    "render_solution",
]
