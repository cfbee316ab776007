"""Core data models shared across slnsync components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class CompilerOptions:
    """Compiler settings attached to a compilation unit."""

    language_version: str = ""
    allow_unsafe: bool = False
    ruleset_path: str = ""
    analyzer_paths: List[str] = field(default_factory=list)
    response_files: List[str] = field(default_factory=list)
    api_compatibility_level: str = "NET_Standard"


@dataclass
class CompilationUnit:
    """A named group of source files compiled together."""

    name: str
    source_files: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    precompiled_references: List[str] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    compiler_options: CompilerOptions = field(default_factory=CompilerOptions)
    output_path: str = ""


@dataclass
class ResponseFileData:
    """Structured view of one response file."""

    defines: List[str] = field(default_factory=list)
    full_path_references: List[str] = field(default_factory=list)
    other_arguments: List[str] = field(default_factory=list)
    unsafe: bool = False
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReferenceEntry:
    """Binary reference rendered with a display name and a hint path."""

    name: str
    hint_path: str


@dataclass(frozen=True)
class ProjectReferenceEntry:
    """Reference to another unit's project descriptor."""

    path: str
    identifier: str
    name: str


@dataclass
class ProjectDescriptor:
    """Everything needed to render one unit's project file."""

    name: str
    path: str
    target_framework: str
    compile_root: Optional[str] = None
    compile_extensions: List[str] = field(default_factory=list)
    asset_includes: List[str] = field(default_factory=list)
    references: List[ReferenceEntry] = field(default_factory=list)
    project_references: List[ProjectReferenceEntry] = field(default_factory=list)
    analyzers: List[str] = field(default_factory=list)
    analyzer_package: Optional[Dict[str, str]] = None
    defines: List[str] = field(default_factory=list)
    language_version: str = ""
    allow_unsafe: bool = False
    rulesets: List[str] = field(default_factory=list)

    @property
    def compile_includes(self) -> List[str]:
        """Return one recursive include pattern per source extension."""
        if self.compile_root is None:
            return []
        return [f"{self.compile_root}/**/*{ext}" for ext in self.compile_extensions]


@dataclass(frozen=True)
class SolutionEntry:
    """One project listing in the solution file."""

    identifier: str
    name: str
    relative_path: str


@dataclass
class SolutionDescriptor:
    """Ordered project listing plus the shared solution constants."""

    entries: List[SolutionEntry]
    project_type_id: str
    configuration: str = "Debug|Any CPU"
