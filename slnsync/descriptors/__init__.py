"""Project and solution descriptor builders."""

from .project import (
    AnalyzerPackage,
    ConfigurationError,
    ProjectDescriptorBuilder,
    render_project,
    target_framework_for,
)
from .solution import SolutionDescriptorBuilder, render_solution

__all__ = [
    "AnalyzerPackage",
    "ConfigurationError",
    "ProjectDescriptorBuilder",
    "SolutionDescriptorBuilder",
    "render_project",
    "render_solution",
    "target_framework_for",
]
