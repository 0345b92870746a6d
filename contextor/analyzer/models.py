"""Pydantic models for project analysis."""

from typing import Literal

from pydantic import BaseModel, Field

ProjectType = Literal["monorepo", "fullstack", "frontend", "backend", "library", "unknown"]


class ProjectAnalysis(BaseModel):
    """Heuristic summary of a project, used by `analyze` and `config init`."""

    type: ProjectType = "unknown"
    frameworks: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    build_tools: list[str] = Field(default_factory=list)
    test_frameworks: list[str] = Field(default_factory=list)
    key_dirs: list[str] = Field(default_factory=list)
    key_files: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    has_git: bool = False
    has_tests: bool = False
    is_monorepo: bool = False
