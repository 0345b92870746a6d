"""Project type and stack detection from manifests and directory layout."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from contextor.analyzer.manifests import PARSERS
from contextor.analyzer.models import ProjectAnalysis, ProjectType

logger = logging.getLogger(__name__)

# dependency name -> framework label, checked in order
FRAMEWORK_DEPS: list[tuple[tuple[str, ...], str]] = [
    (("react", "react-dom"), "React"),
    (("vue", "@vue/core"), "Vue"),
    (("angular", "@angular/core"), "Angular"),
    (("next",), "Next.js"),
    (("nuxt",), "Nuxt.js"),
    (("svelte",), "Svelte"),
    (("remix",), "Remix"),
    (("express",), "Express"),
    (("koa", "@koa/router"), "Koa"),
    (("fastify",), "Fastify"),
    (("nestjs", "@nestjs/core"), "NestJS"),
    (("hapi", "@hapi/hapi"), "Hapi"),
    (("fastapi",), "FastAPI"),
    (("django",), "Django"),
    (("flask",), "Flask"),
    (("prisma", "@prisma/client"), "Prisma"),
    (("typeorm",), "TypeORM"),
    (("sequelize",), "Sequelize"),
    (("mongoose",), "Mongoose"),
    (("sqlalchemy",), "SQLAlchemy"),
    (("lerna",), "Lerna"),
    (("nx",), "Nx"),
    (("turborepo",), "Turborepo"),
]

BUILD_TOOL_DEPS: list[tuple[tuple[str, ...], str]] = [
    (("webpack",), "Webpack"),
    (("vite", "@vitejs/plugin-react", "@vitejs/plugin-vue"), "Vite"),
    (("rollup",), "Rollup"),
    (("esbuild",), "esbuild"),
    (("turbopack",), "Turbopack"),
    (("hatchling",), "Hatch"),
]

TEST_DEPS: list[tuple[tuple[str, ...], str]] = [
    (("jest",), "Jest"),
    (("vitest",), "Vitest"),
    (("mocha",), "Mocha"),
    (("cypress",), "Cypress"),
    (("@testing-library/react", "@testing-library/vue"), "Testing Library"),
    (("playwright",), "Playwright"),
    (("pytest",), "pytest"),
]

MONOREPO_MARKERS = {"workspaces", "lerna", "nx", "turborepo"}

COMMON_DIRS = [
    "src", "lib", "app", "pages", "components", "views", "public",
    "dist", "build", "out", "server", "client", "api", "routes",
    "controllers", "models", "services", "utils", "helpers",
    "tests", "test", "__tests__", "spec", "e2e", "cypress",
    "config", "scripts", "docs", "documentation", "packages",
]

COMMON_FILES = [
    "README.md", "package.json", "pyproject.toml", "requirements.txt",
    "tsconfig.json", "jsconfig.json", "webpack.config.js", "vite.config.js",
    "next.config.js", "tailwind.config.js", "postcss.config.js", "babel.config.js",
    ".env", ".env.example", "docker-compose.yml", "Dockerfile",
    "jest.config.js", "vitest.config.js",
]

TEST_DIRS = {"tests", "test", "__tests__", "spec", "e2e"}
FRONTEND_FRAMEWORKS = {"React", "Vue", "Angular", "Next.js", "Nuxt.js", "Svelte", "Remix"}
FRONTEND_DIRS = {"pages", "components", "public", "app"}
FRONTEND_FILES = {"next.config.js", "vite.config.js"}
BACKEND_FRAMEWORKS = {"Express", "Koa", "Fastify", "NestJS", "Hapi", "FastAPI", "Django", "Flask"}
BACKEND_DIRS = {"server", "api", "routes", "controllers"}
LIBRARY_DIRS = {"lib", "dist", "build"}

LANGUAGES = {
    ".js": "JavaScript",
    ".jsx": "JavaScript (React)",
    ".ts": "TypeScript",
    ".tsx": "TypeScript (React)",
    ".py": "Python",
    ".java": "Java",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "SASS",
    ".less": "Less",
    ".html": "HTML",
    ".json": "JSON",
    ".md": "Markdown",
    ".sql": "SQL",
    ".prisma": "Prisma Schema",
}

MAX_SCAN_DEPTH = 3


def _match(deps: set[str], table: list[tuple[tuple[str, ...], str]]) -> list[str]:
    found: list[str] = []
    for names, label in table:
        if label not in found and any(n in deps for n in names):
            found.append(label)
    return found


class ProjectAnalyzer:
    """Detects what kind of project lives at *project_root*.

    Only filesystem heuristics are used: manifests, well-known directory
    names and file extensions. Unreadable manifests are ignored.
    """

    def __init__(self, project_root: str | Path) -> None:
        self.project_root = Path(project_root).resolve()

    def analyze(self) -> ProjectAnalysis:
        deps = self._read_dependencies()
        key_dirs = [d for d in COMMON_DIRS if (self.project_root / d).is_dir()]
        key_files = [f for f in COMMON_FILES if (self.project_root / f).is_file()]
        test_frameworks = _match(deps, TEST_DEPS)
        frameworks = _match(deps, FRAMEWORK_DEPS)
        is_monorepo = bool(deps & MONOREPO_MARKERS)

        analysis = ProjectAnalysis(
            frameworks=frameworks,
            languages=self._detect_languages(),
            build_tools=_match(deps, BUILD_TOOL_DEPS),
            test_frameworks=test_frameworks,
            key_dirs=key_dirs,
            key_files=key_files,
            dependencies=sorted(deps - {"workspaces"}),
            has_git=(self.project_root / ".git").exists(),
            has_tests=bool(test_frameworks) or any(d in TEST_DIRS for d in key_dirs),
            is_monorepo=is_monorepo,
        )
        analysis.type = self._detect_type(analysis)
        return analysis

    def _read_dependencies(self) -> set[str]:
        deps: set[str] = set()
        for parser in PARSERS:
            manifest = self.project_root / parser.file_name
            if not manifest.is_file():
                continue
            try:
                content = manifest.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Cannot read %s: %s", manifest, e)
                continue
            deps.update(parser.parse(content))
        return deps

    def _detect_languages(self) -> list[str]:
        extensions: set[str] = set()
        root_depth = len(self.project_root.parts)
        for dirpath, dirnames, filenames in os.walk(self.project_root):
            depth = len(Path(dirpath).parts) - root_depth
            dirnames[:] = [
                d for d in dirnames
                if not d.startswith(".") and d != "node_modules" and depth < MAX_SCAN_DEPTH
            ]
            for name in filenames:
                if name.startswith("."):
                    continue
                ext = Path(name).suffix.lower()
                if ext:
                    extensions.add(ext)
        return sorted({LANGUAGES[e] for e in extensions if e in LANGUAGES})

    @staticmethod
    def _detect_type(analysis: ProjectAnalysis) -> ProjectType:
        if analysis.is_monorepo:
            return "monorepo"

        frameworks = set(analysis.frameworks)
        dirs = set(analysis.key_dirs)
        files = set(analysis.key_files)

        has_frontend = bool(
            frameworks & FRONTEND_FRAMEWORKS or dirs & FRONTEND_DIRS or files & FRONTEND_FILES
        )
        has_backend = bool(frameworks & BACKEND_FRAMEWORKS or dirs & BACKEND_DIRS)

        if has_frontend and has_backend:
            return "fullstack"
        if has_frontend:
            return "frontend"
        if has_backend:
            return "backend"
        if dirs & LIBRARY_DIRS and "package.json" in files:
            return "library"
        if "src" in dirs or "lib" in dirs:
            return "library"
        return "unknown"
