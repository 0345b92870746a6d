import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

DEFAULT_DATE_PATTERN = r"\*\*Last Updated\*\*:\s*(\d{4}-\d{2}-\d{2})"
DEFAULT_CACHE_FILE = ".ai/docs-check-cache.json"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CheckFlags(_FrozenModel):
    last_updated: bool = Field(default=True, alias="lastUpdated")
    links: bool = True
    structure: bool = True


class Threshold(_FrozenModel):
    # error <= warning is assumed by the staleness policy but not enforced
    error: int = 7
    warning: int = 30


class ReporterConfig(_FrozenModel):
    format: Literal["console", "json"] = "console"
    errors_only: bool = Field(default=False, alias="errorsOnly")


class ProjectConfig(_FrozenModel):
    docs_dir: str = Field(default=".ai", alias="docsDir")
    source_dirs: tuple[str, ...] = Field(default=("src",), alias="sourceDirs")
    source_extensions: tuple[str, ...] = Field(
        default=(".ts", ".js", ".prisma", ".py"),
        alias="sourceExtensions",
    )
    # read-only view; list values are stored as tuples
    mappings: Mapping[str, tuple[str, ...]] = Field(default_factory=lambda: MappingProxyType({}))
    date_pattern: str = Field(default=DEFAULT_DATE_PATTERN, alias="datePattern")
    required_sections: tuple[str, ...] = Field(
        default=("**Last Updated**", "**Version**"),
        alias="requiredSections",
    )
    check: CheckFlags = Field(default_factory=CheckFlags)
    threshold: Threshold = Field(default_factory=Threshold)
    cache_file: str = Field(default=DEFAULT_CACHE_FILE, alias="cacheFile")
    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
    log_level: Literal["debug", "info", "warn", "error"] = Field(default="info", alias="logLevel")

    @field_validator("date_pattern")
    @classmethod
    def validate_date_pattern(cls, v: str) -> str:
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"datePattern is not a valid regular expression: {e}") from e
        if compiled.groups < 1:
            raise ValueError("datePattern must contain a capture group for the date")
        return v

    @field_validator("source_extensions")
    @classmethod
    def normalize_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v)

    @field_validator("mappings")
    @classmethod
    def freeze_mappings(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(v))

    @field_serializer("mappings")
    def serialize_mappings(self, v: Mapping[str, tuple[str, ...]]) -> dict[str, list[str]]:
        return {src: list(docs) for src, docs in v.items()}

    @property
    def compiled_date_pattern(self) -> re.Pattern[str]:
        return re.compile(self.date_pattern)
