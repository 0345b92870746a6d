"""Tests for contextor.config models and the YAML loader."""

import pytest
import yaml
from pydantic import ValidationError

from contextor.config.loader import (
    ConfigError,
    _expand_env_vars,
    find_project_config,
    load_config,
    render_config_template,
)
from contextor.config.models import (
    DEFAULT_CACHE_FILE,
    DEFAULT_DATE_PATTERN,
    CheckFlags,
    ProjectConfig,
    ReporterConfig,
    Threshold,
)


# ── ProjectConfig defaults ─────────────────────────────────────────


class TestProjectConfigDefaults:
    def test_docs_dir(self, sample_config):
        assert sample_config.docs_dir == ".ai"

    def test_source_dirs(self, sample_config):
        assert sample_config.source_dirs == ("src",)

    def test_source_extensions(self, sample_config):
        assert sample_config.source_extensions == (".ts", ".js", ".prisma", ".py")

    def test_mappings_empty(self, sample_config):
        assert sample_config.mappings == {}

    def test_required_sections(self, sample_config):
        assert sample_config.required_sections == ("**Last Updated**", "**Version**")

    def test_all_checks_enabled(self, sample_config):
        assert sample_config.check == CheckFlags(last_updated=True, links=True, structure=True)

    def test_thresholds(self, sample_config):
        assert sample_config.threshold.error == 7
        assert sample_config.threshold.warning == 30

    def test_cache_and_pattern(self, sample_config):
        assert sample_config.cache_file == DEFAULT_CACHE_FILE
        assert sample_config.date_pattern == DEFAULT_DATE_PATTERN

    def test_reporter(self, sample_config):
        assert sample_config.reporter == ReporterConfig(format="console", errors_only=False)


# ── Model validation ───────────────────────────────────────────────


class TestModelValidation:
    def test_frozen(self, sample_config):
        with pytest.raises(ValidationError):
            sample_config.docs_dir = "docs"

    def test_nested_frozen(self):
        with pytest.raises(ValidationError):
            Threshold().error = 1

    def test_collections_are_immutable(self):
        cfg = ProjectConfig(sourceDirs=["src"], mappings={"src/a.ts": ["a.md"]})
        assert cfg.source_dirs == ("src",)
        assert cfg.mappings["src/a.ts"] == ("a.md",)
        with pytest.raises(TypeError):
            cfg.mappings["src/b.ts"] = ("b.md",)
        with pytest.raises(AttributeError):
            cfg.required_sections.append("## Usage")

    def test_dump_uses_plain_lists(self):
        cfg = ProjectConfig(mappings={"src/a.ts": ["a.md"]})
        data = cfg.model_dump(mode="json", by_alias=True)
        assert data["mappings"] == {"src/a.ts": ["a.md"]}
        assert data["sourceDirs"] == ["src"]
        assert ProjectConfig.model_validate(cfg.model_dump()) == cfg

    def test_accepts_aliases_and_field_names(self):
        assert ProjectConfig(docsDir="a").docs_dir == "a"
        assert ProjectConfig(docs_dir="b").docs_dir == "b"

    def test_date_pattern_requires_group(self):
        with pytest.raises(ValidationError, match="capture group"):
            ProjectConfig(date_pattern=r"\d{4}-\d{2}-\d{2}")

    def test_date_pattern_must_compile(self):
        with pytest.raises(ValidationError, match="regular expression"):
            ProjectConfig(date_pattern="(unclosed")

    def test_extensions_normalized(self):
        cfg = ProjectConfig(source_extensions=["TS", ".Py", "go"])
        assert cfg.source_extensions == (".ts", ".py", ".go")

    def test_invalid_reporter_format(self):
        with pytest.raises(ValidationError):
            ReporterConfig(format="xml")

    def test_unknown_keys_ignored(self):
        assert ProjectConfig.model_validate({"plugins": ["x"]}) == ProjectConfig()

    def test_compiled_date_pattern(self, sample_config):
        match = sample_config.compiled_date_pattern.search("**Last Updated**: 2025-01-02")
        assert match.group(1) == "2025-01-02"


# ── Loader ─────────────────────────────────────────────────────────


def _write(tmp_path, text, name="contextor.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_no_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path) == ProjectConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        _write(tmp_path, "")
        assert load_config(tmp_path) == ProjectConfig()

    def test_camel_case_keys(self, tmp_path):
        _write(tmp_path, (
            "docsDir: docs\n"
            "sourceDirs: [src, lib]\n"
            "cacheFile: .cache/docs.json\n"
            "logLevel: debug\n"
        ))
        cfg = load_config(tmp_path)
        assert cfg.docs_dir == "docs"
        assert cfg.source_dirs == ("src", "lib")
        assert cfg.cache_file == ".cache/docs.json"
        assert cfg.log_level == "debug"

    def test_snake_case_keys(self, tmp_path):
        _write(tmp_path, "docs_dir: docs\n")
        assert load_config(tmp_path).docs_dir == "docs"

    def test_threshold_partial_merge(self, tmp_path):
        _write(tmp_path, "threshold:\n  error: 3\n")
        cfg = load_config(tmp_path)
        assert cfg.threshold == Threshold(error=3, warning=30)

    def test_check_partial_merge(self, tmp_path):
        _write(tmp_path, "check:\n  lastUpdated: false\n")
        cfg = load_config(tmp_path)
        assert cfg.check.last_updated is False
        assert cfg.check.links is True
        assert cfg.check.structure is True

    def test_lists_replaced_not_merged(self, tmp_path):
        _write(tmp_path, "requiredSections: ['## Overview']\n")
        assert load_config(tmp_path).required_sections == ("## Overview",)

    def test_mapping_paths_untouched(self, tmp_path):
        _write(tmp_path, "mappings:\n  src/userService.ts: [api/userGuide.md]\n")
        cfg = load_config(tmp_path)
        assert cfg.mappings == {"src/userService.ts": ("api/userGuide.md",)}

    def test_overrides_win(self, tmp_path):
        _write(tmp_path, "reporter:\n  format: console\n  errorsOnly: true\n")
        cfg = load_config(tmp_path, overrides={"reporter": {"format": "json"}})
        assert cfg.reporter.format == "json"
        assert cfg.reporter.errors_only is True

    def test_camel_case_overrides(self, tmp_path):
        cfg = load_config(tmp_path, overrides={"docsDir": "handbook"})
        assert cfg.docs_dir == "handbook"

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path, "docsDir: elsewhere\n", name="custom.yaml")
        assert load_config(tmp_path, config_path=path).docs_dir == "elsewhere"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, config_path=tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        _write(tmp_path, "docsDir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(tmp_path)

    def test_non_mapping(self, tmp_path):
        _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_invalid_value(self, tmp_path):
        _write(tmp_path, "threshold:\n  error: soon\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(tmp_path)

    def test_bad_date_pattern(self, tmp_path):
        _write(tmp_path, "datePattern: 'no group here'\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_env_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCS_ROOT", "handbook")
        _write(tmp_path, 'docsDir: "${DOCS_ROOT}"\n')
        assert load_config(tmp_path).docs_dir == "handbook"


class TestFindProjectConfig:
    def test_none(self, tmp_path):
        assert find_project_config(tmp_path) is None

    def test_hidden_name(self, tmp_path):
        path = _write(tmp_path, "", name=".contextor.yaml")
        assert find_project_config(tmp_path) == path

    def test_precedence(self, tmp_path):
        _write(tmp_path, "", name=".contextor.yaml")
        _write(tmp_path, "", name="contextor.yml")
        preferred = _write(tmp_path, "")
        assert find_project_config(tmp_path) == preferred


class TestExpandEnvVars:
    def test_nested(self, monkeypatch):
        monkeypatch.setenv("X", "1")
        assert _expand_env_vars({"a": ["${X}", {"b": "v${X}"}], "n": 3}) == {
            "a": ["1", {"b": "v1"}],
            "n": 3,
        }

    def test_unset_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("CONTEXTOR_UNSET_VAR", raising=False)
        assert _expand_env_vars("${CONTEXTOR_UNSET_VAR}") == ""


class TestConfigTemplate:
    def test_is_valid_yaml(self):
        data = yaml.safe_load(render_config_template(["src", "lib"]))
        assert data["sourceDirs"] == ["src", "lib"]
        assert data["mappings"] == {}

    def test_defaults_to_src(self):
        assert yaml.safe_load(render_config_template())["sourceDirs"] == ["src"]

    def test_loads_as_defaults(self, tmp_path):
        _write(tmp_path, render_config_template(["src", "lib"]))
        assert load_config(tmp_path) == ProjectConfig(source_dirs=["src", "lib"])
