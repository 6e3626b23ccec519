"""Tests for configuration models and the YAML loader."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from htmltool.core.config import (
    AppConfig,
    ConfigError,
    ExtractionConfig,
    ExtractionMode,
    FetchConfig,
    load_app_config,
)
from htmltool.core.config.loader import expand_env_vars
from htmltool.core.config.models import parse_header_spec


class TestHeaderSpecs:
    """Tests for name:value header parsing."""

    @pytest.mark.parametrize(
        ("spec", "expected"),
        [
            ("Accept: text/html", ("Accept", "text/html")),
            ("  X-Token :abc  ", ("X-Token", "abc")),
            ("Referer: https://example.com:8080/", ("Referer", "https://example.com:8080/")),
            ("X-Empty:", ("X-Empty", "")),
        ],
    )
    def test_valid(self, spec, expected):
        assert parse_header_spec(spec) == expected

    @pytest.mark.parametrize("spec", ["no-colon", "", ": value"])
    def test_dropped(self, spec):
        assert parse_header_spec(spec) is None

    def test_header_pairs_keep_order(self):
        config = FetchConfig(headers=["A: 1", "bad", "B: 2", "A: 3"])

        assert config.header_pairs == [("A", "1"), ("B", "2"), ("A", "3")]


class TestModels:
    """Tests for model defaults and validation."""

    def test_fetch_defaults(self):
        config = FetchConfig()

        assert config.concurrency == 40
        assert config.delay_ms == 100
        assert config.timeout == 30.0
        assert config.verify_tls is False
        assert config.follow_redirects is True

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValidationError):
            FetchConfig(concurrency=0)

    def test_query_requires_selector(self):
        with pytest.raises(ValidationError):
            ExtractionConfig(mode=ExtractionMode.QUERY)

    def test_mode_from_string(self):
        assert ExtractionConfig(mode="comments").mode == ExtractionMode.COMMENTS


class TestLoader:
    """Tests for YAML loading."""

    def test_no_path_gives_defaults(self):
        assert load_app_config(None) == AppConfig()

    def test_load_with_env_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("API_TOKEN", "s3cret")
        monkeypatch.delenv("MISSING_VAR", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            "fetch:\n"
            "  concurrency: 5\n"
            "  delay_ms: 0\n"
            "  headers:\n"
            '    - "Authorization: Bearer ${API_TOKEN}"\n'
            '    - "X-Env: ${MISSING_VAR:-fallback}"\n'
            "logging:\n"
            "  level: DEBUG\n",
            encoding="utf-8",
        )

        config = load_app_config(path)

        assert config.fetch.concurrency == 5
        assert config.fetch.delay_ms == 0
        assert config.fetch.header_pairs == [
            ("Authorization", "Bearer s3cret"),
            ("X-Env", "fallback"),
        ]
        assert config.logging.level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_app_config(path) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_app_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fetch: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_app_config(path)
        assert exc_info.value.details

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fetch:\n  concurrency: 0\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_app_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            load_app_config(path)

    def test_env_expansion_leaves_non_strings(self, monkeypatch):
        monkeypatch.setenv("HOST", "example.com")

        expanded = expand_env_vars({"a": ["${HOST}", 3, None], "b": {"c": "x-${HOST}"}})

        assert expanded == {"a": ["example.com", 3, None], "b": {"c": "x-example.com"}}
