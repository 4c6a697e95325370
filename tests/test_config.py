"""Tests for site configuration and corpus root discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from linkweave.config import (
    DEFAULT_ORIGIN_FIELD,
    DEFAULT_POSTS_DIR,
    SITE_CONFIG_FILENAME,
    ConfigurationError,
    SiteConfig,
    get_corpus_root,
    load_site_config,
)


class TestLoadSiteConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_site_config(tmp_path)
        assert config.posts_dir == DEFAULT_POSTS_DIR
        assert config.origin_field == DEFAULT_ORIGIN_FIELD
        assert config.base_url == ""
        assert config.exclude == []
        assert config.source_file is None

    def test_empty_file(self, tmp_path: Path):
        (tmp_path / SITE_CONFIG_FILENAME).write_text("# nothing yet\n")
        config = load_site_config(tmp_path)
        assert config.posts_dir == DEFAULT_POSTS_DIR
        assert config.source_file == tmp_path / SITE_CONFIG_FILENAME

    def test_values_normalized(self, tmp_path: Path):
        (tmp_path / SITE_CONFIG_FILENAME).write_text(
            "posts_dir: /_journal/\nbase_url: /notes/\nexclude: drafts/*\norigin_field: source\n"
        )
        config = load_site_config(tmp_path)
        assert config.posts_dir == "_journal"
        assert config.base_url == "/notes"
        assert config.exclude == ["drafts/*"]
        assert config.origin_field == "source"

    def test_not_a_mapping(self, tmp_path: Path):
        (tmp_path / SITE_CONFIG_FILENAME).write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="expected a mapping"):
            load_site_config(tmp_path)

    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / SITE_CONFIG_FILENAME).write_text("exclude: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_site_config(tmp_path)

    def test_from_dict_ignores_unknown_keys(self):
        config = SiteConfig.from_dict({"theme": "dark", "exclude": ["a", 1]})
        assert config.exclude == ["a", "1"]


class TestGetCorpusRoot:
    def test_explicit_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINKWEAVE_CORPUS_ROOT", "/does/not/exist")
        assert get_corpus_root(tmp_path) == tmp_path

    def test_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINKWEAVE_CORPUS_ROOT", str(tmp_path))
        assert get_corpus_root() == tmp_path

    def test_cwd_fallback(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("LINKWEAVE_CORPUS_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)
        assert get_corpus_root() == Path.cwd()

    def test_not_a_directory(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not a directory"):
            get_corpus_root(tmp_path / "missing")
