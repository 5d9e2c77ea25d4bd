"""Tests for configuration loading."""

import pytest

from semgraph.utils.config import (
    PaletteConfig,
    SemgraphConfig,
    StyleConfig,
    TransformConfig,
    get_config,
    load_config,
    parse_config,
)

FULL_YAML = """
transform:
  p_max: 0.05
style:
  layout: neato
  rankdir: TB
  label_digits: 3
  palette:
    negative: "#000000"
"""


class TestParseConfig:
    """parse_config on already-parsed mappings."""

    def test_empty_gives_defaults(self):
        config = parse_config(None)
        assert config == SemgraphConfig()
        assert config.transform.p_max == 0.10
        assert config.style.layout == "dot"

    def test_partial_sections(self):
        config = parse_config({"transform": {"p_max": 0.01}})
        assert config.transform == TransformConfig(p_max=0.01)
        assert config.style == StyleConfig()

    def test_nested_palette(self):
        config = parse_config({"style": {"palette": {"positive": "#123456"}}})
        assert config.style.palette.positive == "#123456"
        assert config.style.palette.negative == PaletteConfig().negative

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            parse_config({"transform": {"alpha": 0.05}})

    def test_invalid_p_max_rejected(self):
        with pytest.raises(ValueError, match="p_max must be in"):
            parse_config({"transform": {"p_max": 0}})

    def test_does_not_mutate_input(self):
        raw = {"style": {"palette": {"positive": "#123456"}}}
        parse_config(raw)
        assert raw == {"style": {"palette": {"positive": "#123456"}}}


class TestLoadConfig:
    """load_config file discovery and caching."""

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "semgraph.yaml"
        path.write_text(FULL_YAML)
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))

        config = load_config()
        assert config.transform.p_max == 0.05
        assert config.style.layout == "neato"
        assert config.style.rankdir == "TB"
        assert config.style.label_digits == 3
        assert config.style.palette.negative == "#000000"

    def test_env_var_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(tmp_path / "missing.yaml"))
        with pytest.raises(FileNotFoundError, match="SEMGRAPH_CONFIG"):
            load_config()

    def test_empty_file_gives_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))
        assert load_config() == SemgraphConfig()

    def test_cached(self, tmp_path, monkeypatch):
        path = tmp_path / "semgraph.yaml"
        path.write_text(FULL_YAML)
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))

        first = get_config()
        path.write_text("transform:\n  p_max: 0.5\n")
        assert get_config() is first

    def test_frozen(self):
        config = SemgraphConfig()
        with pytest.raises(AttributeError):
            config.transform.p_max = 0.5


class TestInvalidConfigFile:
    """Errors from a config file name the file."""

    def test_unknown_key_names_path(self, tmp_path, monkeypatch):
        path = tmp_path / "semgraph.yaml"
        path.write_text("transform:\n  alpha: 0.05\n")
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))

        with pytest.raises(ValueError, match="semgraph.yaml: invalid config") as exc_info:
            load_config()
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_invalid_yaml_names_path(self, tmp_path, monkeypatch):
        path = tmp_path / "broken.yaml"
        path.write_text("transform: [p_max: 0.05\n")
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))

        with pytest.raises(ValueError, match="broken.yaml: invalid config"):
            load_config()

    def test_invalid_p_max_names_path(self, tmp_path, monkeypatch):
        path = tmp_path / "semgraph.yaml"
        path.write_text("transform:\n  p_max: 2\n")
        monkeypatch.setenv("SEMGRAPH_CONFIG", str(path))

        with pytest.raises(ValueError, match="p_max must be in") as exc_info:
            load_config()
        assert str(path) in str(exc_info.value)
