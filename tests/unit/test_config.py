"""Tests for glint.config module."""

import pytest

from glint.config import DEFAULT_CONFIG, GlintConfig, find_pyproject, load_config
from glint.errors import ConfigError, GlintError


def write_pyproject(directory, body: str):
    path = directory / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestGlintConfig:
    def test_defaults(self):
        config = GlintConfig()

        assert config.slowest_count == 3
        assert config.description_width == 50
        assert config.location_width == 30
        assert config.message_lines == 10
        assert config.backtrace_lines == 5
        assert config.hyperlinks is True
        assert config.reporters == ["ReportCollector"]

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValueError):
            GlintConfig(slowest=5)


class TestFindPyproject:
    def test_finds_file_in_parent(self, tmp_path):
        expected = write_pyproject(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_pyproject(nested) == expected.resolve()

    def test_prefers_nearest(self, tmp_path):
        write_pyproject(tmp_path, "")
        nested = tmp_path / "sub"
        nested.mkdir()
        expected = write_pyproject(nested, "")

        assert find_pyproject(nested) == expected.resolve()


class TestLoadConfig:
    def test_reads_tool_table(self, tmp_path):
        path = write_pyproject(
            tmp_path,
            "[tool.glint]\nslowest_count = 5\nhyperlinks = false\nreporters = ['ReportCollector', 'EventRecorder']\n",
        )

        config = load_config(path)

        assert config.slowest_count == 5
        assert config.hyperlinks is False
        assert config.reporters == ["ReportCollector", "EventRecorder"]

    def test_searches_from_start(self, tmp_path):
        write_pyproject(tmp_path, "[tool.glint]\nmessage_lines = 3\n")

        assert load_config(start=tmp_path).message_lines == 3

    def test_missing_table_gives_defaults(self, tmp_path):
        path = write_pyproject(tmp_path, "[project]\nname = 'demo'\n")

        assert load_config(path) is DEFAULT_CONFIG

    def test_invalid_value_raises(self, tmp_path):
        path = write_pyproject(tmp_path, "[tool.glint]\nslowest_count = -1\n")

        with pytest.raises(ConfigError) as excinfo:
            load_config(path)

        assert excinfo.value.path == path
        assert "Invalid glint configuration" in str(excinfo.value)
        assert isinstance(excinfo.value, GlintError)

    def test_malformed_toml_raises(self, tmp_path):
        path = write_pyproject(tmp_path, "[tool.glint\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.toml")
