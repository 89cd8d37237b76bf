"""
Tests for config/config.py.
"""

import pytest

from appmods.config import MAX_CONFIG_SIZE_BYTES, Config
from appmods.exceptions import ConfigError


@pytest.fixture
def write_yaml(temp_dir):
    def _write(content, name="app.yaml"):
        path = temp_dir / name
        path.write_text(content)
        return path

    return _write


@pytest.mark.unit
class TestConfigLoading:
    """Test loading YAML files."""

    def test_loads_mapping(self, write_yaml):
        config = Config(write_yaml("http:\n  port: 8080\n"))

        assert config == {"http": {"port": 8080}}
        assert isinstance(config, dict)

    def test_empty_file(self, write_yaml):
        assert Config(write_yaml("")) == {}

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigError) as exc_info:
            Config(temp_dir / "nope.yaml")

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, write_yaml):
        with pytest.raises(ConfigError) as exc_info:
            Config(write_yaml("a: [1, 2\n"))

        assert exc_info.value.message == "invalid YAML"

    def test_root_must_be_mapping(self, write_yaml):
        with pytest.raises(ConfigError):
            Config(write_yaml("- a\n- b\n"))

    def test_size_limit(self, write_yaml):
        path = write_yaml("x: " + "a" * (MAX_CONFIG_SIZE_BYTES + 1) + "\n")

        with pytest.raises(ConfigError) as exc_info:
            Config(path)

        assert exc_info.value.context["limit"] == MAX_CONFIG_SIZE_BYTES

    def test_unsafe_tags_rejected(self, write_yaml):
        with pytest.raises(ConfigError):
            Config(write_yaml("x: !!python/object/apply:os.system ['true']\n"))


@pytest.mark.unit
class TestLookupAndSubstitution:
    """Test dotted lookup and ${path} substitution."""

    def test_lookup(self, write_yaml):
        config = Config(write_yaml("a:\n  b:\n    c: 3\n"))

        assert config.lookup("a.b.c") == 3
        assert config.lookup("a.x", "dflt") == "dflt"
        with pytest.raises(KeyError):
            config.lookup("a.x")

    def test_substitution(self, write_yaml):
        config = Config(
            write_yaml(
                "app:\n  name: demo\nclock:\n  label: '${app.name}-clock'\n"
                "  tags: ['${app.name}']\n"
            )
        )

        assert config["clock"]["label"] == "demo-clock"
        assert config["clock"]["tags"] == ["demo"]

    def test_undefined_variable(self, write_yaml):
        with pytest.raises(ConfigError) as exc_info:
            Config(write_yaml("a: '${nope.here}'\n"))

        assert exc_info.value.context["variable"] == "nope.here"


@pytest.mark.unit
class TestEnvOverrides:
    """Test APPMODS_* environment overrides."""

    def test_override_applied(self, write_yaml, monkeypatch):
        monkeypatch.setenv("APPMODS_HTTP_PORT", "9000")
        monkeypatch.setenv("APPMODS_HTTP_DEBUG", "true")
        monkeypatch.setenv("APPMODS_HTTP_HOSTS", "a,b")

        config = Config(write_yaml("http:\n  port: 8080\n"))

        assert config["http"] == {"port": 9000, "debug": True, "hosts": ["a", "b"]}

    def test_override_creates_sections(self, write_yaml, monkeypatch):
        monkeypatch.setenv("APPMODS_CACHE_TTL", "1.5")

        config = Config(write_yaml("{}\n"))

        assert config["cache"] == {"ttl": 1.5}

    def test_overrides_disabled(self, write_yaml, monkeypatch):
        monkeypatch.setenv("APPMODS_HTTP_PORT", "9000")

        config = Config(write_yaml("http:\n  port: 8080\n"), enable_env_overrides=False)

        assert config["http"]["port"] == 8080

    def test_custom_prefix(self, write_yaml, monkeypatch):
        monkeypatch.setenv("MYAPP_HTTP_PORT", "1")

        config = Config(write_yaml("http: {}\n"), env_prefix="MYAPP_")

        assert config["http"]["port"] == 1
