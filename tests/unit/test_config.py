"""Unit tests for configuration loading and message templates."""

import pytest

from platguard import (
    ConfigError,
    GuardConfig,
    Platform,
    GuardContext,
    PlatformMismatch,
    assert_platform,
    configure,
    get_config,
    get_context,
    get_current_platform,
    load_config,
    platform_specific_method,
    set_config,
    switch_platform,
)
from platguard import context as context_module
from platguard.errors import MessageTemplateError
from platguard.messages import render_message


class TestGuardConfig:
    """Tests for GuardConfig defaults and validation."""

    def test_defaults(self):
        config = GuardConfig()
        assert config.enabled is True
        assert config.guard_writes is False
        assert config.simulated_platform is None

    def test_from_mapping(self):
        config = GuardConfig.from_mapping({"guard_writes": "yes", "simulated_platform": "web"})
        assert config.guard_writes is True
        assert config.simulated_platform == Platform.WEB

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown setting"):
            GuardConfig.from_mapping({"guard_reads": True})

    def test_bad_bool(self):
        with pytest.raises(ConfigError, match="enabled must be a boolean"):
            GuardConfig.from_mapping({"enabled": "maybe"})

    def test_bad_platform(self):
        with pytest.raises(ConfigError, match="Unknown platform"):
            GuardConfig.from_mapping({"simulated_platform": "windows"})

    def test_message_must_be_string(self):
        with pytest.raises(ConfigError, match="method_message"):
            GuardConfig.from_mapping({"method_message": 3})

    def test_string_simulated_platform(self):
        config = GuardConfig(simulated_platform="web")
        assert config.simulated_platform is Platform.WEB

    def test_string_simulated_platform_fails_guards(self):
        context = GuardContext(GuardConfig(simulated_platform="web"))
        assert context.current_platform() is Platform.WEB
        with pytest.raises(PlatformMismatch) as exc:
            assert_platform("node", context=context)
        assert exc.value.current == "web"

    def test_bad_simulated_platform(self):
        with pytest.raises(ConfigError, match="Unknown platform"):
            GuardConfig(simulated_platform="windows")


class TestLoadConfig:
    """Tests for YAML configuration files."""

    def test_load(self, tmp_path):
        path = tmp_path / "guards.yml"
        path.write_text("enabled: false\nguard_writes: true\n")
        config = load_config(path)
        assert config.enabled is False
        assert config.guard_writes is True

    def test_nested_section(self, tmp_path):
        path = tmp_path / "app.yml"
        path.write_text("platguard:\n  simulated_platform: node\nother: 1\n")
        assert load_config(path).simulated_platform == Platform.NODE

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == GuardConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("enabled: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML") as exc:
            load_config(path)
        assert exc.value.file_path == str(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- enabled\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "absent.yml")


class TestFromEnv:
    """Tests for environment configuration."""

    def test_empty_environment(self):
        assert GuardConfig.from_env({}) == GuardConfig()

    def test_overrides(self):
        config = GuardConfig.from_env({
            "PLATGUARD_ENABLED": "off",
            "PLATGUARD_GUARD_WRITES": "1",
            "PLATGUARD_PLATFORM": "WEB",
        })
        assert config.enabled is False
        assert config.guard_writes is True
        assert config.simulated_platform == Platform.WEB

    def test_config_file_then_overrides(self, tmp_path):
        path = tmp_path / "guards.yml"
        path.write_text("guard_writes: true\nsimulated_platform: node\n")
        config = GuardConfig.from_env({
            "PLATGUARD_CONFIG": str(path),
            "PLATGUARD_PLATFORM": "web",
        })
        assert config.guard_writes is True
        assert config.simulated_platform == Platform.WEB


class TestConfigure:
    """Tests for configure() on the process context."""

    def test_updates_settings(self):
        configure(guard_writes=True)
        assert get_config().guard_writes is True

    def test_simulated_platform_applies(self):
        configure(simulated_platform="web")
        assert get_current_platform() == Platform.WEB
        configure(simulated_platform=None)
        assert get_current_platform() == Platform.NODE

    def test_set_config_applies_simulation(self):
        set_config(GuardConfig(simulated_platform=Platform.WEB))
        assert get_current_platform() == Platform.WEB

    def test_set_config_keeps_active_simulation(self, on_web):
        set_config(GuardConfig(guard_writes=True))
        assert get_config().guard_writes is True
        assert get_current_platform() == Platform.WEB


class TestDefaultContext:
    """Tests for the process context built from the environment."""

    @pytest.fixture
    def fresh_default(self, monkeypatch):
        monkeypatch.setattr(context_module, "_context", None)

    def test_reads_environment(self, monkeypatch, fresh_default):
        monkeypatch.setenv("PLATGUARD_ENABLED", "false")
        monkeypatch.setenv("PLATGUARD_PLATFORM", "web")
        context = get_context()
        assert context.config.enabled is False
        assert context.current_platform() == Platform.WEB
        assert_platform("node")

    def test_reads_config_file(self, monkeypatch, tmp_path, fresh_default):
        path = tmp_path / "guards.yml"
        path.write_text("platguard:\n  guard_writes: true\n")
        monkeypatch.setenv("PLATGUARD_CONFIG", str(path))
        assert get_config().guard_writes is True

    def test_built_once(self, fresh_default):
        assert get_context() is get_context()


class TestMessageTemplates:
    """Tests for rewordable failure messages."""

    def test_render(self):
        assert render_message("{{ name }} on {{ platform }}", name="foo", platform=Platform.WEB) == "foo on web"

    def test_custom_method_message(self, on_node):
        configure(method_message="{{ name }} is {{ platform }}-only (running on {{ current }})")

        class Service:
            @platform_specific_method("web")
            def foo(self):
                return 1

        with pytest.raises(PlatformMismatch, match=r"^foo is web-only \(running on node\)$"):
            Service().foo()

    def test_custom_assert_message(self, on_web):
        configure(assert_message="needs {{ platform }}")
        with pytest.raises(PlatformMismatch, match="^needs node$"):
            assert_platform("node")

    def test_custom_switch_message(self, on_web):
        configure(switch_message="nothing for {{ current }}")
        with pytest.raises(LookupError, match="^nothing for web$"):
            switch_platform({})

    def test_syntax_error(self):
        with pytest.raises(MessageTemplateError, match="Message template error"):
            render_message("{{ name", name="x")

    def test_undefined_variable(self):
        with pytest.raises(MessageTemplateError):
            render_message("{{ missing }}")
