"""Unit tests for platform resolution and the helpers built on it."""

import builtins
import types

import pytest

import platguard.platform as platform_mod
from platguard import (
    GuardContext,
    GuardUsageError,
    NoHandlerForPlatform,
    Platform,
    PlatformMismatch,
    assert_platform,
    get_current_platform,
    install_compat_shims,
    is_node,
    is_web,
    platform_specific_code,
    set_current_platform,
    simulate_platform,
    switch_platform,
)


class TestDetection:
    """Tests for real environment detection."""

    def test_native_interpreter_is_node(self):
        assert get_current_platform() == Platform.NODE

    def test_window_global_means_web(self, monkeypatch):
        monkeypatch.setattr(builtins, "window", object(), raising=False)
        assert get_current_platform() == Platform.WEB

    def test_emscripten_means_web(self, monkeypatch):
        monkeypatch.setattr(platform_mod.sys, "platform", "emscripten")
        assert get_current_platform() == Platform.WEB

    def test_no_markers_means_unknown(self, monkeypatch):
        monkeypatch.setattr(platform_mod, "runtime_version", lambda: None)
        assert get_current_platform() == Platform.UNKNOWN

    def test_wasi_has_no_runtime_marker(self, monkeypatch):
        monkeypatch.setattr(platform_mod.sys, "platform", "wasi")
        assert platform_mod.runtime_version() is None
        assert get_current_platform() == Platform.UNKNOWN

    def test_platform_renders_as_plain_name(self):
        assert str(Platform.WEB) == "web"
        assert f"{Platform.NODE}" == "node"


class TestSimulation:
    """Tests for the simulated platform override."""

    def test_set_returns_true_when_active(self):
        assert set_current_platform("web") is True
        assert get_current_platform() == Platform.WEB

    def test_clear_returns_false(self):
        set_current_platform("web")
        assert set_current_platform(None) is False

    def test_clear_restores_detection(self, monkeypatch):
        set_current_platform("web")
        set_current_platform(None)
        assert get_current_platform() == Platform.NODE

        monkeypatch.setattr(builtins, "window", object(), raising=False)
        assert get_current_platform() == Platform.WEB

    def test_clear_restores_unknown(self, monkeypatch):
        monkeypatch.setattr(platform_mod, "runtime_version", lambda: None)
        set_current_platform("node")
        set_current_platform(None)
        assert get_current_platform() == Platform.UNKNOWN

    def test_last_write_wins(self):
        set_current_platform("web")
        set_current_platform("node")
        assert get_current_platform() == Platform.NODE

    def test_simulating_unknown(self):
        set_current_platform("unknown")
        assert get_current_platform() == Platform.UNKNOWN

    def test_rejects_unknown_names(self):
        with pytest.raises(GuardUsageError, match="Unknown platform"):
            set_current_platform("windows")

    def test_context_manager_restores(self):
        set_current_platform("node")
        with simulate_platform("web") as current:
            assert current == Platform.WEB
            assert is_web()
        assert get_current_platform() == Platform.NODE

    def test_separate_context(self):
        context = GuardContext()
        context.simulate("web")
        assert get_current_platform(context) == Platform.WEB
        assert get_current_platform() == Platform.NODE


class TestAssertPlatform:
    """Tests for assert_platform()."""

    def test_passes_on_match(self, on_node):
        assert_platform("node")

    def test_default_message(self, on_web):
        with pytest.raises(PlatformMismatch) as exc:
            assert_platform("node")
        assert str(exc.value) == "This code should only run in a node environment."
        assert exc.value.target == "node"
        assert exc.value.current == "web"

    def test_custom_message(self, on_web):
        with pytest.raises(PlatformMismatch, match="^server only$"):
            assert_platform(Platform.NODE, "server only")

    def test_unknown_is_a_mismatch(self, guard_context):
        guard_context.simulate("unknown")
        with pytest.raises(PlatformMismatch):
            assert_platform("web")

    def test_unknown_is_not_a_target(self):
        with pytest.raises(GuardUsageError):
            assert_platform("unknown")

    def test_disabled_never_fails(self, guard_context):
        guard_context.config.enabled = False
        guard_context.simulate("web")
        assert_platform("node")


class TestPredicates:
    """Tests for is_web() / is_node()."""

    def test_on_web(self, on_web):
        assert is_web()
        assert not is_node()

    def test_on_node(self, on_node):
        assert is_node()
        assert not is_web()


class TestSwitchPlatform:
    """Tests for switch_platform()."""

    def test_calls_matching_entry(self, on_node):
        result = switch_platform({"web": lambda: "w", "node": lambda: "n"})
        assert result == "n"

    def test_accepts_enum_keys(self, on_web):
        assert switch_platform({Platform.WEB: lambda: 1}) == 1

    def test_unknown_entry(self, guard_context):
        guard_context.simulate("unknown")
        assert switch_platform({"unknown": lambda: "fallback"}) == "fallback"

    def test_missing_entry(self, on_node):
        with pytest.raises(NoHandlerForPlatform) as exc:
            switch_platform({"web": lambda: 1})
        assert str(exc.value) == "No function specified for platform: node"
        assert isinstance(exc.value, LookupError)
        assert exc.value.platform == "node"


class TestPlatformSpecificCode:
    """Tests for platform_specific_code()."""

    def test_runs_on_match(self, on_node):
        assert platform_specific_code("node", lambda: 7) == 7

    def test_skipped_on_mismatch(self, on_node):
        calls = []
        assert platform_specific_code("web", lambda: calls.append(1)) is None
        assert calls == []

    def test_always_runs_when_disabled(self, guard_context):
        guard_context.config.enabled = False
        guard_context.simulate("node")
        assert platform_specific_code("web", lambda: "ran") == "ran"


class TestCompatShims:
    """Tests for install_compat_shims()."""

    def test_installs_on_node(self, on_node):
        namespace = types.SimpleNamespace()
        assert install_compat_shims(namespace) is True
        assert isinstance(namespace.HTMLElement, type)

    def test_idempotent(self, on_node):
        namespace = types.SimpleNamespace()
        install_compat_shims(namespace)
        assert install_compat_shims(namespace) is False

    def test_keeps_existing_global(self, on_node):
        existing = object()
        namespace = types.SimpleNamespace(HTMLElement=existing)
        assert install_compat_shims(namespace) is False
        assert namespace.HTMLElement is existing

    def test_nothing_on_web(self, on_web):
        namespace = types.SimpleNamespace()
        assert install_compat_shims(namespace) is False
        assert not hasattr(namespace, "HTMLElement")
