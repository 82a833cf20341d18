"""Unit tests for the eager platform-specific base types."""

import pytest

from platguard import NodeSpecificType, PlatformMismatch, PlatformSpecificType, WebSpecificType


class TestPlatformSpecificType:
    """Tests for construction-time assertion."""

    def test_node_type_on_node(self, on_node):
        obj = NodeSpecificType()
        assert obj.target_platform == "node"

    def test_node_type_on_web(self, on_web):
        with pytest.raises(PlatformMismatch) as exc:
            NodeSpecificType()
        assert str(exc.value) == "This code should only run in a node environment."

    def test_web_type_on_node(self, on_node):
        with pytest.raises(PlatformMismatch, match="web environment"):
            WebSpecificType()

    def test_subclass(self, on_web):
        class Canvas(WebSpecificType):
            def __init__(self, width):
                super().__init__()
                self.width = width

        assert Canvas(10).width == 10

    def test_explicit_target(self, on_web):
        assert PlatformSpecificType("web").target_platform == "web"
