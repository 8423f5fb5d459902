"""Tests for the filter pipeline and the editor settings channel."""

import pytest

from aria_labels.core.editor_settings import (
    EditorSettings,
    get_editor_settings,
    block_attribute_schema,
)
from aria_labels.core.hooks import HookRegistry
from aria_labels.utils.constants import Hook, DEFAULT_ALLOWED_BLOCKS


class TestHookRegistry:
    """Tests for HookRegistry."""

    def test_apply_without_callbacks_returns_value(self):
        hooks = HookRegistry()

        assert hooks.apply_filters("anything", 5) == 5
        assert hooks.has_filter("anything") is False

    def test_callbacks_run_by_priority(self):
        hooks = HookRegistry()
        hooks.add_filter("name", lambda v: v + "b", 20)
        hooks.add_filter("name", lambda v: v + "a", 5)
        hooks.add_filter("name", lambda v: v + "c", 20)

        assert hooks.apply_filters("name", "") == "abc"

    def test_extra_arguments_are_passed(self):
        hooks = HookRegistry()
        hooks.add_filter("sum", lambda v, x, y: v + x + y)

        assert hooks.apply_filters("sum", 1, 2, 3) == 6

    def test_enum_and_string_names_are_the_same_filter(self):
        hooks = HookRegistry()
        hooks.add_filter(Hook.RENDER_BLOCK, lambda v, b: v.upper())

        assert hooks.has_filter("render_block")
        assert hooks.apply_filters("render_block", "x", None) == "X"

    def test_remove_filter(self):
        hooks = HookRegistry()

        def shout(value):
            return value.upper()

        hooks.add_filter("name", shout)

        assert hooks.remove_filter("name", shout) is True
        assert hooks.remove_filter("name", shout) is False
        assert hooks.apply_filters("name", "x") == "x"


class TestEditorSettings:
    """Tests for the settings exposed to the editor."""

    def test_defaults(self):
        settings = get_editor_settings()

        assert settings.move_to_advanced is True
        assert settings.allowed_blocks == list(DEFAULT_ALLOWED_BLOCKS)

    def test_to_dict_uses_editor_keys(self):
        data = EditorSettings(move_to_advanced=False, allowed_blocks=["core/button"]).to_dict()

        assert data == {"moveToAdvanced": False, "allowedBlocks": ["core/button"]}

    def test_settings_filter_can_change_values(self):
        hooks = HookRegistry()

        def customize(settings):
            settings["moveToAdvanced"] = False
            settings["allowedBlocks"] = settings["allowedBlocks"] + ["core/heading"]
            return settings

        hooks.add_filter(Hook.SETTINGS, customize)
        settings = get_editor_settings(hooks)

        assert settings.move_to_advanced is False
        assert "core/heading" in settings.allowed_blocks
        assert "core/button" in settings.allowed_blocks

    def test_filter_result_does_not_leak_into_defaults(self):
        hooks = HookRegistry()
        hooks.add_filter(Hook.SETTINGS, lambda s: {**s, "allowedBlocks": []})

        assert get_editor_settings(hooks).allowed_blocks == []
        assert get_editor_settings().allowed_blocks == list(DEFAULT_ALLOWED_BLOCKS)

    def test_invalid_filter_result_keeps_defaults(self):
        hooks = HookRegistry()
        hooks.add_filter(Hook.SETTINGS, lambda s: None)

        assert get_editor_settings(hooks) == EditorSettings()


class TestBlockAttributeSchema:
    """Tests for the attributes the editor adds to block types."""

    def test_allowed_block_gets_both_attributes(self):
        schema = block_attribute_schema("core/button")

        assert schema == {
            "ariaHidden": {"type": "boolean", "default": False},
            "ariaLabel": {"type": "string", "default": ""},
        }

    def test_block_outside_allowed_list(self):
        assert block_attribute_schema("core/paragraph") == {}

    def test_native_label_support_skips_label(self):
        schema = block_attribute_schema("core/button", {"ariaLabel": True})

        assert "ariaLabel" not in schema
        assert "ariaHidden" in schema

    def test_group_native_support_is_ignored(self):
        schema = block_attribute_schema("core/group", {"ariaLabel": True})

        assert "ariaLabel" in schema

    @pytest.mark.parametrize("supports", [None, {}, {"ariaLabel": False}, {"ariaLabel": "yes"}])
    def test_without_native_support(self, supports):
        assert "ariaLabel" in block_attribute_schema("core/image", supports)

    def test_custom_allowed_blocks(self):
        settings = EditorSettings(allowed_blocks=["core/heading"])

        assert block_attribute_schema("core/heading", settings=settings)
        assert block_attribute_schema("core/button", settings=settings) == {}
