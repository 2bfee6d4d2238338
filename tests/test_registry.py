"""Tests for the field group registry and its exports."""

import json

import pytest

from acf.registry import Registry


@pytest.fixture
def registry():
    registry = Registry()
    registry.add_local_field_group({"key": "group_b", "title": "B", "fields": []})
    registry.add_local_field_group({"key": "group_a", "title": "A", "fields": [{"key": "field_a_x"}]})
    return registry


class TestRegistry:
    def test_lookup(self, registry):
        assert registry.is_local_field_group("group_a")
        assert not registry.is_local_field_group("group_c")
        assert registry.get_field_group("group_b")["title"] == "B"
        assert registry.get_field_group("group_c") is None

    def test_reregister_replaces(self, registry, caplog):
        registry.add_local_field_group({"key": "group_a", "title": "A2", "fields": []})
        assert registry.get_field_group("group_a")["title"] == "A2"
        assert len(registry.field_groups) == 2
        assert "group_a registered again" in caplog.text

    def test_clear(self, registry):
        registry.add_options_page({"menu_slug": "settings", "page_title": "Settings"})
        registry.clear()
        assert registry.field_groups == {}
        assert registry.options_pages == {}


class TestExport:
    def test_export_sorted_by_key(self, registry):
        assert [g["key"] for g in registry.export()] == ["group_a", "group_b"]

    def test_export_is_json_serializable(self, registry):
        assert json.loads(json.dumps(registry.export()))[0]["fields"] == [{"key": "field_a_x"}]

    def test_write_local_json(self, registry, tmp_path):
        target = tmp_path / "acf-json"
        written = registry.write_local_json(target)

        assert sorted(p.name for p in written) == ["group_a.json", "group_b.json"]
        with (target / "group_a.json").open(encoding="utf-8") as f:
            assert json.load(f)["title"] == "A"

    def test_write_empty(self, tmp_path):
        assert Registry().write_local_json(tmp_path) == []
