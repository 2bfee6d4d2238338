"""Tests for the command line entry point."""

from __future__ import annotations

import json
import textwrap
from unittest.mock import patch

import pytest

from acf.registry import default_registry
from cli import main
from wordpress.auth import SiteConfig

DECLARATIONS = textwrap.dedent(
    """
    from acf.bindings import CustomPostType
    from acf.builder import FieldsBuilder
    from acf.field_group import FieldGroup
    from acf.options_page import OptionsPage


    class EventFields(FieldGroup):
        def configure(self, builder):
            speakers = FieldsBuilder("speakers").add_text("name")
            return builder.add_text("venue").add_repeater("speakers", speakers)


    settings = OptionsPage("Site Settings")
    settings.register()
    EventFields(CustomPostType("event")).register(order=1)
    """
)


@pytest.fixture(autouse=True)
def clean_registry():
    default_registry.clear()
    yield
    default_registry.clear()


@pytest.fixture
def declarations(tmp_path):
    path = tmp_path / "site_fields.py"
    path.write_text(DECLARATIONS)
    return path


class TestExport:
    def test_prints_export(self, declarations, capsys):
        assert main(["export", str(declarations)]) == 0

        export = json.loads(capsys.readouterr().out)
        assert [g["key"] for g in export] == ["group_event_fields_post_type_event"]
        assert export[0]["menu_order"] == 1

    def test_writes_output_file(self, declarations, tmp_path):
        output = tmp_path / "out" / "export.json"
        assert main(["export", str(declarations), "-o", str(output)]) == 0

        with output.open(encoding="utf-8") as f:
            export = json.load(f)
        assert export[0]["fields"][0]["name"] == "venue"

    def test_writes_local_json(self, declarations, tmp_path, capsys):
        target = tmp_path / "acf-json"
        assert main(["export", str(declarations), "--local-json", str(target)]) == 0

        assert (target / "group_event_fields_post_type_event.json").exists()
        assert "Wrote 1 field groups" in capsys.readouterr().out

    def test_pretty(self, declarations, capsys):
        assert main(["export", str(declarations), "--pretty"]) == 0

        out = capsys.readouterr().out
        assert "Options Pages: 1" in out
        assert "site-settings  (Site Settings)" in out
        assert "location: post_type == event" in out
        assert "speakers  [repeater]" in out
        assert "field_event_fields_post_type_event_speakers_name" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["export", str(tmp_path / "nope.py")]) == 1
        assert "Declarations file not found" in capsys.readouterr().err


@pytest.fixture
def site_config():
    return SiteConfig(
        name="testsite",
        base_url="https://www.example.com/wp",
        username="api-user",
        application_password="test pass word 1234",
    )


class TestOption:
    @patch("cli.WordPressClient")
    @patch("cli.load_site_config")
    def test_get(self, mock_load, mock_client, site_config, capsys):
        mock_load.return_value = site_config
        mock_client.return_value.get_settings.return_value = {"site-settings_color": "blue"}

        assert main(["option", "get", "testsite", "Site Settings", "color"]) == 0

        assert capsys.readouterr().out.strip() == '"blue"'
        mock_load.assert_called_once_with("testsite", config_path=None)
        mock_client.assert_called_once_with(site_config)

    @patch("cli.WordPressClient")
    @patch("cli.load_site_config")
    def test_set(self, mock_load, mock_client, site_config, capsys):
        mock_load.return_value = site_config
        mock_client.return_value.update_settings.return_value = {"site-settings_color": "red"}

        assert main(["option", "set", "testsite", "Site Settings", "color", "red"]) == 0

        mock_client.return_value.update_settings.assert_called_once_with(
            {"site-settings_color": "red"}
        )
        assert "site-settings_color = red" in capsys.readouterr().out

    @patch("cli.WordPressClient")
    @patch("cli.load_site_config")
    def test_set_not_saved(self, mock_load, mock_client, site_config, capsys):
        mock_load.return_value = site_config
        mock_client.return_value.update_settings.return_value = {}

        assert main(["option", "set", "testsite", "Site Settings", "color", "red"]) == 1
        assert "was not saved" in capsys.readouterr().err

    @patch("cli.load_site_config")
    def test_set_without_value(self, mock_load, site_config, capsys):
        mock_load.return_value = site_config
        assert main(["option", "set", "testsite", "Site Settings", "color"]) == 2

    @patch("cli.load_site_config")
    def test_unknown_site(self, mock_load, capsys):
        mock_load.side_effect = ValueError("Missing WordPress env vars")
        assert main(["option", "get", "nowhere", "Site Settings", "color"]) == 1
        assert "Missing WordPress env vars" in capsys.readouterr().err
