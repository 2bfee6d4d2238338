"""Tests for the field group builder."""

import pytest

from acf.builder import FieldsBuilder, LocationBuilder, labelize
from acf.errors import FieldNameCollisionError


@pytest.fixture
def builder():
    speakers = FieldsBuilder("speakers").add_text("name").add_image("photo")
    return (
        FieldsBuilder("event_details")
        .add_text("venue", required=1)
        .add_select("format", ["online", "in_person"])
        .add_repeater("speakers", speakers, max=5)
    )


class TestLabelize:
    def test_underscores(self):
        assert labelize("event_date") == "Event Date"

    def test_dashes(self):
        assert labelize("call-to-action") == "Call To Action"


class TestGroupSettings:
    def test_defaults(self, builder):
        config = builder.build()
        assert config["key"] == "group_event_details"
        assert config["title"] == "Event Details"
        assert config["menu_order"] == 0
        assert config["position"] == "normal"
        assert config["location"] == []

    def test_constructor_overrides(self):
        config = FieldsBuilder("faq", {"title": "FAQ", "style": "seamless"}).build()
        assert config["title"] == "FAQ"
        assert config["style"] == "seamless"

    def test_get_set(self, builder):
        assert builder.get_group_config("position") is None
        assert builder.get_group_config("position", "normal") == "normal"
        builder.set_group_config("position", "side")
        assert builder.get_group_config("position") == "side"
        assert builder.build()["position"] == "side"

    def test_build_does_not_share_state(self, builder):
        first = builder.build()
        first["fields"].clear()
        first["hide_on_screen"].append("excerpt")
        second = builder.build()
        assert len(second["fields"]) == 3
        assert second["hide_on_screen"] == []


class TestFields:
    def test_field_entries(self, builder):
        venue, fmt, speakers = builder.build()["fields"]

        assert venue == {
            "key": "field_event_details_venue",
            "label": "Venue",
            "name": "venue",
            "type": "text",
            "required": 1,
        }
        assert fmt["choices"] == {"online": "online", "in_person": "in_person"}
        assert speakers["type"] == "repeater"
        assert speakers["max"] == 5
        assert speakers["layout"] == "block"

    def test_repeater_sub_fields(self, builder):
        speakers = builder.build()["fields"][2]
        name, photo = speakers["sub_fields"]
        assert name["key"] == "field_event_details_speakers_name"
        assert photo["type"] == "image"
        assert photo["return_format"] == "array"

    def test_keys_follow_group_key(self, builder):
        builder.set_group_config("key", "group_event_details_post_type_event")
        speakers = builder.build()["fields"][2]
        assert speakers["key"] == "field_event_details_post_type_event_speakers"
        assert speakers["sub_fields"][0]["key"] == (
            "field_event_details_post_type_event_speakers_name"
        )

    def test_custom_label(self):
        field = FieldsBuilder("x").add_text("cta", label="Call to action").build()["fields"][0]
        assert field["label"] == "Call to action"

    def test_select_dict_choices(self):
        field = FieldsBuilder("x").add_select("size", {"s": "Small"}).build()["fields"][0]
        assert field["choices"] == {"s": "Small"}

    def test_group_field(self):
        address = FieldsBuilder("address").add_text("street").add_text("city")
        field = FieldsBuilder("venue").add_group("address", address).build()["fields"][0]
        assert field["type"] == "group"
        assert [f["key"] for f in field["sub_fields"]] == [
            "field_venue_address_street",
            "field_venue_address_city",
        ]

    def test_shortcut_types(self):
        builder = (
            FieldsBuilder("x")
            .add_textarea("a")
            .add_wysiwyg("b")
            .add_number("c")
            .add_email("d")
            .add_url("e")
            .add_link("f")
            .add_true_false("g")
        )
        types = [f["type"] for f in builder.build()["fields"]]
        assert types == ["textarea", "wysiwyg", "number", "email", "url", "link", "true_false"]

    def test_duplicate_name_raises(self):
        builder = FieldsBuilder("x").add_text("title")
        with pytest.raises(FieldNameCollisionError, match="title"):
            builder.add_textarea("title")

    def test_add_fields(self):
        common = FieldsBuilder("common").add_text("section_id")
        builder = FieldsBuilder("hero").add_fields(common).add_text("heading")
        assert builder.field_names == ["section_id", "heading"]
        assert builder.build()["fields"][0]["key"] == "field_hero_section_id"

    def test_add_fields_collision(self):
        common = FieldsBuilder("common").add_text("heading")
        with pytest.raises(FieldNameCollisionError):
            FieldsBuilder("hero").add_text("heading").add_fields(common)


class TestFlexibleContent:
    def test_layouts_keyed_by_layout_key(self):
        hero = FieldsBuilder("hero").add_text("title")
        quote = FieldsBuilder("quote").add_textarea("text")
        field = (
            FieldsBuilder("page")
            .add_flexible_content("sections", [hero, quote])
            .build()["fields"][0]
        )

        assert field["type"] == "flexible_content"
        assert list(field["layouts"]) == [
            "layout_page_sections_hero",
            "layout_page_sections_quote",
        ]
        hero_layout = field["layouts"]["layout_page_sections_hero"]
        assert hero_layout["name"] == "hero"
        assert hero_layout["label"] == "Hero"
        assert hero_layout["sub_fields"][0]["key"] == "field_page_sections_hero_title"

    def test_named_layouts(self):
        block = FieldsBuilder("anything").add_text("title")
        field = (
            FieldsBuilder("page")
            .add_flexible_content("sections", {"banner": block})
            .build()["fields"][0]
        )
        assert field["layouts"]["layout_page_sections_banner"]["name"] == "banner"


class TestLocation:
    def test_set_location(self):
        builder = FieldsBuilder("x")
        location = builder.set_location("post_type", "==", "event")
        assert isinstance(location, LocationBuilder)
        assert builder.get_location() is location
        assert builder.build()["location"] == [
            [{"param": "post_type", "operator": "==", "value": "event"}],
        ]

    def test_no_location(self):
        assert FieldsBuilder("x").get_location() is None

    def test_and_or(self):
        location = (
            LocationBuilder("post_type", "==", "event")
            .and_("post_status", "!=", "draft")
            .or_("options_page", "==", "events")
        )
        assert location.build() == [
            [
                {"param": "post_type", "operator": "==", "value": "event"},
                {"param": "post_status", "operator": "!=", "value": "draft"},
            ],
            [{"param": "options_page", "operator": "==", "value": "events"}],
        ]
