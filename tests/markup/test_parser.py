"""Tests for the markup parser."""

import pytest

from gpx_altitude.exceptions import ParseError
from gpx_altitude.markup.parser import parse
from gpx_altitude.markup.tree import TEXT_FIELD, Element, MarkupTree, RepeatedGroup, Scalar


class TestParse:
    def test_root_element_is_a_field_of_the_document(self, sample_tree: MarkupTree) -> None:
        assert list(sample_tree.root.fields) == ["gpx"]
        assert isinstance(sample_tree.root.fields["gpx"], Element)

    def test_keeps_attribute_and_child_order(self, sample_tree: MarkupTree) -> None:
        gpx = sample_tree.root.fields["gpx"]

        assert list(gpx.fields) == [
            "version",
            "creator",
            "xmlns",
            "xmlns:gpxtpx",
            "metadata",
            "wpt",
            "trk",
        ]
        assert gpx.attributes == {"version", "creator", "xmlns", "xmlns:gpxtpx"}

    def test_attributes_and_children_share_one_namespace(self, sample_tree: MarkupTree) -> None:
        wpt = sample_tree.root.fields["gpx"].fields["wpt"]

        assert wpt.scalar("lat") == "45.8326"
        assert wpt.scalar("name") == "Summit"
        assert "lat" in wpt.attributes
        assert "name" not in wpt.attributes

    def test_groups_repeated_siblings_in_source_order(self, sample_tree: MarkupTree) -> None:
        trkseg = sample_tree.root.fields["gpx"].fields["trk"].fields["trkseg"]
        group = trkseg.fields["trkpt"]

        assert isinstance(group, RepeatedGroup)
        assert [item.scalar("lat") for item in group.items] == [
            "45.9237",
            "45.92400",
            "not-a-number",
            "45.9250",
        ]

    def test_leaf_elements_become_scalars(self, sample_tree: MarkupTree) -> None:
        metadata = sample_tree.root.fields["gpx"].fields["metadata"]

        assert metadata.fields["name"] == Scalar("Morning & evening ride")

    def test_keeps_prefixed_names_verbatim(self, sample_tree: MarkupTree) -> None:
        trkpt = sample_tree.root.fields["gpx"].fields["trk"].fields["trkseg"].fields["trkpt"].items[1]
        extension = trkpt.fields["extensions"].fields["gpxtpx:TrackPointExtension"]

        assert extension.scalar("gpxtpx:hr") == "128"

    def test_empty_element_becomes_empty_scalar(self) -> None:
        tree = parse("<gpx><name/></gpx>")

        assert tree.root.fields["gpx"].fields["name"] == Scalar("")

    def test_text_next_to_children_is_kept(self) -> None:
        tree = parse('<desc lang="en">Hello<b>x</b></desc>')

        desc = tree.root.fields["desc"]
        assert desc.fields[TEXT_FIELD] == Scalar("Hello")

    def test_records_xml_declaration(self, sample_tree: MarkupTree) -> None:
        assert sample_tree.declaration is not None
        assert sample_tree.declaration.version == "1.0"

    def test_no_declaration_when_absent(self) -> None:
        assert parse("<gpx/>").declaration is None

    def test_registers_elements_in_document_order(self, sample_tree: MarkupTree) -> None:
        handles = [element.handle for element in sample_tree.elements]

        assert handles == list(range(len(sample_tree)))
        assert sample_tree.element(1) is sample_tree.root.fields["gpx"]


class TestParseErrors:
    def test_rejects_unterminated_tag(self) -> None:
        with pytest.raises(ParseError, match="line"):
            parse("<gpx><trk></gpx>")

    def test_rejects_empty_input(self) -> None:
        with pytest.raises(ParseError):
            parse("")

    def test_rejects_invalid_character_data(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("<gpx>a & b</gpx>")

        assert exc_info.value.code == "PARSE_ERROR"
        assert exc_info.value.line == 1

    def test_rejects_bytes_that_do_not_match_the_encoding(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(b"<gpx><name>\xff</name></gpx>")

        assert exc_info.value.code == "PARSE_ERROR"


class TestParseBytes:
    def test_honours_declared_encoding(self) -> None:
        tree = parse(b'<?xml version="1.0" encoding="ISO-8859-1"?><gpx><name>Caf\xe9</name></gpx>')

        assert tree.root.fields["gpx"].fields["name"] == Scalar("Café")

    def test_defaults_to_utf8(self) -> None:
        tree = parse("<gpx><name>Café</name></gpx>".encode("utf-8"))

        assert tree.root.fields["gpx"].fields["name"] == Scalar("Café")
