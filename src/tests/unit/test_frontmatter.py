"""Tests for obsi.vault.frontmatter module."""

from datetime import date

from obsi.vault.frontmatter import (
    build_frontmatter,
    parse_frontmatter,
    strip_frontmatter,
)


class TestBuildFrontmatter:
    """Tests for build_frontmatter()."""

    def test_flow_style_lists_and_key_order(self):
        """Keys keep their order and lists use flow style."""
        text = build_frontmatter(
            {"created": date(2026, 1, 28), "tags": ["inbox"], "source": "obsi cli"}
        )

        assert text == (
            "---\ncreated: 2026-01-28\ntags: [inbox]\nsource: obsi cli\n---\n"
        )

    def test_unicode_kept(self):
        """Non-ASCII text is written as-is."""
        assert "café" in build_frontmatter({"title": "café"})


class TestParseFrontmatter:
    """Tests for parse_frontmatter()."""

    def test_splits_fields_and_body(self):
        """Fields and body are separated."""
        fields, body = parse_frontmatter("---\ntags: [a, b]\n---\n\n# Title\n")

        assert fields == {"tags": ["a", "b"]}
        assert body == "\n# Title\n"

    def test_no_frontmatter(self):
        """Plain notes have no fields."""
        assert parse_frontmatter("# Title\n") == ({}, "# Title\n")

    def test_unclosed_block(self):
        """An unclosed block is treated as body."""
        content = "---\ntags: [a]\n# Title\n"

        assert parse_frontmatter(content) == ({}, content)

    def test_invalid_yaml(self):
        """Invalid YAML is treated as body."""
        content = "---\ntags: [a\n---\nbody"

        assert parse_frontmatter(content) == ({}, content)

    def test_non_mapping_yaml(self):
        """A YAML list is treated as body."""
        content = "---\n- a\n- b\n---\nbody"

        assert parse_frontmatter(content) == ({}, content)

    def test_empty_block(self):
        """An empty block gives no fields."""
        assert parse_frontmatter("---\n---\nbody") == ({}, "body")

    def test_round_trip_of_built_block(self):
        """A built block parses back to the same fields."""
        fields = {"created": date(2026, 1, 28), "tags": ["daily"]}

        parsed, body = parse_frontmatter(build_frontmatter(fields) + "text")

        assert parsed == fields
        assert body == "text"


def test_strip_frontmatter():
    """Body is returned without leading blank lines."""
    assert strip_frontmatter("---\na: 1\n---\n\n# Title\n") == "# Title\n"
