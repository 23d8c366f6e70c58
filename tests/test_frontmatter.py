"""Tests for codekit.frontmatter module."""

import pytest

from codekit.exceptions import FrontmatterError
from codekit.frontmatter import (
    parse_markdown_with_frontmatter,
    serialize_markdown_with_frontmatter,
    validate_agent_frontmatter,
    validate_command_frontmatter,
    validate_skill_frontmatter,
)


class TestParseMarkdown:
    """Tests for parse_markdown_with_frontmatter."""

    def test_splits_header_and_body(self):
        """Header keys are parsed and the body is stripped."""
        parsed = parse_markdown_with_frontmatter(
            "---\nname: foo\ndescription: Does foo\n---\n\n# Foo\n\nBody\n"
        )
        assert parsed.frontmatter == {"name": "foo", "description": "Does foo"}
        assert parsed.content == "# Foo\n\nBody"

    def test_keeps_unknown_keys(self):
        """Extension fields survive parsing."""
        parsed = parse_markdown_with_frontmatter(
            "---\nname: foo\nmetadata:\n  tags: a, b\nmodel: opus\n---\nBody"
        )
        assert parsed.frontmatter["metadata"] == {"tags": "a, b"}
        assert parsed.frontmatter["model"] == "opus"

    def test_windows_line_endings(self):
        """CRLF documents parse like LF documents."""
        parsed = parse_markdown_with_frontmatter("---\r\nname: foo\r\n---\r\nBody\r\n")
        assert parsed.frontmatter == {"name": "foo"}
        assert parsed.content == "Body"

    def test_header_without_body(self):
        """A document may end right after the header."""
        parsed = parse_markdown_with_frontmatter("---\nname: foo\n---")
        assert parsed.frontmatter == {"name": "foo"}
        assert parsed.content == ""

    def test_missing_header_raises(self):
        """Plain markdown is rejected."""
        with pytest.raises(FrontmatterError, match="missing YAML frontmatter"):
            parse_markdown_with_frontmatter("# Just a heading\n")

    def test_invalid_yaml_raises(self):
        """Broken YAML is reported as a header error."""
        with pytest.raises(FrontmatterError, match="Failed to parse"):
            parse_markdown_with_frontmatter("---\nname: [unclosed\n---\nBody")

    def test_non_mapping_header_raises(self):
        """A YAML list is not a header block."""
        with pytest.raises(FrontmatterError, match="mapping"):
            parse_markdown_with_frontmatter("---\n- a\n- b\n---\nBody")

    def test_serialize_then_parse(self):
        """Serialized documents parse back to the same header and body."""
        text = serialize_markdown_with_frontmatter({"name": "foo", "tags": ["x"]}, "Body")
        parsed = parse_markdown_with_frontmatter(text)
        assert parsed.frontmatter == {"name": "foo", "tags": ["x"]}
        assert parsed.content == "Body"


class TestValidation:
    """Tests for the per-kind header validators."""

    def test_valid_skill(self):
        result = validate_skill_frontmatter({"name": "pdf-tools", "description": "PDF helpers"})
        assert result.valid
        assert result.errors == []

    @pytest.mark.parametrize(
        "name,fragment",
        [
            ("a" * 65, "64 characters"),
            ("PDF_Tools", "lowercase"),
            ("my-claude-skill", "reserved"),
            ("anthropic-tools", "reserved"),
        ],
    )
    def test_invalid_skill_names(self, name, fragment):
        """Skill names are length-limited, lowercase and avoid reserved words."""
        result = validate_skill_frontmatter({"name": name, "description": "x"})
        assert not result.valid
        assert any(fragment in error for error in result.errors)

    def test_skill_name_at_limit_is_valid(self):
        result = validate_skill_frontmatter({"name": "a" * 64, "description": "x"})
        assert result.valid

    def test_skill_description_limit(self):
        result = validate_skill_frontmatter({"name": "foo", "description": "x" * 1025})
        assert not result.valid
        assert any("1024" in error for error in result.errors)

    def test_skill_missing_fields(self):
        result = validate_skill_frontmatter({})
        assert "Missing required field: name" in result.errors
        assert "Missing required field: description" in result.errors

    def test_agent_requires_name_and_description(self):
        assert validate_agent_frontmatter({"name": "a", "description": "b"}).valid
        result = validate_agent_frontmatter({"description": "b"})
        assert result.errors == ["Missing required field: name"]

    def test_agent_name_must_be_string(self):
        result = validate_agent_frontmatter({"name": 42, "description": "b"})
        assert not result.valid

    def test_command_requires_only_description(self):
        assert validate_command_frontmatter({"description": "Commit"}).valid
        assert not validate_command_frontmatter({"name": "commit"}).valid
