#!/usr/bin/env python3
"""Tests for URI template parsing, matching and expansion."""

import pytest

from base_mcp_server.uri_template import UriTemplate


class TestMatching:
    def test_required_placeholder_captures_value(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.match("greeting://Alice") == {"name": "Alice"}

    def test_empty_required_placeholder_does_not_match(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.match("greeting://") is None

    def test_placeholder_stops_at_slash(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.match("greeting://Alice/Bob") is None

    def test_literal_must_match_exactly(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.match("greetings://Alice") is None
        assert template.match("xgreeting://Alice") is None

    def test_literal_regex_characters_are_escaped(self):
        template = UriTemplate.parse("file://{stem}.txt")
        assert template.match("file://notes.txt") == {"stem": "notes"}
        assert template.match("file://notesXtxt") is None

    def test_values_are_percent_decoded(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.match("greeting://Hello%20World") == {"name": "Hello World"}

    def test_multiple_placeholders(self):
        template = UriTemplate.parse("users://{user_id}/posts/{post_id}")
        assert template.match("users://42/posts/7") == {"user_id": "42", "post_id": "7"}


class TestOptionalPlaceholders:
    def test_optional_trailing_segment_present(self):
        template = UriTemplate.parse("users://{user_id}/posts/{post_id?}")
        assert template.match("users://1/posts/7") == {"user_id": "1", "post_id": "7"}

    def test_optional_trailing_segment_absent_is_omitted(self):
        template = UriTemplate.parse("users://{user_id}/posts/{post_id?}")
        assert template.match("users://1/posts") == {"user_id": "1"}
        assert template.match("users://1/posts/") == {"user_id": "1"}

    def test_optional_without_slash(self):
        template = UriTemplate.parse("logs://app{suffix?}")
        assert template.match("logs://app") == {}
        assert template.match("logs://app-2024") == {"suffix": "-2024"}


class TestParsing:
    def test_fixed_template(self):
        template = UriTemplate.parse("config://settings")
        assert template.is_fixed
        assert template.variable_names == []

    def test_variable_names_in_order(self):
        template = UriTemplate.parse("users://{user_id}/posts/{post_id?}")
        assert not template.is_fixed
        assert template.variable_names == ["user_id", "post_id"]

    def test_str_returns_raw_template(self):
        assert str(UriTemplate.parse("greeting://{name}")) == "greeting://{name}"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "broken://{name",
            "broken://name}",
            "dup://{x}/{x}",
            "adjacent://{x}{y}",
            "order://{x?}/{y}",
        ],
    )
    def test_invalid_templates_rejected(self, raw):
        with pytest.raises(ValueError):
            UriTemplate.parse(raw)


class TestExpand:
    def test_expand_required(self):
        template = UriTemplate.parse("greeting://{name}")
        assert template.expand(name="Alice") == "greeting://Alice"

    def test_expand_drops_absent_optional_with_its_slash(self):
        template = UriTemplate.parse("users://{user_id}/posts/{post_id?}")
        assert template.expand(user_id="1") == "users://1/posts"
        assert template.expand(user_id="1", post_id="7") == "users://1/posts/7"

    def test_expand_missing_required_raises(self):
        template = UriTemplate.parse("greeting://{name}")
        with pytest.raises(KeyError):
            template.expand()
