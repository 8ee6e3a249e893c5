#!/usr/bin/env python3
# src/base_mcp_server/uri_template.py
"""
URI templates for resource resolution.

A template is a sequence of literal and placeholder segments:

    greeting://{name}
    users://{user_id}/posts/{post_id?}

``{name}`` is required and captures a non-empty run of characters up to the
next ``/``. ``{name?}`` is optional; when it directly follows a ``/`` the slash
is optional too, so ``users://1/posts`` and ``users://1/posts/7`` both match
the second template above.
"""

import re
from dataclasses import dataclass, field
from urllib.parse import unquote

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(\?)?\}")


@dataclass(frozen=True)
class TemplateSegment:
    """One literal or placeholder piece of a template."""

    text: str
    is_placeholder: bool = False
    optional: bool = False


@dataclass(frozen=True)
class UriTemplate:
    """Compiled URI template."""

    template: str
    segments: tuple[TemplateSegment, ...] = field(repr=False)
    _pattern: re.Pattern[str] = field(repr=False, compare=False)

    @classmethod
    def parse(cls, template: str) -> "UriTemplate":
        """Split ``template`` into segments and compile its matcher.

        Raises:
            ValueError: on empty templates, duplicate or adjacent placeholders,
                or a required placeholder after an optional one.
        """
        if not template:
            raise ValueError("URI template must not be empty")

        segments: list[TemplateSegment] = []
        position = 0
        for match in _PLACEHOLDER.finditer(template):
            if match.start() > position:
                segments.append(TemplateSegment(template[position : match.start()]))
            segments.append(TemplateSegment(match.group(1), is_placeholder=True, optional=match.group(2) is not None))
            position = match.end()
        if position < len(template):
            segments.append(TemplateSegment(template[position:]))

        leftover = _PLACEHOLDER.sub("", template)
        if "{" in leftover or "}" in leftover:
            raise ValueError(f"Malformed placeholder in URI template '{template}'")

        names = [segment.text for segment in segments if segment.is_placeholder]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate placeholder in URI template '{template}'")

        seen_optional = False
        for previous, segment in zip([None, *segments], segments, strict=False):
            if not segment.is_placeholder:
                continue
            if previous is not None and previous.is_placeholder:
                raise ValueError(f"Adjacent placeholders in URI template '{template}' cannot be matched")
            if segment.optional:
                seen_optional = True
            elif seen_optional:
                raise ValueError(f"Required placeholder '{segment.text}' follows an optional one in '{template}'")

        return cls(template=template, segments=tuple(segments), _pattern=_compile(segments))

    @property
    def variable_names(self) -> list[str]:
        return [segment.text for segment in self.segments if segment.is_placeholder]

    @property
    def is_fixed(self) -> bool:
        """True when the template has no placeholders, i.e. names exactly one URI."""
        return not any(segment.is_placeholder for segment in self.segments)

    def match(self, uri: str) -> dict[str, str] | None:
        """Return placeholder captures for ``uri``, or None if it doesn't match."""
        found = self._pattern.fullmatch(uri)
        if found is None:
            return None
        return {name: unquote(value) for name, value in found.groupdict().items() if value is not None}

    def expand(self, **values: str) -> str:
        """Build a URI from placeholder values; absent optional values are dropped."""
        parts = []
        for segment in self.segments:
            if not segment.is_placeholder:
                parts.append(segment.text)
                continue
            value = values.get(segment.text)
            if value is None or value == "":
                if not segment.optional:
                    raise KeyError(segment.text)
                if parts and parts[-1].endswith("/"):
                    parts[-1] = parts[-1][:-1]
                continue
            parts.append(str(value))
        return "".join(parts)

    def __str__(self) -> str:
        return self.template


def _compile(segments: list[TemplateSegment]) -> re.Pattern[str]:
    pieces: list[str] = []
    for segment in segments:
        if not segment.is_placeholder:
            pieces.append(re.escape(segment.text))
            continue

        group = f"(?P<{segment.text}>[^/]+)"
        if not segment.optional:
            pieces.append(group)
        elif pieces and _ends_with_slash(pieces[-1]):
            # Fold the preceding slash into the optional group
            pieces[-1] = pieces[-1][: -len(re.escape("/"))]
            pieces.append(f"(?:/{group})?/?")
        else:
            pieces.append(f"{group}?")
    return re.compile("".join(pieces))


def _ends_with_slash(escaped_literal: str) -> bool:
    return escaped_literal.endswith(re.escape("/"))
