"""
Minimal HTML start-tag processor.

Walks the start tags of a markup fragment with a forward-only cursor and
edits attributes of the tag under the cursor. Only the text of edited tags
changes; every other character of the input is preserved, so untouched
markup round-trips exactly.
"""

import html
import re
from dataclasses import dataclass
from typing import Optional, List, Union

from ..utils.logger import get_logger

logger = get_logger(__name__)

_TOKEN_RE = re.compile(
    r"""
    <!--.*?(?:-->|\Z)                       # comment
    | <![^>]*>?                             # doctype, CDATA
    | <\?[^>]*>?                            # processing instruction
    | </[^>]*>?                             # closing tag
    | <(?P<name>[a-zA-Z][^\s/>]*)           # start tag
      (?P<attrs>(?:[^>"']|"[^"]*"|'[^']*')*)
      >
    """,
    re.DOTALL | re.VERBOSE,
)

_ATTR_RE = re.compile(
    r"""(?P<name>[^\s"'>/=]+)(?:\s*=\s*(?P<value>"[^"]*"|'[^']*'|[^\s"'=<>`]+))?"""
)

# Elements whose content is raw text and must not be scanned for tags
RAW_TEXT_ELEMENTS = ("script", "style", "textarea", "title")

AttributeValue = Union[str, bool]


@dataclass
class _Attribute:
    name: str
    start: int  # offsets relative to the tag start
    end: int
    value: Optional[str]  # raw (still escaped, quotes stripped); None if boolean


@dataclass
class _Tag:
    name: str
    start: int
    end: int
    name_end: int  # offset, relative to start, just past the tag name
    attributes: List[_Attribute]


def _parse_tag(text: str) -> Optional[_Tag]:
    match = _TOKEN_RE.match(text)
    if not match or not match.group("name"):
        return None

    attributes: List[_Attribute] = []
    seen = set()
    offset = match.start("attrs")
    for attr in _ATTR_RE.finditer(match.group("attrs")):
        name = attr.group("name").lower()
        if name in seen:
            continue
        seen.add(name)
        value = attr.group("value")
        if value is not None and value[:1] in ("'", '"'):
            value = value[1:-1]
        attributes.append(
            _Attribute(name, offset + attr.start(), offset + attr.end(), value)
        )

    return _Tag(
        name=match.group("name").lower(),
        start=0,
        end=match.end(),
        name_end=match.end("name"),
        attributes=attributes,
    )


def _render_attribute(name: str, value: AttributeValue) -> str:
    if value is True:
        return name
    return f'{name}="{html.escape(str(value), quote=True)}"'


class HTMLTagProcessor:
    """Find start tags in a markup fragment and modify their attributes."""

    def __init__(self, markup: str):
        self._html = markup
        self._pos = 0
        self._tag: Optional[_Tag] = None

    def next_tag(self, tag_name: Optional[str] = None) -> bool:
        """
        Move the cursor to the next start tag.

        Args:
            tag_name: Only stop on tags with this name (case-insensitive)

        Returns:
            True if a matching tag was found
        """
        wanted = tag_name.lower() if tag_name else None
        self._tag = None

        while True:
            match = _TOKEN_RE.search(self._html, self._pos)
            if not match:
                self._pos = len(self._html)
                return False

            self._pos = match.end()
            if not match.group("name"):
                continue

            tag = _parse_tag(self._html[match.start():match.end()])
            if tag is None:
                continue
            tag.start = match.start()
            tag.end = match.end()

            if tag.name in RAW_TEXT_ELEMENTS:
                self._skip_raw_text(tag.name)

            if wanted is None or tag.name == wanted:
                self._tag = tag
                return True

    def _skip_raw_text(self, name: str) -> None:
        closer = re.compile(rf"</{re.escape(name)}[\s/>]", re.IGNORECASE)
        match = closer.search(self._html, self._pos)
        self._pos = match.start() if match else len(self._html)

    def get_tag(self) -> Optional[str]:
        """Lower-cased name of the tag under the cursor."""
        return self._tag.name if self._tag else None

    def get_attribute(self, name: str) -> Optional[AttributeValue]:
        """
        Read an attribute of the current tag.

        Returns:
            The unescaped value, True for a boolean attribute, or None
        """
        attribute = self._find_attribute(name)
        if attribute is None:
            return None
        if attribute.value is None:
            return True
        return html.unescape(attribute.value)

    def set_attribute(self, name: str, value: AttributeValue) -> bool:
        """
        Set an attribute on the current tag, replacing any existing value.

        Returns:
            False when there is no current tag
        """
        if self._tag is None:
            return False

        name = name.lower()
        text = self._tag_text()
        rendered = _render_attribute(name, value)
        existing = self._find_attribute(name)

        if existing is not None:
            text = text[:existing.start] + rendered + text[existing.end:]
        else:
            insert_at = self._tag.name_end
            text = text[:insert_at] + " " + rendered + text[insert_at:]

        self._replace_tag_text(text)
        return True

    def remove_attribute(self, name: str) -> bool:
        """
        Remove an attribute from the current tag.

        Returns:
            True if the attribute was present and removed
        """
        existing = self._find_attribute(name)
        if existing is None:
            return False

        text = self._tag_text()
        start = existing.start
        while start > 0 and text[start - 1].isspace():
            start -= 1
        self._replace_tag_text(text[:start] + text[existing.end:])
        return True

    def get_updated_html(self) -> str:
        """The markup with every edit made so far applied."""
        return self._html

    def _find_attribute(self, name: str) -> Optional[_Attribute]:
        if self._tag is None:
            return None
        name = name.lower()
        for attribute in self._tag.attributes:
            if attribute.name == name:
                return attribute
        return None

    def _tag_text(self) -> str:
        return self._html[self._tag.start:self._tag.end]

    def _replace_tag_text(self, text: str) -> None:
        tag = _parse_tag(text)
        if tag is None:
            # Edits are built from escaped values; this means a bug above.
            raise ValueError(f"Edit produced an invalid tag: {text!r}")

        start, old_end = self._tag.start, self._tag.end
        self._html = self._html[:start] + text + self._html[old_end:]
        tag.start = start
        tag.end = start + len(text)
        self._pos += tag.end - old_end
        self._tag = tag
