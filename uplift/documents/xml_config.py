"""Structural edits of component configuration files (``*-meta.xml``).

Only the enrichment-control element under the root is ever changed::

    <LightningComponentBundle xmlns="http://soap.sforce.com/2006/04/metadata">
        <apiVersion>62.0</apiVersion>
        <isExposed>true</isExposed>
        <ai>
            <skipUplift>false</skipUplift>
            <description>...</description>
            <score>0.9</score>
        </ai>
    </LightningComponentBundle>

Edits are spliced into the original text, so everything outside the
control fields (prolog comments, the declaration, attribute quoting,
self-closing tags) is kept byte for byte.  The only other change on
write is collapsing runs of blank lines.  New elements are indented to
match their siblings.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional
from xml.parsers import expat
from xml.sax.saxutils import escape

from ..core.exceptions import DocumentError

SKIP_FIELD = "skipUplift"
DESCRIPTION_FIELD = "description"
SCORE_FIELD = "score"
CONTROL_FIELDS = (SKIP_FIELD, DESCRIPTION_FIELD, SCORE_FIELD)

DEFAULT_INDENT = "    "

_EXCESS_BLANK_LINES_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_TRAILING_WS_RE = re.compile(rb"[ \t\r\n]*$")


def normalize_blank_lines(text: str) -> str:
    """Collapse every run of two or more blank lines into a single one."""
    return _EXCESS_BLANK_LINES_RE.sub("\n\n", text)


def is_truthy_flag(value: object) -> bool:
    """True for a native ``True`` or the string ``"true"`` in any case."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


@dataclass(frozen=True)
class ControlFields:
    """Current values of the enrichment-control element (raw text)."""

    skip_uplift: Optional[str] = None
    description: Optional[str] = None
    score: Optional[str] = None

    @property
    def opted_out(self) -> bool:
        return is_truthy_flag(self.skip_uplift)


@dataclass(frozen=True)
class _Span:
    """Byte offsets of one element in the encoded document.

    ``inner_start``/``inner_end`` bound the content between the start and
    end tags; for a self-closing element both equal ``end``.
    """

    start: int
    inner_start: int
    inner_end: int
    end: int
    empty: bool


class ConfigDocument:
    """A parsed configuration file that can be edited and serialised back."""

    def __init__(self, text: str, root: ET.Element, namespaces: Optional[dict[str, str]] = None):
        self._text = text
        self._root = root
        self._namespaces = dict(namespaces or {})

    # -- parsing -----------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> ConfigDocument:
        """Parse *text*.

        Raises:
            DocumentError: If *text* is empty or not well-formed XML.
        """
        if not text or not text.strip():
            raise DocumentError("Configuration document is empty")

        namespaces: dict[str, str] = {}
        try:
            ns_parser = ET.XMLPullParser(events=("start-ns",))
            ns_parser.feed(text)
            for _event, (prefix, uri) in ns_parser.read_events():
                namespaces.setdefault(prefix, uri)
            ns_parser.close()

            root = ET.fromstring(text, parser=ET.XMLParser(target=ET.TreeBuilder(insert_comments=True)))
        except ET.ParseError as exc:
            raise DocumentError(f"Malformed configuration document: {exc}") from exc

        return cls(text, root, namespaces)

    # -- accessors ---------------------------------------------------------

    @property
    def root(self) -> ET.Element:
        return self._root

    @property
    def default_namespace(self) -> Optional[str]:
        return self._namespaces.get("")

    def _qname(self, tag: str) -> str:
        ns = self.default_namespace
        return f"{{{ns}}}{tag}" if ns else tag

    def find_control(self, control_tag: str) -> Optional[ET.Element]:
        return self._root.find(self._qname(control_tag))

    def get_control(self, control_tag: str) -> Optional[ControlFields]:
        """Return the control element's fields, or ``None`` if it is absent."""
        control = self.find_control(control_tag)
        if control is None:
            return None

        def text_of(field: str) -> Optional[str]:
            child = control.find(self._qname(field))
            return child.text if child is not None else None

        return ControlFields(
            skip_uplift=text_of(SKIP_FIELD),
            description=text_of(DESCRIPTION_FIELD),
            score=text_of(SCORE_FIELD),
        )

    # -- editing -----------------------------------------------------------

    def set_control(
        self,
        control_tag: str,
        skip_uplift: bool,
        description: str,
        score: Optional[str],
    ) -> None:
        """Write the control fields, creating elements as needed.

        A ``score`` of ``None`` leaves any existing score element as it is.
        """
        values = {
            SKIP_FIELD: "true" if skip_uplift else "false",
            DESCRIPTION_FIELD: description,
        }
        if score is not None:
            values[SCORE_FIELD] = score

        data = self._text.encode("utf-8")
        root, control, fields = _locate(data, control_tag)
        unit = self._indent_unit()
        edits: list[tuple[int, int, bytes]] = []

        if control is None:
            block = _control_block(control_tag, values, unit)
            edits.append(_insert_child(data, root, block, unit, depth=0, tag=_root_tag(data, root)))
        elif control.empty:
            edits.append((control.start, control.end, _control_block(control_tag, values, unit).encode("utf-8")))
        else:
            missing = []
            for field, value in values.items():
                span = fields.get(field)
                if span is None:
                    missing.append(_element(field, value))
                elif span.empty:
                    edits.append((span.start, span.end, _element(field, value).encode("utf-8")))
                else:
                    edits.append((span.inner_start, span.inner_end, escape(value).encode("utf-8")))
            if missing:
                edits.append(_insert_children(data, control, missing, unit, depth=1))

        for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
            data = data[:start] + replacement + data[end:]

        updated = data.decode("utf-8")
        reparsed = ConfigDocument.parse(updated)
        self._text = updated
        self._root = reparsed._root

    def _indent_unit(self) -> str:
        text = self._root.text
        if text and not text.strip() and "\n" in text:
            unit = text.rsplit("\n", 1)[1]
            if unit:
                return unit
        return DEFAULT_INDENT

    # -- serialisation -----------------------------------------------------

    def to_string(self) -> str:
        """Return the document text, collapsing excess blank lines."""
        return normalize_blank_lines(self._text)


# ---------------------------------------------------------------------------
# Span location
# ---------------------------------------------------------------------------


def _tag_end(data: bytes, pos: int) -> int:
    """Offset just past the tag starting at *pos* (quotes may hide ``>``)."""
    quote = None
    for idx in range(pos, len(data)):
        char = data[idx:idx + 1]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in (b'"', b"'"):
            quote = char
        elif char == b">":
            return idx + 1
    raise DocumentError("Unterminated tag in configuration document")


def _local(name: str) -> str:
    return name.rpartition(":")[2]


def _locate(data: bytes, control_tag: str) -> tuple[_Span, Optional[_Span], dict[str, _Span]]:
    """Find the root, the first control element and its field children."""
    parser = expat.ParserCreate("utf-8")
    stack: list[tuple[str, int, int, bool]] = []
    found: dict[str, object] = {"root": None, "control": None}
    children: dict[int, dict[str, _Span]] = {}

    def on_start(name, _attrs):
        pos = parser.CurrentByteIndex
        tag_end = _tag_end(data, pos)
        stack.append((name, pos, tag_end, data[tag_end - 2:tag_end] == b"/>"))

    def on_end(_name):
        name, pos, tag_end, empty = stack.pop()
        if empty:
            span = _Span(pos, tag_end, tag_end, tag_end, True)
        else:
            close = parser.CurrentByteIndex
            span = _Span(pos, tag_end, close, _tag_end(data, close), False)

        depth = len(stack)
        if depth == 0:
            found["root"] = span
        elif depth == 1 and _local(name) == control_tag and found["control"] is None:
            found["control"] = span
        elif depth == 2 and _local(stack[1][0]) == control_tag and _local(name) in CONTROL_FIELDS:
            children.setdefault(stack[1][1], {}).setdefault(_local(name), span)

    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    try:
        parser.Parse(data, True)
    except expat.ExpatError as exc:
        raise DocumentError(f"Malformed configuration document: {exc}") from exc

    control = found["control"]
    fields = children.get(control.start, {}) if control is not None else {}
    return found["root"], control, fields


def _root_tag(data: bytes, root: _Span) -> str:
    match = re.match(rb"<([^\s/>]+)", data[root.start:root.inner_start])
    return match.group(1).decode("utf-8")


# ---------------------------------------------------------------------------
# Text builders
# ---------------------------------------------------------------------------


def _element(tag: str, value: str) -> str:
    return f"<{tag}>{escape(value)}</{tag}>"


def _control_block(control_tag: str, values: dict[str, str], unit: str) -> str:
    lines = [f"<{control_tag}>"]
    lines += [unit * 2 + _element(field, value) for field, value in values.items()]
    lines.append(unit + f"</{control_tag}>")
    return "\n".join(lines)


def _insert_children(data: bytes, parent: _Span, children: list[str], unit: str, depth: int) -> tuple[int, int, bytes]:
    """Edit that appends *children* to the non-empty element *parent*."""
    # new children go after the last content, before the closing indentation
    trailing = _TRAILING_WS_RE.search(data, parent.inner_start, parent.inner_end)
    at = trailing.start()
    inner = "\n" + unit * (depth + 1)
    text = "".join(inner + child for child in children)
    if b"\n" not in data[at:parent.inner_end]:
        text += "\n" + unit * depth
    return at, at, text.encode("utf-8")


def _insert_child(data: bytes, root: _Span, block: str, unit: str, depth: int, tag: str) -> tuple[int, int, bytes]:
    if root.empty:
        # <Root/> becomes <Root>...</Root>
        opening = data[root.start:root.end - 2].rstrip() + b">"
        text = "\n" + unit * (depth + 1) + block + "\n" + unit * depth + f"</{tag}>"
        return root.start, root.end, opening + text.encode("utf-8")
    return _insert_children(data, root, [block], unit, depth)
