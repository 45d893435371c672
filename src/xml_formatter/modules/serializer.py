"""Canonical serializer for parsed XML documents.

The serializer walks a ``xml.dom.minidom`` document and writes it back out
using one fixed layout, so that two documents with the same content always
produce the same text:

- the XML declaration comes first, with no blank line after it
- each nesting level is indented by one indentation unit (four spaces)
- whitespace-only text is dropped, other text is trimmed and its internal
  whitespace collapsed to single spaces, and no padding is added around it
- empty elements are written as ``<name/>``, text-only elements on one line
- every newline uses the resolved line separator

Elements marked ``xml:space="preserve"`` keep their content as written.
Comment text is passed through an optional hook before it is emitted.
"""

import re
import logging
from typing import Callable, List, Optional
from xml.dom import Node

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "    "
DEFAULT_ENCODING = "UTF-8"

_XML_WHITESPACE = " \t\r\n"
_WHITESPACE_RUN = re.compile(r"[ \t\r\n]+")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_TEXT_NODES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)

CommentHook = Callable[[str], str]


def rewrite_comment_text(line_separator: str, indent: str = DEFAULT_INDENT) -> CommentHook:
    """Build a comment hook that normalizes line breaks and tabs.

    Args:
        line_separator: The separator every CR, LF or CRLF is replaced with
        indent: The string every tab character is replaced with

    Returns:
        A function taking comment text and returning the rewritten text
    """
    def rewrite(text: str) -> str:
        if not text or not text.strip():
            return text
        text = _LINE_BREAK.sub(lambda match: line_separator, text)
        return text.replace("\t", indent)

    return rewrite


def escape_text(text: str) -> str:
    """Escape character data for use in element content."""
    return (text.replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;")
                .replace("\r", "&#13;"))


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use between double quotes."""
    return (value.replace("&", "&amp;")
                 .replace("<", "&lt;")
                 .replace(">", "&gt;")
                 .replace('"', "&quot;")
                 .replace("\r", "&#13;")
                 .replace("\n", "&#10;")
                 .replace("\t", "&#9;"))


def collapse_whitespace(text: str) -> str:
    """Trim text and collapse internal XML whitespace runs to one space."""
    return _WHITESPACE_RUN.sub(" ", text.strip(_XML_WHITESPACE))


def _is_blank_text(node) -> bool:
    return node.nodeType == Node.TEXT_NODE and not node.data.strip(_XML_WHITESPACE)


class CanonicalSerializer:
    """Writes a DOM document in canonical form."""

    def __init__(
        self,
        line_separator: str,
        indent: str = DEFAULT_INDENT,
        encoding: str = DEFAULT_ENCODING,
        comment_hook: Optional[CommentHook] = None
    ):
        """Initialize a CanonicalSerializer.

        Args:
            line_separator: The separator used for every emitted newline
            indent: The string written once per nesting level
            encoding: The encoding named in the XML declaration
            comment_hook: Optional function applied to comment text before it is written
        """
        self.line_separator = line_separator
        self.indent = indent
        self.encoding = encoding
        self.comment_hook = comment_hook

    def serialize(self, document) -> str:
        """Return the canonical text of a document."""
        out: List[str] = [self._declaration(document)]
        for node in document.childNodes:
            self._write_node(node, 0, out)
        out.append(self.line_separator)
        return "".join(out)

    def _declaration(self, document) -> str:
        version = getattr(document, "version", None) or "1.0"
        declaration = f'<?xml version="{version}" encoding="{self.encoding}"'
        standalone = getattr(document, "standalone", None)
        if standalone is not None:
            declaration += ' standalone="yes"' if standalone else ' standalone="no"'
        return declaration + "?>"

    def _newline(self, level: int) -> str:
        return self.line_separator + self.indent * level

    def _comment(self, text: str) -> str:
        if self.comment_hook is not None:
            text = self.comment_hook(text)
        return f"<!--{text}-->"

    def _multiline(self, text: str) -> str:
        # expat hands us content with LF line breaks only
        return text.replace("\n", self.line_separator)

    def _write_node(self, node, level: int, out: List[str], preserve: bool = False) -> None:
        node_type = node.nodeType

        if node_type == Node.ELEMENT_NODE:
            self._write_element(node, level, out, preserve)
        elif node_type == Node.TEXT_NODE:
            text = collapse_whitespace(node.data)
            if text:
                out.append(self._newline(level))
                out.append(escape_text(text))
        elif node_type == Node.CDATA_SECTION_NODE:
            out.append(self._newline(level))
            out.append(f"<![CDATA[{self._multiline(node.data)}]]>")
        elif node_type == Node.COMMENT_NODE:
            out.append(self._newline(level))
            out.append(self._comment(node.data))
        elif node_type == Node.PROCESSING_INSTRUCTION_NODE:
            out.append(self._newline(level))
            out.append(self._processing_instruction(node))
        elif node_type == Node.DOCUMENT_TYPE_NODE:
            out.append(self._newline(level))
            out.append(self._doctype(node))
        else:
            logger.debug(f"Writing unsupported node type {node_type} as-is")
            out.append(self._newline(level))
            out.append(node.toxml())

    def _write_element(self, element, level: int, out: List[str], preserve: bool) -> None:
        preserve = self._preserves_space(element, preserve)

        out.append(self._newline(level))
        out.append(self._start_tag(element))

        if preserve:
            children = list(element.childNodes)
        else:
            children = [child for child in element.childNodes if not _is_blank_text(child)]

        if not children:
            out.append("/>")
            return

        out.append(">")
        if preserve:
            for child in children:
                self._write_verbatim(child, out)
        elif all(child.nodeType in _TEXT_NODES for child in children):
            out.append(self._inline_text(children))
        else:
            for child in children:
                self._write_node(child, level + 1, out)
            out.append(self._newline(level))
        out.append(f"</{element.tagName}>")

    def _write_verbatim(self, node, out: List[str]) -> None:
        node_type = node.nodeType

        if node_type == Node.ELEMENT_NODE:
            out.append(self._start_tag(node))
            if not node.childNodes:
                out.append("/>")
                return
            out.append(">")
            for child in node.childNodes:
                self._write_verbatim(child, out)
            out.append(f"</{node.tagName}>")
        elif node_type == Node.TEXT_NODE:
            out.append(self._multiline(escape_text(node.data)))
        elif node_type == Node.CDATA_SECTION_NODE:
            out.append(f"<![CDATA[{self._multiline(node.data)}]]>")
        elif node_type == Node.COMMENT_NODE:
            out.append(self._comment(node.data))
        elif node_type == Node.PROCESSING_INSTRUCTION_NODE:
            out.append(self._processing_instruction(node))
        else:
            out.append(node.toxml())

    def _inline_text(self, children) -> str:
        parts = []
        for child in children:
            if child.nodeType == Node.CDATA_SECTION_NODE:
                parts.append(f"<![CDATA[{self._multiline(child.data)}]]>")
            else:
                parts.append(escape_text(collapse_whitespace(child.data)))
        return "".join(parts)

    def _start_tag(self, element) -> str:
        parts = [f"<{element.tagName}"]
        for name, value in element.attributes.items():
            parts.append(f' {name}="{escape_attribute(value)}"')
        return "".join(parts)

    @staticmethod
    def _preserves_space(element, inherited: bool) -> bool:
        space = element.getAttribute("xml:space")
        if space == "preserve":
            return True
        if space == "default":
            return False
        return inherited

    def _processing_instruction(self, node) -> str:
        if node.data:
            return f"<?{node.target} {self._multiline(node.data)}?>"
        return f"<?{node.target}?>"

    @staticmethod
    def _doctype(doctype) -> str:
        text = f"<!DOCTYPE {doctype.name}"
        if doctype.publicId:
            text += f' PUBLIC "{doctype.publicId}" "{doctype.systemId or ""}"'
        elif doctype.systemId:
            text += f' SYSTEM "{doctype.systemId}"'
        if doctype.internalSubset:
            text += f" [{doctype.internalSubset}]"
        return text + ">"
