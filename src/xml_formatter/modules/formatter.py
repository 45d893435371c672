"""XML file formatter module.

Formats a single XML file in place. The file is parsed, written in canonical
form to a temporary file, optionally re-indented with tabs, and copied over
the original only when the two differ.
"""

import os
import re
import shutil
import logging
import tempfile
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from xml_formatter.modules.errors import XMLFormatterError, ParseError, SerializeError, CopyError
from xml_formatter.modules.line_endings import LineEndingPolicy, resolve_line_ending
from xml_formatter.modules.serializer import (
    CanonicalSerializer,
    DEFAULT_ENCODING,
    DEFAULT_INDENT,
    rewrite_comment_text
)
from xml_formatter.utils.hashing import ContentHasher

logger = logging.getLogger(__name__)

# ASCII only: non-breaking and other Unicode spaces are character data
_FOUR_WHITESPACE = re.compile(r"\s{4}", re.ASCII)
_LINE_SPLIT = re.compile(r"(\r\n|\r|\n)")


class FormatStatus(Enum):
    """Outcome of formatting one file."""

    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class FormatRequest(NamedTuple):
    """Everything needed to format one file."""

    path: str
    use_tabs: bool = False
    line_ending: LineEndingPolicy = LineEndingPolicy.AUTO
    encoding: Optional[str] = None


class FormatResult:
    """Class representing the outcome of formatting one file."""

    def __init__(self, path: str, status: FormatStatus, reason: Optional[str] = None):
        """Initialize a FormatResult object.

        Args:
            path: The absolute path of the file
            status: What happened to the file
            reason: Error message when the status is FAILED
        """
        self.path = path
        self.status = status
        self.reason = reason

    @property
    def changed(self) -> bool:
        """Return True if the file on disk was rewritten."""
        return self.status is FormatStatus.REWRITTEN

    def __repr__(self) -> str:
        """Return a string representation of the FormatResult object."""
        if self.reason:
            return f"FormatResult({self.status.value}, {self.path}, {self.reason!r})"
        return f"FormatResult({self.status.value}, {self.path})"


def parse_document(path: str):
    """Parse an XML file into a DOM document.

    Raises:
        ParseError: If the file cannot be read or is not well-formed
    """
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ParseError(f"Could not read {path}: {e}")

    try:
        document = minidom.parseString(data)
    except (ExpatError, ValueError) as e:
        raise ParseError(f"Failed to parse {path}: {e}")

    logger.debug(f"Successfully parsed file: {path}")
    return document


def read_file_as_string(path: str, encoding: Optional[str] = None) -> str:
    """Read a file as text without translating its line endings.

    Args:
        path: The file to read
        encoding: Text encoding, or None for the platform default

    Raises:
        ParseError: If the file cannot be read
    """
    try:
        with open(path, 'r', encoding=encoding, errors='replace', newline='') as f:
            return f.read()
    except (OSError, LookupError) as e:
        raise ParseError(f"Could not read {path}: {e}")


def get_line_ending(request: FormatRequest) -> str:
    """Return the line separator to format a file with.

    Falls back to the platform separator when KEEP finds no dominant ending.
    """
    content = None
    if request.line_ending is LineEndingPolicy.KEEP:
        content = read_file_as_string(request.path, request.encoding)

    separator = resolve_line_ending(request.line_ending, content)
    if separator is None:
        logger.debug(f"No dominant line ending in {request.path}, using platform default")
        separator = os.linesep
    return separator


def output_encoding(document) -> str:
    """Return the encoding a document is written in."""
    return getattr(document, "encoding", None) or DEFAULT_ENCODING


def split_lines(text: str) -> List[Tuple[str, str]]:
    """Split text into (line, terminator) pairs.

    Only CR, LF and CRLF end a line. The last pair has an empty terminator
    when the text does not end with a line break.
    """
    pieces = _LINE_SPLIT.split(text)
    lines = []
    for i in range(0, len(pieces) - 1, 2):
        lines.append((pieces[i], pieces[i + 1]))
    if pieces[-1]:
        lines.append((pieces[-1], ""))
    return lines


def tabify_line(line: str) -> str:
    """Replace each run of four whitespace characters with a tab."""
    return _FOUR_WHITESPACE.sub("\t", line)


def indent_file(path: str, encoding: str = DEFAULT_ENCODING) -> None:
    """Re-indent a formatted file with tabs, writing it back in place.

    Line count, order and line terminators are preserved.

    Raises:
        SerializeError: If the file cannot be read or written
    """
    try:
        with open(path, 'r', encoding=encoding, newline='') as f:
            text = f.read()

        lines = [tabify_line(line) + terminator for line, terminator in split_lines(text)]

        with open(path, 'w', encoding=encoding, errors='xmlcharrefreplace', newline='') as f:
            f.write("".join(lines))
    except (OSError, UnicodeError, LookupError) as e:
        raise SerializeError(f"Failed to indent {path} with tabs: {e}")


def _create_temporary_file() -> str:
    try:
        fd, tmp_path = tempfile.mkstemp(prefix="xmlFormatter", suffix=".xml")
    except OSError as e:
        raise SerializeError(f"Could not create temporary file: {e}")
    os.close(fd)
    return tmp_path


def _discard(tmp_path: str) -> None:
    try:
        os.remove(tmp_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not remove temporary file {tmp_path}: {e}")


def _release(document) -> None:
    try:
        document.unlink()
    except RecursionError:
        logger.debug("Document too deeply nested to unlink, leaving it to the garbage collector")


def write_canonical(document, tmp_path: str, line_separator: str, encoding: str) -> None:
    """Serialize a document in canonical form to a file.

    Raises:
        SerializeError: If the document cannot be serialized or written
    """
    serializer = CanonicalSerializer(
        line_separator,
        indent=DEFAULT_INDENT,
        encoding=encoding,
        comment_hook=rewrite_comment_text(line_separator, DEFAULT_INDENT)
    )
    try:
        data = serializer.serialize(document).encode(encoding, errors='xmlcharrefreplace')
    except (LookupError, UnicodeError) as e:
        raise SerializeError(f"Failed to serialize document: {e}")
    except RecursionError:
        raise SerializeError("Failed to serialize document: elements are nested too deeply")

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise SerializeError(f"Failed to write {tmp_path}: {e}")


def replace_if_changed(tmp_path: str, path: str, hasher: ContentHasher) -> FormatStatus:
    """Copy the formatted file over the original unless both are identical.

    When either digest is unavailable the bytes are copied anyway.

    Raises:
        CopyError: If copying the formatted content fails
    """
    formatted_hash = hasher.digest(tmp_path)
    original_hash = hasher.digest(path)
    if formatted_hash is not None and original_hash is not None and formatted_hash == original_hash:
        logger.info(f"File unchanged after formatting: {path}")
        return FormatStatus.UNCHANGED

    try:
        shutil.copyfile(tmp_path, path)
    except OSError as e:
        raise CopyError(f"File copying failed for: {tmp_path} -> {path}: {e}")

    logger.info(f"File reformatted: {path}")
    return FormatStatus.REWRITTEN


def _format(request: FormatRequest, hasher: ContentHasher) -> FormatStatus:
    document = parse_document(request.path)
    try:
        line_separator = get_line_ending(request)
        encoding = output_encoding(document)

        tmp_path = _create_temporary_file()
        try:
            write_canonical(document, tmp_path, line_separator, encoding)
            if request.use_tabs:
                indent_file(tmp_path, encoding)
            return replace_if_changed(tmp_path, request.path, hasher)
        finally:
            _discard(tmp_path)
    finally:
        _release(document)


def format_file(request: FormatRequest, hasher: Optional[ContentHasher] = None) -> FormatResult:
    """Format one XML file in place.

    Args:
        request: The file and formatting options
        hasher: Hasher used to compare the formatted and original content

    Returns:
        A FormatResult describing what happened. Files that do not exist or
        are not regular files are SKIPPED; errors are reported as FAILED.
    """
    path = request.path
    if not os.path.isfile(path):
        logger.info(f"File was not valid: {path}; skipping")
        return FormatResult(path, FormatStatus.SKIPPED)

    try:
        status = _format(request, hasher or ContentHasher())
    except XMLFormatterError as e:
        logger.error(f"File <{path}> failed to format, skipping and moving on to the next file: {e}")
        return FormatResult(path, FormatStatus.FAILED, str(e))

    return FormatResult(path, status)
