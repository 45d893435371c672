"""Modules package for xml formatter.

This package provides a unified API for the CLI and the interactive menu
to access the core functionality of xml formatter.
"""

import os

# Re-export the public APIs
from xml_formatter.modules.errors import XMLFormatterError, ConfigError, ParseError, SerializeError, CopyError
from xml_formatter.modules.line_endings import LineEndingPolicy, determine_line_ending, parse_line_ending_policy, resolve_line_ending
from xml_formatter.modules.serializer import CanonicalSerializer, rewrite_comment_text
from xml_formatter.modules.formatter import FormatRequest, FormatResult, FormatStatus, format_file, indent_file
from xml_formatter.modules.project_formatter import FormatRun, FormatterConfig, RunSummary, format_project, format_directories

# Define a version to track API compatibility
__api_version__ = '1.0.0'


def format_xml_file(path, use_tabs=False, line_ending="AUTO", encoding=None):
    """
    Format a single XML file in place.

    Args:
        path: Path to the file
        use_tabs: Indent with tabs instead of four spaces
        line_ending: One of AUTO, KEEP, LF, CRLF or CR
        encoding: Encoding used to read the file (optional)

    Returns:
        A FormatResult describing what happened to the file

    Raises:
        ConfigError: If the line ending is not a known policy
    """
    policy = parse_line_ending_policy(line_ending)
    return format_file(FormatRequest(os.path.abspath(path), use_tabs, policy, encoding))


def format_directory(base_directory=None, **kwargs):
    """
    Format all selected XML files under a directory.

    Args:
        base_directory: Directory to scan (optional - defaults to the current directory)
        **kwargs: Additional options accepted by FormatterConfig

    Returns:
        A RunSummary for the directory

    Raises:
        ConfigError: If the options are invalid
    """
    return format_project(FormatterConfig(base_directory=base_directory, **kwargs))
