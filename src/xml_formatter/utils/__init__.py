"""Utilities package for xml formatter.

This package provides file selection and hashing helpers shared by the
formatter modules.
"""

# Re-export the public APIs
from xml_formatter.utils.files import DEFAULT_EXCLUDES, DEFAULT_INCLUDES, build_pathspec, get_included_files
from xml_formatter.utils.hashing import ContentHasher
