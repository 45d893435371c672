"""XML formatter: normalize indentation and line endings of a project's XML files."""

__version__ = '1.0.0'
