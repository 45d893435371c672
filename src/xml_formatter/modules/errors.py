"""Exceptions raised by the xml formatter."""


class XMLFormatterError(Exception):
    """Base class for errors raised while formatting XML files."""
    pass


class ConfigError(XMLFormatterError):
    """Raised when the formatter configuration is invalid."""
    pass


class ParseError(XMLFormatterError):
    """Raised when a file cannot be read or is not well-formed XML."""
    pass


class SerializeError(XMLFormatterError):
    """Raised when the formatted output cannot be written."""
    pass


class CopyError(XMLFormatterError):
    """Raised when formatted content cannot be copied over the original file."""
    pass
