"""Project formatter module.

Formats every XML file selected under one or more base directories. A
FormatRun remembers which files were already formatted, so scanning a parent
directory and then its module directories formats each file only once.
"""

import os
import codecs
import logging
import threading
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from xml_formatter.modules.errors import ConfigError
from xml_formatter.modules.formatter import FormatRequest, FormatResult, FormatStatus, format_file
from xml_formatter.modules.line_endings import LineEndingPolicy, parse_line_ending_policy
from xml_formatter.utils.files import DEFAULT_EXCLUDES, DEFAULT_INCLUDES, get_included_files
from xml_formatter.utils.hashing import ContentHasher

logger = logging.getLogger(__name__)


class FormatRun:
    """The set of absolute file paths already handled during one run."""

    def __init__(self):
        self._processed = set()
        self._lock = threading.Lock()

    def claim(self, path: str) -> bool:
        """Record a path as processed.

        Returns:
            True if the path had not been seen before in this run
        """
        with self._lock:
            if path in self._processed:
                return False
            self._processed.add(path)
            return True

    @property
    def processed(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._processed)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._processed

    def __len__(self) -> int:
        with self._lock:
            return len(self._processed)


class FormatterConfig:
    """Options for formatting a project."""

    SETTINGS_KEYS = ('use_tabs', 'line_ending', 'encoding', 'includes', 'excludes')

    def __init__(
        self,
        base_directory: Optional[str] = None,
        includes: Optional[Sequence[str]] = None,
        excludes: Optional[Sequence[str]] = None,
        use_tabs: bool = False,
        line_ending: str = LineEndingPolicy.AUTO.value,
        encoding: Optional[str] = None
    ):
        """Initialize a FormatterConfig.

        Args:
            base_directory: Directory scanned for files, defaults to the current directory
            includes: Patterns of files to format, defaults to all XML files
            excludes: Patterns of files to skip, defaults to target folders
            use_tabs: Indent with tabs instead of four spaces
            line_ending: One of AUTO, KEEP, LF, CRLF or CR
            encoding: Encoding used to read files, None for the platform default
        """
        self.base_directory = base_directory
        # Passing any value, even an empty list, replaces the defaults
        self.includes = list(DEFAULT_INCLUDES) if includes is None else list(includes)
        self.excludes = list(DEFAULT_EXCLUDES) if excludes is None else list(excludes)
        self.use_tabs = use_tabs
        self.line_ending = line_ending
        self.encoding = encoding

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], **overrides) -> 'FormatterConfig':
        """Create a FormatterConfig from saved settings.

        Args:
            settings: Dictionary of saved settings, unknown keys are ignored
            **overrides: Values that take precedence over the settings; None values are ignored

        Returns:
            A new FormatterConfig
        """
        values = {key: settings[key] for key in cls.SETTINGS_KEYS if key in settings}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def to_settings(self) -> Dict[str, Any]:
        """Return the options that can be saved as user defaults."""
        return {
            'use_tabs': self.use_tabs,
            'line_ending': self.line_ending,
            'encoding': self.encoding,
            'includes': list(self.includes),
            'excludes': list(self.excludes),
        }

    def resolved_base_directory(self) -> str:
        return os.path.abspath(self.base_directory or os.getcwd())

    def validate(self) -> LineEndingPolicy:
        """Check the configuration before any file is touched.

        Returns:
            The configured line ending policy

        Raises:
            ConfigError: If the line ending, encoding or base directory is invalid
        """
        policy = parse_line_ending_policy(self.line_ending)
        if self.encoding is not None:
            try:
                codecs.lookup(self.encoding)
            except LookupError:
                raise ConfigError(f"Unknown encoding: {self.encoding}")
        base_directory = self.resolved_base_directory()
        if not os.path.isdir(base_directory):
            raise ConfigError(f"Base directory does not exist: {base_directory}")
        return policy

    def __repr__(self) -> str:
        return (f"FormatterConfig({self.base_directory!r}, use_tabs={self.use_tabs}, "
                f"line_ending={self.line_ending!r})")


class RunSummary:
    """Results of formatting the files of one or more directories."""

    def __init__(self):
        self.results: List[FormatResult] = []
        self.already_processed = 0

    def add(self, result: FormatResult) -> None:
        self.results.append(result)

    def extend(self, other: 'RunSummary') -> None:
        self.results.extend(other.results)
        self.already_processed += other.already_processed

    def count(self, status: FormatStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def failed(self) -> List[FormatResult]:
        return [result for result in self.results if result.status is FormatStatus.FAILED]

    @property
    def rewritten(self) -> List[FormatResult]:
        return [result for result in self.results if result.status is FormatStatus.REWRITTEN]

    def __repr__(self) -> str:
        counts = ", ".join(f"{status.value}={self.count(status)}" for status in FormatStatus)
        return f"RunSummary({counts}, already_processed={self.already_processed})"


def format_project(
    config: FormatterConfig,
    run: Optional[FormatRun] = None,
    hasher: Optional[ContentHasher] = None
) -> RunSummary:
    """Format all selected XML files under the configured base directory.

    Args:
        config: The formatting options
        run: Paths already formatted in this run; files in it are not formatted again
        hasher: Hasher used to detect unchanged files

    Returns:
        A RunSummary with one result per formatted file

    Raises:
        ConfigError: If the configuration is invalid. No file is touched in that case.
    """
    policy = config.validate()
    base_directory = config.resolved_base_directory()
    run = run if run is not None else FormatRun()
    hasher = hasher or ContentHasher()

    logger.debug(f"Base Directory: {base_directory}")
    if not hasher.is_available():
        logger.debug(f"Digest algorithm {hasher.algorithm} unavailable, every file will be rewritten")

    files_to_format = get_included_files(base_directory, config.includes, config.excludes)
    logger.debug(f"Format {len(files_to_format)} source files in {base_directory}")
    logger.debug("Formatting with tabs..." if config.use_tabs else "Formatting with spaces...")
    for include in files_to_format:
        logger.debug(f"file<{include}> is scheduled for formatting")

    summary = RunSummary()
    for include in files_to_format:
        path = os.path.abspath(os.path.join(base_directory, include))
        if not run.claim(path):
            logger.debug(f"Already formatted during this run: {path}")
            summary.already_processed += 1
            continue

        request = FormatRequest(path, config.use_tabs, policy, config.encoding)
        try:
            result = format_file(request, hasher)
        except Exception as e:
            logger.error(f"File <{path}> failed to format, skipping and moving on to the next file: {e}",
                         exc_info=True)
            result = FormatResult(path, FormatStatus.FAILED, str(e))
        summary.add(result)

    return summary


def format_directories(
    directories: Sequence[str],
    config: FormatterConfig,
    run: Optional[FormatRun] = None
) -> RunSummary:
    """Format several base directories within a single run.

    Every directory is validated before the first file is formatted.

    Args:
        directories: Base directories, possibly nested in one another
        config: Options shared by every directory; its base_directory is ignored
        run: Paths already formatted in this run

    Returns:
        The combined RunSummary

    Raises:
        ConfigError: If the configuration or any directory is invalid
    """
    run = run if run is not None else FormatRun()
    configs = []
    for directory in directories:
        directory_config = FormatterConfig.from_settings(config.to_settings(), base_directory=str(directory))
        directory_config.validate()
        configs.append(directory_config)

    hasher = ContentHasher()
    summary = RunSummary()
    for directory_config in configs:
        summary.extend(format_project(directory_config, run, hasher))
    return summary
