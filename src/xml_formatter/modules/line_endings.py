"""Line ending policies and resolution."""

import os
import logging
from enum import Enum
from typing import Optional, Union

from xml_formatter.modules.errors import ConfigError

logger = logging.getLogger(__name__)

LF = "\n"
CRLF = "\r\n"
CR = "\r"


class LineEndingPolicy(Enum):
    """How the line ending of a formatted file is chosen."""

    AUTO = "AUTO"
    KEEP = "KEEP"
    LF = "LF"
    CRLF = "CRLF"
    CR = "CR"


_FIXED_LINE_ENDINGS = {
    LineEndingPolicy.LF: LF,
    LineEndingPolicy.CRLF: CRLF,
    LineEndingPolicy.CR: CR,
}


def parse_line_ending_policy(value: Union[str, LineEndingPolicy, None]) -> LineEndingPolicy:
    """Convert a configuration value to a LineEndingPolicy.

    Args:
        value: Policy name (case insensitive) or a LineEndingPolicy

    Returns:
        The matching LineEndingPolicy

    Raises:
        ConfigError: If the value is not a known policy
    """
    if isinstance(value, LineEndingPolicy):
        return value
    if value is None:
        raise ConfigError("Unknown value for lineEnding parameter: None")

    try:
        return LineEndingPolicy(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(policy.value for policy in LineEndingPolicy)
        raise ConfigError(f"Unknown value for lineEnding parameter: {value!r} (expected one of {valid})")


def determine_line_ending(text: str) -> Optional[str]:
    """Return the line ending used most often in text.

    A CR immediately followed by LF counts once, as CRLF.

    Args:
        text: The text to inspect

    Returns:
        The line ending with a strict majority over both others, or None on a
        tie or when the text has no line endings
    """
    lf_count = 0
    cr_count = 0
    crlf_count = 0

    i = 0
    length = len(text)
    while i < length:
        c = text[i]
        if c == '\r':
            if i + 1 < length and text[i + 1] == '\n':
                crlf_count += 1
                i += 1
            else:
                cr_count += 1
        elif c == '\n':
            lf_count += 1
        i += 1

    if lf_count > cr_count and lf_count > crlf_count:
        return LF
    if crlf_count > lf_count and crlf_count > cr_count:
        return CRLF
    if cr_count > lf_count and cr_count > crlf_count:
        return CR
    return None


def resolve_line_ending(policy: LineEndingPolicy, file_content: Optional[str] = None) -> Optional[str]:
    """Return the line separator for a policy.

    Args:
        policy: The configured line ending policy
        file_content: Text of the original file, only used by KEEP

    Returns:
        The separator string, or None when KEEP finds no majority
    """
    if policy is LineEndingPolicy.KEEP:
        return determine_line_ending(file_content or "")
    if policy is LineEndingPolicy.AUTO:
        return os.linesep
    return _FIXED_LINE_ENDINGS[policy]
