"""Content hashing utilities for xml formatter."""

import hashlib
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


class ContentHasher:
    """Computes hex digests of file contents for equality checks."""

    def __init__(self, algorithm: str = "sha1"):
        """Initialize a ContentHasher.

        Args:
            algorithm: Name of a hashlib algorithm
        """
        self.algorithm = algorithm

    def is_available(self) -> bool:
        """Return True if the configured algorithm can be used."""
        return self.algorithm.lower() in hashlib.algorithms_available

    def digest(self, path: Union[str, Path]) -> Optional[str]:
        """Return the lowercase hex digest of a file's bytes.

        A new hash object is created for every call so digests of different
        files never share state.

        Args:
            path: The file to hash

        Returns:
            The hex digest, or None if the algorithm is unavailable or the file
            cannot be read
        """
        try:
            sha = hashlib.new(self.algorithm)
        except ValueError:
            logger.debug(f"Digest algorithm {self.algorithm} is not available")
            return None

        try:
            with open(path, 'rb') as f:
                for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                    sha.update(chunk)
        except OSError as e:
            logger.debug(f"Could not read {path} for hashing: {e}")
            return None

        return sha.hexdigest()
