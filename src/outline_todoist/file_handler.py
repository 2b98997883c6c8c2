"""File handler module: path validation and encoding-aware read/write.

Outline files are the document side of the sync. They are read with
charset detection and written back in the encoding they came in, so a
sync never silently re-encodes a user's notes.
"""

import logging
from pathlib import Path

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

# =============================================================================
# Path Validation
# =============================================================================


def validate_file_path(path_str: str | Path) -> Path:
    """Validate and resolve an outline file path.

    Args:
        path_str: Absolute path to an existing file.

    Returns:
        Resolved Path object pointing to the real file.

    Raises:
        ValueError: If path is relative, doesn't exist, or is not a file.
    """
    path = Path(path_str)
    if not path.is_absolute():
        raise ValueError(f"Path must be absolute: {path_str}")
    resolved = path.resolve()
    if not resolved.exists():
        raise ValueError(f"File not found: {path_str}")
    if not resolved.is_file():
        raise ValueError(f"Path is not a file: {path_str}")
    return resolved


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Empty files and files whose encoding cannot be detected are treated
    as UTF-8.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    best = from_bytes(raw).best()
    if best is None:
        return (raw.decode("utf-8", errors="replace"), "utf-8")

    encoding = best.encoding
    # ascii is a strict subset of utf-8, and the sync writes emoji markers
    if encoding == "ascii":
        encoding = "utf-8"
    return (str(best), encoding)


def write_file(path: Path, content: str, encoding: str = "utf-8") -> int:
    """Write content to a file.

    Returns:
        Number of bytes written.
    """
    encoded = content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


# =============================================================================
# Outline document
# =============================================================================


class OutlineFile:
    """An outline document on disk: read it whole, replace it whole.

    Args:
        path: Absolute path to an existing file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = validate_file_path(path)
        self.encoding = "utf-8"

    def read(self) -> str:
        content, self.encoding = read_file_with_encoding(self.path)
        return content

    def replace(self, content: str) -> int:
        """Overwrite the document, keeping its original encoding.

        Falls back to UTF-8 if the original encoding cannot represent the
        new content (sync markers are emoji).
        """
        try:
            return write_file(self.path, content, self.encoding)
        except UnicodeEncodeError:
            logger.warning(
                "Cannot write %s as %s; writing UTF-8 instead",
                self.path,
                self.encoding,
            )
            self.encoding = "utf-8"
            return write_file(self.path, content, self.encoding)
