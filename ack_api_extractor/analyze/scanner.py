"""
Find where a controller calls an AWS API operation.

Sources are scanned line by line in a fixed order (directories and files
sorted by name). The first line matching any call pattern wins and the scan
stops there; later, possibly better, matches are not considered.
"""

import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from ack_api_extractor.analyze.patterns import DEFAULT_PATTERNS, CallPattern
from ack_api_extractor.controller import find_controller
from ack_api_extractor.models import SourceLocation

logger = logging.getLogger(__name__)

SOURCE_DIR = "pkg"
SOURCE_EXTENSIONS = (".go",)


def _raise_walk_error(error: OSError) -> None:
    raise error


def iter_source_files(root: Path, extensions: Sequence[str] = SOURCE_EXTENSIONS) -> Iterator[Path]:
    """
    Yield source files under ``root`` in deterministic order.

    Raises:
        OSError: If a directory can't be listed
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(tuple(extensions)):
                yield Path(dirpath) / filename


def find_operation(
    controller_root: Path,
    operation: str,
    patterns: Sequence[CallPattern] = DEFAULT_PATTERNS,
    source_dir: str = SOURCE_DIR,
    extensions: Sequence[str] = SOURCE_EXTENSIONS,
) -> SourceLocation | None:
    """
    Return the first call site of ``operation`` in a controller tree.

    Args:
        controller_root: Controller checkout directory
        operation: API operation name
        patterns: Call patterns to try on every line, in order
        source_dir: Subdirectory holding the sources to scan
        extensions: File suffixes to scan

    Returns:
        SourceLocation relative to ``controller_root``, or None if not found
    """
    source_root = Path(controller_root) / source_dir
    if not source_root.is_dir():
        return None

    compiled = [pattern.compile(operation) for pattern in patterns]

    try:
        for path in iter_source_files(source_root, extensions):
            try:
                with open(path, encoding="utf-8") as f:
                    for line_number, line in enumerate(f, start=1):
                        if any(regex.search(line) for regex in compiled):
                            relative = path.relative_to(controller_root).as_posix()
                            return SourceLocation(file=relative, line=line_number)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable source file {path}: {e}")
                continue
    except OSError as e:
        logger.warning(f"Failed to scan {source_root} for {operation}: {e}")
        return None

    return None


def find_operation_in_controller(
    service_name: str,
    operation: str,
    controllers_root: Path,
    patterns: Sequence[CallPattern] = DEFAULT_PATTERNS,
) -> SourceLocation | None:
    """Locate the service's controller and find the operation in it."""
    controller_root = find_controller(service_name, controllers_root)
    if controller_root is None:
        return None
    return find_operation(controller_root, operation, patterns)
