"""Document discovery: every ``.html`` file below the build output directory."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable, List, NamedTuple

logger = logging.getLogger(__name__)


class DocumentEntry(NamedTuple):
    absolute_path: Path
    relative_path: str  # POSIX style, always starts with "/"


def _is_ignored(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return True when *relative_path* matches one of the glob *patterns*.

    Patterns are tried against the path with and without its leading slash so
    both ``drafts/*`` and ``/drafts/*`` work.
    """
    bare = relative_path.lstrip("/")
    return any(
        fnmatch.fnmatchcase(relative_path, pattern) or fnmatch.fnmatchcase(bare, pattern)
        for pattern in patterns
    )


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def walk(root_dir, ignore_paths: Iterable[str] = ()) -> List[DocumentEntry]:
    """List every HTML file under *root_dir*, sorted by relative path.

    Raises:
        FileNotFoundError: *root_dir* does not exist.
        NotADirectoryError: *root_dir* is not a directory.
        OSError: a directory below *root_dir* cannot be read.
    """
    root = Path(root_dir)
    if not root.exists():
        raise FileNotFoundError(f"Build output directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Build output path is not a directory: {root}")

    patterns = list(ignore_paths)
    entries: List[DocumentEntry] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        for name in filenames:
            if not name.endswith(".html"):
                continue
            absolute = Path(dirpath) / name
            relative = "/" + absolute.relative_to(root).as_posix()
            if patterns and _is_ignored(relative, patterns):
                logger.debug("Loader: ignoring %s", relative)
                continue
            entries.append(DocumentEntry(absolute, relative))

    entries.sort(key=lambda entry: entry.relative_path)
    logger.info("Loader: found %d HTML files in %s", len(entries), root)
    return entries
