import logging
import os
from pathlib import Path
from typing import List, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 80
IGNORED_DIRS = {"bin", "obj", ".git", ".vs", "node_modules"}
LISTED_EXTS = {".cs", ".csproj", ".sln", ".json", ".xml", ".md", ".yml", ".yaml"}

NO_FILES_NOTICE = "(No files found or all filtered out)"


def _should_skip(dirname: str) -> bool:
    return dirname.lower() in IGNORED_DIRS


def collect_files(root: Union[str, Path], max_files: int = DEFAULT_MAX_FILES) -> Tuple[List[str], bool]:
    """Return (relative paths, capped) for the listable files under ``root``.

    Paths come back in filesystem enumeration order, not sorted. Ignored
    directories are pruned from the walk rather than filtered afterwards.
    """
    root = Path(root)
    found: List[str] = []
    if max_files <= 0:
        return found, True
    for dirpath, dirnames, filenames in os.walk(root):
        # prune in place so ignored trees are never entered
        dirnames[:] = [d for d in dirnames if not _should_skip(d)]
        base = Path(dirpath)
        for name in filenames:
            p = base / name
            if p.suffix.lower() not in LISTED_EXTS or not p.is_file():
                continue
            found.append(str(p.relative_to(root)))
            if len(found) >= max_files:
                return found, True
    return found, False


def build_file_listing(root: Union[str, Path], max_files: int = DEFAULT_MAX_FILES) -> str:
    files, capped = collect_files(root, max_files)
    lines = list(files)
    if not files:
        lines.append(NO_FILES_NOTICE)
    if capped:
        lines.append(f"... (showing first {max_files})")
    logger.info("tree_listing root=%s files=%d capped=%s", root, len(files), capped)
    return "\n".join(lines)


def tree_message(root: Union[str, Path], listing: str) -> str:
    return f"Project file tree (root: {root}):\n\n```\n{listing}\n```"
