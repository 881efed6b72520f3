"""Recursive vault scan producing folder and note entries."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from obsi.core.config import NOTE_EXTENSIONS
from obsi.core.types import VaultEntry

logger = logging.getLogger(__name__)


def is_hidden(name: str) -> bool:
    """Dot-prefixed names (.obsidian, .git, .DS_Store) are never scanned."""
    return name.startswith(".")


def is_note(name: str, extensions: tuple[str, ...] = NOTE_EXTENSIONS) -> bool:
    """Check whether a file name has a note extension."""
    return name.endswith(extensions)


def _walk(
    directory: str, prefix: str, extensions: tuple[str, ...]
) -> Iterator[VaultEntry]:
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return

    for child in children:
        if is_hidden(child.name):
            continue
        relative = f"{prefix}{child.name}"
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            is_file = child.is_file()
        except OSError as e:
            logger.debug(f"Skipping {child.path}: {e}")
            continue

        if is_dir:
            yield VaultEntry(path=relative, is_folder=True)
            yield from _walk(child.path, f"{relative}/", extensions)
        elif is_file and is_note(child.name, extensions):
            yield VaultEntry(path=relative, is_folder=False)


def scan(
    root: Path | str, extensions: tuple[str, ...] = NOTE_EXTENSIONS
) -> list[VaultEntry]:
    """
    Scan a vault for folders and notes.

    Hidden entries are skipped, as are files without a note extension and
    directories that cannot be listed. A missing root yields an empty list.

    Args:
        root: Vault root directory
        extensions: File extensions that count as notes

    Returns:
        Entries in depth-first order, each folder before its contents
    """
    root = Path(root)
    if not root.is_dir():
        logger.debug(f"Vault root {root} does not exist")
        return []
    return list(_walk(str(root), "", tuple(extensions)))


def iter_notes(
    root: Path | str, extensions: tuple[str, ...] = NOTE_EXTENSIONS
) -> Iterator[tuple[str, Path]]:
    """Yield (relative path, absolute path) for every note in the vault."""
    root = Path(root)
    for entry in scan(root, extensions):
        if not entry.is_folder:
            yield entry.path, root / entry.path


def count_notes(root: Path | str, extensions: tuple[str, ...] = NOTE_EXTENSIONS) -> int:
    """Count notes in the vault."""
    return sum(1 for entry in scan(root, extensions) if not entry.is_folder)
