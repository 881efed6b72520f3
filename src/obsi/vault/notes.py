"""Note management: capture, read, open, copy path, stats."""

import logging
import re
import subprocess
import sys
from datetime import date, datetime
from pathlib import Path
from urllib.parse import quote

from obsi.core.config import NOTE_EXTENSIONS, SEARCH_RESULT_LIMIT
from obsi.core.types import NoteInfo, OperationResult, VaultStats
from obsi.vault.frontmatter import build_frontmatter
from obsi.vault.layout import (
    INBOX_FOLDER,
    get_daily_path,
    get_inbox_path,
    relative_note_path,
    vault_name,
)
from obsi.vault.scanner import count_notes, is_note, iter_notes
from obsi.vault.search import resolve_path

logger = logging.getLogger(__name__)

CAPTURE_TITLE_CHARS = 50

_SHELL_SPECIAL = re.compile(r"""([\\$`"!\s'()&;|<>*?\[\]#~%])""")


def read_note(path: Path) -> str:
    """Read a note, returning an empty string when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return ""


def create_note(
    vault_path: Path,
    name: str,
    content: str,
    folder: str = INBOX_FOLDER,
    overwrite: bool = False,
) -> OperationResult:
    """
    Create a note in a vault folder.

    Args:
        vault_path: Vault root
        name: Note name, with or without .md
        content: Full note text
        folder: Folder relative to the vault root (created when missing)
        overwrite: Replace an existing note

    Returns:
        OperationResult with the note path
    """
    filename = name if name.endswith(".md") else f"{name}.md"
    path = vault_path / folder / filename

    if path.exists() and not overwrite:
        return OperationResult.fail("Note already exists", path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        return OperationResult.fail(str(e), path)

    logger.debug(f"Created note {path}")
    return OperationResult.ok(path)


def capture_title(text: str) -> str:
    """Title for a captured note: its first characters, usable as a file name."""
    title = text.strip().splitlines()[0] if text.strip() else ""
    title = title[:CAPTURE_TITLE_CHARS].strip()
    return title.replace("/", "-").replace("\\", "-")


def capture(vault_path: Path, text: str, today: date | None = None) -> OperationResult:
    """Save free text as a new note in the Inbox."""
    title = capture_title(text)
    if not title:
        return OperationResult.fail("Nothing to capture")

    frontmatter = build_frontmatter(
        {
            "created": today or date.today(),
            "tags": ["inbox"],
            "source": "obsi cli",
        }
    )
    content = f"{frontmatter}\n# {title}\n\n{text}"
    return create_note(vault_path, title, content, folder=INBOX_FOLDER)


def shell_escape(path: str) -> str:
    """Backslash-escape characters the shell would interpret."""
    return _SHELL_SPECIAL.sub(r"\\\1", path)


def copy_path(vault_path: Path, name: str) -> OperationResult:
    """
    Copy a note's absolute path to the clipboard, escaped for `cd`.

    Returns:
        OperationResult whose path is the escaped string
    """
    full_path = resolve_path(vault_path, name)
    if full_path is None:
        return OperationResult.fail(f"Note not found: {name}")

    escaped = shell_escape(str(full_path))
    if sys.platform == "darwin":
        command = ["pbcopy"]
    else:
        command = ["xclip", "-selection", "clipboard"]

    try:
        result = subprocess.run(
            command, input=escaped, capture_output=True, text=True, check=False
        )
    except OSError as e:
        return OperationResult.fail(f"{command[0]}: {e}", escaped)

    if result.returncode != 0:
        return OperationResult.fail((result.stderr or "").strip(), escaped)
    return OperationResult.ok(escaped)


def obsidian_uri(vault_path: Path, note_path: Path) -> str:
    """obsidian://open URI for a note."""
    vault = quote(vault_name(vault_path), safe="")
    file = quote(relative_note_path(vault_path, note_path), safe="")
    return f"obsidian://open?vault={vault}&file={file}"


def _system_open(target: str) -> OperationResult:
    opener = "open" if sys.platform == "darwin" else "xdg-open"
    try:
        result = subprocess.run(
            [opener, target], capture_output=True, text=True, check=False
        )
    except OSError as e:
        return OperationResult.fail(f"{opener}: {e}")
    if result.returncode != 0:
        return OperationResult.fail((result.stderr or "").strip())
    return OperationResult.ok(target)


def open_note(vault_path: Path, name: str) -> OperationResult:
    """
    Open a note in Obsidian, or a folder in the file manager.
    """
    full_path = resolve_path(vault_path, name)
    if full_path is None:
        return OperationResult.fail(f"Note not found: {name}")

    if full_path.is_dir():
        return _system_open(str(full_path))
    return _system_open(obsidian_uri(vault_path, full_path))


def open_file(path: Path) -> OperationResult:
    """Open a file with the system default application."""
    return _system_open(str(path))


def claude_directory(vault_path: Path, name: str) -> OperationResult:
    """
    Directory to start Claude Code in for a vault item.

    Folders are used as-is; notes resolve to their parent folder.
    """
    full_path = resolve_path(vault_path, name)
    if full_path is None:
        return OperationResult.fail(f"Item not found: {name}")

    directory = full_path if full_path.is_dir() else full_path.parent
    return OperationResult.ok(directory)


def note_count(vault_path: Path, extensions: tuple[str, ...] = NOTE_EXTENSIONS) -> int:
    """Total notes in the vault."""
    return count_notes(vault_path, extensions)


def vault_stats(vault_path: Path, today: date | None = None) -> VaultStats:
    """Inbox size, total note count and whether today's daily note exists."""
    inbox = 0
    inbox_path = get_inbox_path(vault_path)
    if inbox_path.is_dir():
        try:
            inbox = sum(
                1 for child in inbox_path.iterdir() if child.is_file() and is_note(child.name)
            )
        except OSError as e:
            logger.debug(f"Cannot list {inbox_path}: {e}")

    daily = get_daily_path(vault_path, today or date.today()).exists()
    return VaultStats(inbox=inbox, total=note_count(vault_path), daily=daily)


def recent_notes(
    vault_path: Path,
    query: str = "",
    limit: int = SEARCH_RESULT_LIMIT,
    extensions: tuple[str, ...] = NOTE_EXTENSIONS,
) -> list[NoteInfo]:
    """
    Notes whose name or path contains the query, newest first.
    """
    needle = query.lower()
    notes = []
    for relative, path in iter_notes(vault_path, extensions):
        name = path.stem
        if needle and needle not in name.lower() and needle not in relative.lower():
            continue
        try:
            modified = path.stat().st_mtime
        except OSError:
            continue
        notes.append(
            NoteInfo(name=name, path=path, relative_path=relative, modified=modified)
        )

    notes.sort(key=lambda n: n.modified, reverse=True)
    return notes[:limit]


def relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Compact age of a timestamp: now, 5m, 3h, 2d, 2w, 3mo."""
    now = now or datetime.now()
    seconds = (now - moment).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "now"
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    if days < 7:
        return f"{days}d"
    if days < 30:
        return f"{days // 7}w"
    return f"{days // 30}mo"
