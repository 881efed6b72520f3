"""Daily notes for the vault.

A daily note lives at +Daily/YYYY-MM-DD.md and always carries a
`## Tasks` section. Notes move through three states: absent, created
from the template, and appended to. Appending never replaces existing
lines.
"""

import logging
import re
from datetime import date
from pathlib import Path

from obsi.core.types import OperationResult
from obsi.vault.frontmatter import build_frontmatter
from obsi.vault.layout import daily_note_name, get_daily_folder, get_daily_path

logger = logging.getLogger(__name__)

TASKS_HEADING = "## Tasks"
NOTES_HEADING = "## Notes"

_TASKS_LINE = re.compile(r"^## Tasks[ \t\r]*$", re.MULTILINE)
_SECTION_LINE = re.compile(r"^## ", re.MULTILINE)
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def task_line(content: str) -> str:
    return f"- [ ] {content}"


def append_task(text: str, content: str) -> str:
    """
    Insert a checklist item at the end of the Tasks section.

    - Tasks section followed by another `## ` heading: the item goes right
      before that heading, with one blank line between them.
    - Tasks section is the last section: the item goes at the end.
    - No Tasks section: a new one is appended.

    The content is inserted verbatim; this is a pure text transformation.
    """
    tasks = _TASKS_LINE.search(text)
    if tasks is None:
        return f"{text.rstrip()}\n\n{TASKS_HEADING}\n\n{task_line(content)}\n"

    next_section = _SECTION_LINE.search(text, tasks.end())
    if next_section is None:
        return f"{text.rstrip()}\n{task_line(content)}\n"

    before = text[: next_section.start()].rstrip()
    after = text[next_section.start() :]
    return f"{before}\n{task_line(content)}\n\n{after}"


def daily_template(target_date: date) -> str:
    """Content of a freshly created daily note."""
    title = daily_note_name(target_date)
    frontmatter = build_frontmatter({"created": target_date, "tags": ["daily"]})
    return (
        f"{frontmatter}\n"
        f"# {title}\n\n"
        f"{TASKS_HEADING}\n\n"
        "- [ ]\n\n"
        f"{NOTES_HEADING}\n\n"
    )


def ensure_daily(vault_path: Path, target_date: date | None = None) -> tuple[OperationResult, bool]:
    """
    Create the daily note for a date if it does not exist.

    Args:
        vault_path: Vault root
        target_date: Date for the note (defaults to today)

    Returns:
        (result, created) - created is True when the file was written now
    """
    target_date = target_date or date.today()
    path = get_daily_path(vault_path, target_date)
    if path.exists():
        return OperationResult.ok(path), False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(daily_template(target_date), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to create daily note {path}: {e}")
        return OperationResult.fail(str(e), path), False

    logger.info(f"Created daily note {path}")
    return OperationResult.ok(path), True


def append_to_daily(
    vault_path: Path, content: str, target_date: date | None = None
) -> OperationResult:
    """
    Add a task to the Tasks section of a daily note, creating the note first
    when needed.

    Returns:
        OperationResult with the note path
    """
    result, _ = ensure_daily(vault_path, target_date)
    if not result.success:
        return result

    path = Path(result.path)
    try:
        existing = path.read_text(encoding="utf-8")
        path.write_text(append_task(existing, content), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to append to {path}: {e}")
        return OperationResult.fail(str(e), path)

    logger.debug(f"Appended task to {path}")
    return OperationResult.ok(path)


def list_daily_notes(vault_path: Path) -> list[str]:
    """
    List daily note dates, newest first.

    Returns:
        ISO date strings; files that are not named by date are ignored
    """
    folder = get_daily_folder(vault_path)
    if not folder.is_dir():
        return []

    try:
        stems = [
            child.stem
            for child in folder.iterdir()
            if child.is_file() and child.suffix == ".md"
        ]
    except OSError as e:
        logger.debug(f"Cannot list {folder}: {e}")
        return []

    return sorted((s for s in stems if _ISO_DATE.match(s)), reverse=True)


def read_preview(vault_path: Path, target_date: date | None = None, lines: int = 15) -> str:
    """First lines of a daily note, or an empty string."""
    path = get_daily_path(vault_path, target_date or date.today())
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return ""
    return "\n".join(content.split("\n")[:lines])
