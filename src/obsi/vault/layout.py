"""Vault layout and path helpers.

Every helper takes the vault root explicitly.
"""

from datetime import date
from pathlib import Path

INBOX_FOLDER = "Inbox"
DAILY_FOLDER = "+Daily"

# Destinations suggested by inbox review
PARA_FOLDERS = {
    "Projects": "active project notes",
    "Areas": "ongoing responsibilities",
    "Resources": "reference material",
    "Archive": "completed/inactive",
}


def get_inbox_path(vault_path: Path) -> Path:
    """
    Get the inbox folder path.

    Returns:
        Path to inbox folder
    """
    return vault_path / INBOX_FOLDER


def get_daily_folder(vault_path: Path) -> Path:
    """Get the daily notes folder path."""
    return vault_path / DAILY_FOLDER


def daily_note_name(target_date: date) -> str:
    """Daily note stem, e.g. 2026-01-28."""
    return target_date.isoformat()


def get_daily_path(vault_path: Path, target_date: date) -> Path:
    """
    Get the path of the daily note for a date.

    Format: +Daily/2026-01-28.md
    """
    return get_daily_folder(vault_path) / f"{daily_note_name(target_date)}.md"


def relative_note_path(vault_path: Path, path: Path) -> str:
    """Vault-relative, `/`-separated path."""
    return path.relative_to(vault_path).as_posix()


def vault_name(vault_path: Path) -> str:
    """Vault name as Obsidian knows it (the folder name)."""
    return vault_path.name or "Obsi"
