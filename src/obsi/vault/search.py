"""Fuzzy path ranking and note content search."""

import logging
from collections.abc import Sequence
from pathlib import Path

from rapidfuzz import fuzz, utils

from obsi.core.config import FUZZY_THRESHOLD, NOTE_EXTENSIONS, SEARCH_RESULT_LIMIT
from obsi.core.types import SearchResult, VaultEntry
from obsi.vault.scanner import iter_notes, scan

logger = logging.getLogger(__name__)


def match_score(query: str, path: str) -> float:
    """
    Fuzzy distance between a query and a path.

    Uses rapidfuzz's partial ratio on normalized strings (lowercased,
    punctuation folded to spaces), so the query may match anywhere in the
    path and small typos or swapped letters still score well.

    Returns:
        0.0 for an exact (sub)match up to 1.0 for no similarity
    """
    similarity = fuzz.partial_ratio(query, path, processor=utils.default_process)
    return round(1.0 - similarity / 100.0, 6)


def rank(
    entries: Sequence[VaultEntry],
    query: str,
    limit: int = SEARCH_RESULT_LIMIT,
    threshold: float = FUZZY_THRESHOLD,
) -> list[SearchResult]:
    """
    Rank vault entries against a query.

    With an empty query, returns the first `limit` notes (folders left out)
    in scan order. Otherwise every entry is scored, entries worse than
    `threshold` are dropped, and the rest are ordered folders first, then
    by ascending score; equal keys keep scan order. The fuzzy branch is not
    truncated.
    """
    if not query.strip():
        files = [entry for entry in entries if not entry.is_folder]
        return [SearchResult(entry=entry) for entry in files[:limit]]

    matches = []
    for entry in entries:
        score = match_score(query, entry.path)
        if score <= threshold:
            matches.append(SearchResult(entry=entry, score=score))

    matches.sort(key=lambda r: (not r.is_folder, r.score))
    logger.debug(f"rank({query!r}): {len(matches)} of {len(entries)} entries matched")
    return matches


def search_vault(
    vault_path: Path,
    query: str,
    limit: int = SEARCH_RESULT_LIMIT,
    threshold: float = FUZZY_THRESHOLD,
    extensions: tuple[str, ...] = NOTE_EXTENSIONS,
) -> list[SearchResult]:
    """Scan the vault and rank its entries."""
    return rank(scan(vault_path, extensions), query, limit=limit, threshold=threshold)


def search_content(
    vault_path: Path, query: str, extensions: tuple[str, ...] = NOTE_EXTENSIONS
) -> list[str]:
    """
    Find notes whose text contains the query (case-insensitive).

    Returns:
        Vault-relative paths of matching notes
    """
    needle = query.lower()
    results = []
    for relative, path in iter_notes(vault_path, extensions):
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Skipping unreadable note {path}: {e}")
            continue
        if needle in content.lower():
            results.append(relative)
    return results


def resolve_path(vault_path: Path, name: str) -> Path | None:
    """
    Resolve a note or folder name to an existing path.

    Tries the name as given, then with a .md extension.
    """
    for candidate in (vault_path / name, vault_path / f"{name}.md"):
        if candidate.exists():
            return candidate
    return None


def find_note(
    vault_path: Path, name: str, extensions: tuple[str, ...] = NOTE_EXTENSIONS
) -> Path | None:
    """
    Locate a note by path or by file name anywhere in the vault.

    Returns:
        Absolute path of the first match, or None
    """
    direct = resolve_path(vault_path, name)
    if direct is not None and direct.is_file():
        return direct

    for relative, path in iter_notes(vault_path, extensions):
        if (
            relative in (name, f"{name}.md")
            or relative.endswith(f"/{name}")
            or relative.endswith(f"/{name}.md")
        ):
            return path
    return None
