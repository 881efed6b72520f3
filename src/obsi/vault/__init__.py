"""Vault module: scanning, search and daily notes over a folder of Markdown.

Every function takes the vault root as an argument; nothing here reads
the configured vault on its own.
"""

from obsi.vault.daily import append_task, append_to_daily, ensure_daily
from obsi.vault.scanner import scan
from obsi.vault.search import rank, search_content

__all__ = [
    "append_task",
    "append_to_daily",
    "ensure_daily",
    "rank",
    "scan",
    "search_content",
]
