"""Shared types and data structures for obsi."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


@dataclass(frozen=True)
class VaultEntry:
    """One note or folder inside the vault.

    `path` is relative to the vault root, `/`-separated, without a leading
    slash, and never contains a dot-prefixed segment.
    """

    path: str
    is_folder: bool

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class SearchResult:
    """A VaultEntry annotated with its fuzzy-match score.

    Lower scores are better. `score` is None for unranked listings.
    """

    entry: VaultEntry
    score: float | None = None

    @property
    def path(self) -> str:
        return self.entry.path

    @property
    def is_folder(self) -> bool:
        return self.entry.is_folder


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a storage or subprocess operation."""

    success: bool
    error: str = ""
    path: str = ""

    @classmethod
    def ok(cls, path: str | Path = "") -> OperationResult:
        return cls(success=True, path=str(path))

    @classmethod
    def fail(cls, error: str, path: str | Path = "") -> OperationResult:
        return cls(success=False, error=error, path=str(path))


@dataclass(frozen=True)
class CommandResult:
    """Captured result of an external command."""

    success: bool
    output: str = ""
    error: str = ""


@dataclass(frozen=True)
class VaultInfo:
    """Default vault reported by the external vault CLI."""

    name: str
    path: str


@dataclass(frozen=True)
class VaultStats:
    """Counts shown on the home screen."""

    inbox: int
    total: int
    daily: bool


@dataclass(frozen=True)
class NoteInfo:
    """A note with its modification time, for recency listings."""

    name: str
    path: Path
    relative_path: str
    modified: float


class ClaudeTools(StrEnum):
    """Claude tool names for allowed tool lists."""

    READ = "Read"
    GREP = "Grep"
    GLOB = "Glob"
    BASH = "Bash"
    EDIT = "Edit"
    WRITE = "Write"


# Tools granted to the review/link/summarize commands
VAULT_READ_TOOLS = [
    ClaudeTools.BASH,
    ClaudeTools.READ,
    ClaudeTools.GLOB,
    ClaudeTools.GREP,
]

# Tools granted when amending a daily note
DAILY_EDIT_TOOLS = [ClaudeTools.READ, ClaudeTools.EDIT]
