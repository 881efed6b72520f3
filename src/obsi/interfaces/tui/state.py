"""View state for the terminal UI.

Everything here is plain Python so views can be driven without a terminal;
app.py only maps keys onto these methods and renders the result.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from pathlib import Path

from obsi.core.config import ObsiConfig
from obsi.core.types import OperationResult, SearchResult, VaultEntry, VaultInfo, VaultStats
from obsi.vault import daily as daily_notes
from obsi.vault import notes
from obsi.vault.layout import INBOX_FOLDER, get_daily_path
from obsi.vault.scanner import scan
from obsi.vault.search import rank


class View(StrEnum):
    HOME = "home"
    BROWSE = "browse"
    DAILY = "daily"
    CAPTURE = "capture"
    HELP = "help"


@dataclass(frozen=True)
class MenuItem:
    label: str
    key: str
    value: str


HOME_MENU = [
    MenuItem("Browse vault", "b", "browse"),
    MenuItem("Daily note", "d", "daily"),
    MenuItem("Quick capture", "a", "capture"),
    MenuItem("Help", "?", "help"),
    MenuItem("Quit", "q", "quit"),
]

DAILY_MENU = [
    MenuItem("Amend with Claude", "a", "amend"),
    MenuItem("View in Obsidian", "v", "view"),
    MenuItem("All daily notes", "l", "list"),
    MenuItem("Back", "esc", "back"),
]

BROWSE_ACTIONS = [
    MenuItem("Claude Code", "c", "claude"),
    MenuItem("Copy path", "y", "copy"),
    MenuItem("Open", "o", "open"),
]

HELP_COMMANDS = [
    ("obsi daily", "Open/create today's daily note"),
    ("obsi task <text>", "Add a task to today's note"),
    ("obsi print <note>", "Print to terminal"),
    ("obsi search <q>", "Fuzzy search"),
    ("obsi search-content <q>", "Search contents"),
    ("obsi capture <text>", "Quick capture to Inbox"),
    ("obsi open <note>", "Open in Obsidian"),
    ("obsi move <from> <to>", "Move (updates links)"),
    ("obsi delete <note>", "Delete note"),
    ("obsi review", "AI inbox review"),
    ("obsi link <topic>", "AI related notes"),
    ("obsi summarize <note>", "AI summary"),
]


class Menu:
    """A vertical menu with a wrapping cursor."""

    def __init__(self, items: list[MenuItem]):
        self.items = list(items)
        self.selected = 0

    def move(self, delta: int) -> None:
        self.selected = (self.selected + delta) % len(self.items)

    @property
    def current(self) -> MenuItem:
        return self.items[self.selected]

    def find(self, key: str) -> MenuItem | None:
        key = key.lower()
        for item in self.items:
            if item.key == key:
                return item
        return None


@dataclass(frozen=True)
class PendingAction:
    """Work that needs the real terminal, run after the full-screen app exits.

    kind is "session" (interactive Claude in `cwd`, then quit) or "amend"
    (one-shot Claude on the daily note, then return to the daily view).
    """

    kind: str
    cwd: Path | None = None
    prompt: str = ""


class BrowseState:
    """Live fuzzy search over a snapshot of the vault."""

    VISIBLE = 12

    def __init__(self, vault_path: Path, config: ObsiConfig):
        self.vault_path = vault_path
        self.config = config
        self.entries: list[VaultEntry] = []
        self.query = ""
        self.results: list[SearchResult] = []
        self.selected = 0
        self.acting = False
        self.actions = Menu(BROWSE_ACTIONS)
        self.message = ""

    def refresh(self) -> None:
        """Rescan the vault and rerun the current query."""
        self.entries = scan(self.vault_path, self.config.note_extensions)
        self.set_query(self.query)

    def reset(self) -> None:
        self.query = ""
        self.selected = 0
        self.acting = False
        self.actions.selected = 0
        self.message = ""
        self.refresh()

    def set_query(self, query: str) -> None:
        self.query = query
        self.results = rank(
            self.entries,
            query,
            limit=self.config.browse_limit,
            threshold=self.config.fuzzy_threshold,
        )
        self.selected = min(self.selected, max(0, len(self.results) - 1))

    def move(self, delta: int) -> None:
        if not self.results:
            self.selected = 0
            return
        self.selected = max(0, min(len(self.results) - 1, self.selected + delta))

    @property
    def current(self) -> SearchResult | None:
        if 0 <= self.selected < len(self.results):
            return self.results[self.selected]
        return None

    @property
    def visible(self) -> list[SearchResult]:
        return self.results[: self.VISIBLE]

    @property
    def hidden_count(self) -> int:
        return max(0, len(self.results) - self.VISIBLE)

    def enter_actions(self) -> bool:
        """Open the action bar for the selected result."""
        if self.current is None:
            return False
        self.acting = True
        self.actions.selected = 0
        return True

    def leave_actions(self) -> None:
        self.acting = False
        self.actions.selected = 0

    def perform(self, action: str) -> PendingAction | None:
        """
        Run an action on the selected result.

        Returns:
            PendingAction when the action needs the terminal, else None
        """
        item = self.current
        if item is None:
            return None

        if action == "copy":
            result = notes.copy_path(self.vault_path, item.path)
            self.message = (
                f"Copied: {result.path}" if result.success else f"Error: {result.error}"
            )
        elif action == "open":
            result = notes.open_note(self.vault_path, item.path)
            if result.success:
                self.message = "Opened in file manager" if item.is_folder else "Opened"
            else:
                self.message = f"Error: {result.error}"
        elif action == "claude":
            result = notes.claude_directory(self.vault_path, item.path)
            if result.success:
                return PendingAction(kind="session", cwd=Path(result.path))
            self.message = f"Error: {result.error}"

        self.leave_actions()
        return None


class DailyState:
    """Today's daily note: preview, amend prompt and list of past notes."""

    PREVIEW_LINES = 15
    LIST_VISIBLE = 15

    def __init__(self, vault_path: Path, today: date | None = None):
        self.vault_path = vault_path
        self.today = today or date.today()
        self.mode = "menu"
        self.menu = Menu(DAILY_MENU)
        self.preview = ""
        self.error = ""
        self.dates: list[str] = []
        self.list_selected = 0

    @property
    def note_path(self) -> Path:
        return get_daily_path(self.vault_path, self.today)

    def load(self) -> None:
        """Create today's note when missing and refresh the preview."""
        result, _ = daily_notes.ensure_daily(self.vault_path, self.today)
        self.error = "" if result.success else result.error
        self.refresh_preview()

    def refresh_preview(self) -> None:
        self.preview = daily_notes.read_preview(
            self.vault_path, self.today, self.PREVIEW_LINES
        )

    def show_list(self) -> None:
        self.dates = daily_notes.list_daily_notes(self.vault_path)
        self.list_selected = 0
        self.mode = "list"

    def move_list(self, delta: int) -> None:
        if not self.dates:
            return
        self.list_selected = max(0, min(len(self.dates) - 1, self.list_selected + delta))

    @property
    def selected_date(self) -> str | None:
        if 0 <= self.list_selected < len(self.dates):
            return self.dates[self.list_selected]
        return None

    def open_selected(self) -> OperationResult:
        name = self.selected_date
        if name is None:
            return OperationResult.fail("No daily notes")
        return notes.open_note(self.vault_path, f"+Daily/{name}")

    def open_today(self) -> OperationResult:
        return notes.open_note(self.vault_path, f"+Daily/{self.today.isoformat()}")

    def amend(self, request: str) -> PendingAction | None:
        """Turn an amend request into a pending Claude run."""
        request = request.strip()
        self.mode = "menu"
        if not request:
            return None
        return PendingAction(kind="amend", cwd=self.note_path.parent, prompt=request)


@dataclass
class AppState:
    """State shared by all views."""

    vault_path: Path
    config: ObsiConfig
    view: View = View.HOME
    home: Menu = field(default_factory=lambda: Menu(HOME_MENU))
    stats: VaultStats | None = None
    vault_info: VaultInfo | None = None
    capture_message: str = ""
    capture_failed: bool = False
    browse: BrowseState = field(init=False)
    daily: DailyState = field(init=False)

    def __post_init__(self) -> None:
        self.browse = BrowseState(self.vault_path, self.config)
        self.daily = DailyState(self.vault_path)

    @property
    def vault_label(self) -> str:
        if self.vault_info is not None:
            return self.vault_info.name
        return self.vault_path.name

    def refresh_stats(self) -> None:
        self.stats = notes.vault_stats(self.vault_path)

    def navigate(self, view: View) -> None:
        self.view = view
        if view == View.HOME:
            self.refresh_stats()
        elif view == View.BROWSE:
            self.browse.reset()
        elif view == View.DAILY:
            self.daily.mode = "menu"
            self.daily.load()
        elif view == View.CAPTURE:
            self.capture_message = ""
            self.capture_failed = False

    def capture(self, text: str) -> bool:
        """
        Save captured text to the Inbox.

        Returns:
            True when something was saved
        """
        if not text.strip():
            return False
        result = notes.capture(self.vault_path, text)
        if result.success:
            self.capture_message = f"Saved to {INBOX_FOLDER}: {Path(result.path).stem}"
            self.capture_failed = False
        else:
            self.capture_message = result.error or "Failed to create note"
            self.capture_failed = True
        return result.success
