"""Tests for the terminal UI state and rendering."""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

import obsi.interfaces.tui.app as tui_app
import obsi.interfaces.tui.state as tui_state
from obsi.core.config import ObsiConfig
from obsi.core.types import DAILY_EDIT_TOOLS, OperationResult
from obsi.interfaces.tui.state import (
    HOME_MENU,
    AppState,
    BrowseState,
    DailyState,
    Menu,
    PendingAction,
    View,
)

TODAY = date(2026, 1, 28)


def text_of(fragments) -> str:
    return "".join(text for _, text in fragments)


@pytest.fixture
def app_state(mock_vault: Path) -> AppState:
    return AppState(vault_path=mock_vault, config=ObsiConfig())


class TestMenu:
    """Tests for Menu."""

    def test_move_wraps(self):
        """The cursor wraps at both ends."""
        menu = Menu(HOME_MENU)

        menu.move(-1)

        assert menu.current.value == "quit"
        menu.move(1)
        assert menu.current.value == "browse"

    def test_find_shortcut(self):
        """Shortcut keys match case-insensitively."""
        assert Menu(HOME_MENU).find("D").value == "daily"
        assert Menu(HOME_MENU).find("x") is None


class TestBrowseState:
    """Tests for BrowseState."""

    def test_reset_lists_notes(self, mock_vault: Path):
        """Opening browse lists notes."""
        browse = BrowseState(mock_vault, ObsiConfig())

        browse.reset()

        assert [r.path for r in browse.results] == [
            "Inbox/test-note.md",
            "Projects/my-project.md",
        ]

    def test_query_puts_folders_first(self, mock_vault: Path):
        """A matching folder is selected first."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()

        browse.set_query("projects")

        assert browse.current.path == "Projects"
        assert browse.current.is_folder

    def test_selection_clamped(self, mock_vault: Path):
        """The cursor stays within the results."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()

        browse.move(10)
        assert browse.selected == 1
        browse.move(-10)
        assert browse.selected == 0

    def test_browse_limit_applies_to_listing(self, make_vault):
        """browse_limit caps the listing and twelve rows show."""
        root = make_vault({f"n{i:02}.md": "" for i in range(30)})
        browse = BrowseState(root, ObsiConfig(browse_limit=20))
        browse.reset()

        assert len(browse.results) == 20
        assert len(browse.visible) == BrowseState.VISIBLE
        assert browse.hidden_count == 20 - BrowseState.VISIBLE

    def test_no_results_cannot_act(self, mock_vault: Path):
        """No selection means no actions."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()
        browse.set_query("qqqqzzzz")

        assert browse.current is None
        assert not browse.enter_actions()
        assert browse.perform("open") is None

    def test_claude_on_folder_is_pending(self, mock_vault: Path):
        """Claude on a folder hands over the terminal."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()
        browse.set_query("projects")
        browse.enter_actions()

        pending = browse.perform("claude")

        assert pending == PendingAction(kind="session", cwd=mock_vault / "Projects")

    def test_claude_on_note_uses_parent(self, mock_vault: Path):
        """Claude on a note starts in its folder."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()

        pending = browse.perform("claude")

        assert pending.cwd == mock_vault / "Inbox"

    def test_copy_sets_message(self, mock_vault: Path, monkeypatch):
        """Copying reports the path and closes actions."""
        monkeypatch.setattr(
            tui_state.notes,
            "copy_path",
            MagicMock(return_value=OperationResult.ok("/x/y.md")),
        )
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()
        browse.enter_actions()

        assert browse.perform("copy") is None
        assert browse.message == "Copied: /x/y.md"
        assert not browse.acting

    def test_open_failure_message(self, mock_vault: Path, monkeypatch):
        """Open errors are shown."""
        monkeypatch.setattr(
            tui_state.notes,
            "open_note",
            MagicMock(return_value=OperationResult.fail("no opener")),
        )
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()

        browse.perform("open")

        assert browse.message == "Error: no opener"

    def test_snapshot_until_refresh(self, mock_vault: Path):
        """New notes appear only after a rescan."""
        browse = BrowseState(mock_vault, ObsiConfig())
        browse.reset()
        (mock_vault / "Inbox" / "later.md").write_text("")

        browse.set_query("")
        assert "Inbox/later.md" not in [r.path for r in browse.results]

        browse.refresh()
        assert "Inbox/later.md" in [r.path for r in browse.results]


class TestDailyState:
    """Tests for DailyState."""

    def test_load_creates_note(self, tmp_path: Path):
        """Loading creates today's note."""
        daily = DailyState(tmp_path, TODAY)

        daily.load()

        assert daily.note_path.exists()
        assert daily.preview.startswith("---")
        assert daily.error == ""

    def test_list_newest_first(self, make_vault):
        """The list is newest first and the cursor is clamped."""
        root = make_vault({"+Daily/2026-01-01.md": "", "+Daily/2026-01-02.md": ""})
        daily = DailyState(root, TODAY)

        daily.show_list()
        daily.move_list(5)

        assert daily.mode == "list"
        assert daily.dates == ["2026-01-02", "2026-01-01"]
        assert daily.selected_date == "2026-01-01"

    def test_open_selected_without_notes(self, tmp_path: Path):
        """Opening with no daily notes fails."""
        daily = DailyState(tmp_path, TODAY)
        daily.show_list()

        assert not daily.open_selected().success

    def test_amend(self, tmp_path: Path):
        """An amend request becomes a pending claude run."""
        daily = DailyState(tmp_path, TODAY)
        daily.mode = "amend"

        pending = daily.amend("  add a task to call mom  ")

        assert daily.mode == "menu"
        assert pending == PendingAction(
            kind="amend", cwd=tmp_path / "+Daily", prompt="add a task to call mom"
        )

    def test_empty_amend(self, tmp_path: Path):
        """A blank request does nothing."""
        assert DailyState(tmp_path, TODAY).amend("   ") is None


class TestAppState:
    """Tests for AppState."""

    def test_navigate_home_refreshes_stats(self, app_state: AppState):
        """Going home refreshes the counts."""
        app_state.navigate(View.HOME)

        assert app_state.stats.total == 2
        assert app_state.stats.inbox == 1

    def test_capture(self, app_state: AppState, mock_vault: Path):
        """Capture saves and reports the note."""
        assert app_state.capture("Remember the milk")

        assert app_state.capture_message == "Saved to Inbox: Remember the milk"
        assert (mock_vault / "Inbox" / "Remember the milk.md").exists()

    def test_capture_failure(self, app_state: AppState):
        """Capture failures are flagged."""
        app_state.capture("dup")

        assert not app_state.capture("dup")
        assert app_state.capture_failed
        assert app_state.capture_message == "Note already exists"

    def test_blank_capture_ignored(self, app_state: AppState):
        """Blank text is ignored."""
        assert not app_state.capture("  ")
        assert app_state.capture_message == ""

    def test_vault_label(self, app_state: AppState, mock_vault: Path):
        """Without obs the label is the folder name."""
        assert app_state.vault_label == mock_vault.name


class TestRender:
    """Tests for the view renderers."""

    def test_home(self, app_state: AppState):
        """Home shows the menu and counts."""
        app_state.navigate(View.HOME)

        text = text_of(tui_app.render_home(app_state))

        assert "Browse vault" in text
        assert "2 notes · 1 in Inbox" in text

    def test_browse_marks_folders_and_actions(self, app_state: AppState):
        """Folders get an icon and actions are listed."""
        app_state.navigate(View.BROWSE)
        app_state.browse.set_query("projects")
        app_state.browse.enter_actions()

        text = text_of(tui_app.render_browse(app_state))

        assert "📁 Projects" in text
        assert "[c] Claude Code" in text

    def test_browse_empty(self, app_state: AppState):
        """An empty result says so."""
        app_state.navigate(View.BROWSE)
        app_state.browse.set_query("qqqqzzzz")

        assert "No notes found" in text_of(tui_app.render_browse(app_state))

    def test_every_view_renders(self, app_state: AppState):
        """Every view has a body, header and footer."""
        for view in View:
            app_state.navigate(view)

            assert tui_app.RENDERERS[view](app_state)
            assert tui_app.render_header(app_state)
            assert tui_app.render_footer(app_state)

    def test_footer_while_acting(self, app_state: AppState):
        """The footer explains the action bar."""
        app_state.navigate(View.BROWSE)
        app_state.browse.enter_actions()

        assert "Esc cancel" in text_of(tui_app.render_footer(app_state))


class FakeTUI:
    """Stands in for the full-screen app, returning queued actions."""

    actions: list = []

    def __init__(self, state):
        self.state = state

    def run(self):
        return FakeTUI.actions.pop(0)


@pytest.fixture
def fake_tui(monkeypatch):
    monkeypatch.setattr(tui_app, "ObsiTUI", FakeTUI)
    monkeypatch.setattr(tui_app.obs, "is_installed", lambda: False)
    FakeTUI.actions = []
    return FakeTUI


class TestLaunchTui:
    """Tests for launch_tui()."""

    def test_quit(self, mock_vault: Path, fake_tui):
        """Quitting exits with 0."""
        fake_tui.actions = [None]

        assert tui_app.launch_tui(mock_vault, ObsiConfig()) == 0

    def test_session_hands_over_terminal(self, mock_vault: Path, fake_tui, monkeypatch):
        """A session replaces the TUI."""
        session = MagicMock(return_value=0)
        monkeypatch.setattr(tui_app.claude, "is_installed", lambda: True)
        monkeypatch.setattr(tui_app.claude, "launch_session", session)
        fake_tui.actions = [PendingAction(kind="session", cwd=mock_vault / "Projects")]

        assert tui_app.launch_tui(mock_vault, ObsiConfig()) == 0
        session.assert_called_once_with(mock_vault / "Projects")

    def test_amend_returns_to_app(self, mock_vault: Path, fake_tui, monkeypatch):
        """Amending runs claude then reopens the TUI."""
        run = MagicMock(return_value=0)
        monkeypatch.setattr(tui_app.claude, "is_installed", lambda: True)
        monkeypatch.setattr(tui_app.claude, "run_claude", run)
        fake_tui.actions = [
            PendingAction(kind="amend", cwd=mock_vault / "+Daily", prompt="add x"),
            None,
        ]

        assert tui_app.launch_tui(mock_vault, ObsiConfig()) == 0
        _, prompt, tools = run.call_args.args
        assert prompt == "add x"
        assert tools == DAILY_EDIT_TOOLS
        assert run.call_args.kwargs["cwd"] == mock_vault / "+Daily"

    def test_claude_missing(self, mock_vault: Path, fake_tui, monkeypatch):
        """A missing claude shows an error and keeps going."""
        monkeypatch.setattr(tui_app.claude, "is_installed", lambda: False)
        seen = []

        class Recording(FakeTUI):
            def run(self):
                seen.append(self.state.browse.message)
                return super().run()

        monkeypatch.setattr(tui_app, "ObsiTUI", Recording)
        fake_tui.actions = [PendingAction(kind="session", cwd=mock_vault), None]

        assert tui_app.launch_tui(mock_vault, ObsiConfig()) == 0
        assert seen[1].startswith("Error: Claude Code not found")
