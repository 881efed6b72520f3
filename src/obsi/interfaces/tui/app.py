"""Full-screen terminal UI built on prompt_toolkit."""

import logging
from pathlib import Path

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import ConditionalContainer, HSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import TextArea

from obsi.core import claude, obs
from obsi.core.config import ObsiConfig
from obsi.core.prompt import get_amend_prompt
from obsi.core.types import DAILY_EDIT_TOOLS
from obsi.interfaces.tui.state import (
    HELP_COMMANDS,
    AppState,
    Menu,
    PendingAction,
    View,
)

logger = logging.getLogger(__name__)

Fragments = list[tuple[str, str]]

STYLE = Style.from_dict(
    {
        "title": "fg:ansiblue bold",
        "dim": "fg:ansibrightblack",
        "key": "fg:ansicyan",
        "cursor": "fg:ansicyan",
        "selected": "bold",
        "folder": "fg:ansiyellow",
        "message": "fg:ansigreen",
        "error": "fg:ansired",
        "preview": "",
        "preview.meta": "fg:ansibrightblack",
    }
)

HINTS = {
    View.HOME: "↑↓ navigate · Enter select · q quit",
    View.BROWSE: "↑↓ navigate · Enter select · Esc back",
    View.DAILY: "↑↓ navigate · Enter select · Esc back",
    View.CAPTURE: "Enter to save · Esc to cancel",
    View.HELP: "Esc back",
}


def render_menu(menu: Menu) -> Fragments:
    fragments: Fragments = []
    for index, item in enumerate(menu.items):
        active = index == menu.selected
        fragments.append(("class:cursor", ">" if active else " "))
        fragments.append(("class:dim", " ["))
        fragments.append(("class:key", item.key))
        fragments.append(("class:dim", "] "))
        fragments.append(("class:selected" if active else "", f"{item.label}\n"))
    return fragments


def render_home(state: AppState) -> Fragments:
    fragments = render_menu(state.home)
    stats = state.stats
    if stats is not None:
        daily = "daily note ready" if stats.daily else "no daily note yet"
        fragments.append(
            ("class:dim", f"\n{stats.total} notes · {stats.inbox} in Inbox · {daily}\n")
        )
    fragments.append(("class:dim", f"{state.vault_path}\n"))
    return fragments


def render_browse(state: AppState) -> Fragments:
    browse = state.browse
    fragments: Fragments = []
    for index, result in enumerate(browse.visible):
        active = index == browse.selected
        fragments.append(("class:cursor", ">" if active else " "))
        style = "class:folder" if result.is_folder else ""
        if active:
            style = f"{style} class:selected".strip()
        prefix = " 📁 " if result.is_folder else "    "
        fragments.append((style, f"{prefix}{result.path}\n"))

    if not browse.results:
        fragments.append(("class:dim", "No notes found\n"))
    if browse.hidden_count:
        fragments.append(("class:dim", f"  ... {browse.hidden_count} more\n"))

    if browse.acting:
        fragments.append(("", "\n"))
        for index, action in enumerate(browse.actions.items):
            style = "class:key" if index == browse.actions.selected else "class:dim"
            fragments.append((style, f"[{action.key}] {action.label}  "))
        fragments.append(("", "\n"))

    if browse.message:
        style = "class:error" if browse.message.startswith("Error") else "class:message"
        fragments.append((style, f"\n{browse.message}\n"))
    return fragments


def render_daily(state: AppState) -> Fragments:
    daily = state.daily
    fragments: Fragments = []
    for line in daily.preview.split("\n") if daily.preview else []:
        meta = line.startswith(("---", "tags:", "created:"))
        fragments.append(("class:preview.meta" if meta else "class:preview", f"  {line}\n"))
    fragments.append(("", "\n"))

    if daily.mode == "menu":
        fragments.extend(render_menu(daily.menu))
    elif daily.mode == "amend":
        fragments.append(
            ("class:dim", "e.g. add a task to call mom, remove completed items...\n")
        )
    elif daily.mode == "list":
        fragments.append(("class:selected", f"All Daily Notes ({len(daily.dates)})\n\n"))
        for index, name in enumerate(daily.dates[: daily.LIST_VISIBLE]):
            active = index == daily.list_selected
            fragments.append(("class:cursor", ">" if active else " "))
            fragments.append(("class:selected" if active else "", f" {name}\n"))
        if len(daily.dates) > daily.LIST_VISIBLE:
            fragments.append(
                ("class:dim", f" ... {len(daily.dates) - daily.LIST_VISIBLE} more\n")
            )

    if daily.error:
        fragments.append(("class:error", f"\n{daily.error}\n"))
    return fragments


def render_capture(state: AppState) -> Fragments:
    if not state.capture_message:
        return [("class:dim", "What's on your mind?\n")]
    style = "class:error" if state.capture_failed else "class:message"
    mark = "✗" if state.capture_failed else "✓"
    return [(style, f"{mark} {state.capture_message}\n")]


def render_help(state: AppState) -> Fragments:
    fragments: Fragments = [("class:selected", "Commands\n\n")]
    width = max(len(cmd) for cmd, _ in HELP_COMMANDS)
    for cmd, desc in HELP_COMMANDS:
        fragments.append(("class:key", f"  {cmd.ljust(width)}  "))
        fragments.append(("", f"{desc}\n"))
    fragments.append(("class:dim", f"\nVault: {state.vault_path}\n"))
    return fragments


RENDERERS = {
    View.HOME: render_home,
    View.BROWSE: render_browse,
    View.DAILY: render_daily,
    View.CAPTURE: render_capture,
    View.HELP: render_help,
}


def render_header(state: AppState) -> Fragments:
    if state.view == View.HOME:
        return [("class:title", "obsi"), ("class:dim", " · "), ("", state.vault_label)]
    if state.view == View.BROWSE:
        return [
            ("class:title", "Browse"),
            ("class:dim", f" · {len(state.browse.results)} notes"),
        ]
    if state.view == View.DAILY:
        return [("class:title", "Daily"), ("class:dim", f" · {state.daily.today.isoformat()}")]
    if state.view == View.CAPTURE:
        return [("class:title", "Quick Capture"), ("class:dim", " · to Inbox")]
    return [("class:title", "Help")]


def render_footer(state: AppState) -> Fragments:
    if state.view == View.BROWSE and state.browse.acting:
        return [("class:dim", "c/y/o or arrows · Enter confirm · Esc cancel")]
    if state.view == View.DAILY and state.daily.mode == "amend":
        return [("class:dim", "Enter to send · Esc cancel")]
    if state.view == View.DAILY and state.daily.mode == "list":
        return [("class:dim", "↑↓ navigate · Enter open · Esc back")]
    return [("class:dim", HINTS[state.view])]


class ObsiTUI:
    """One run of the full-screen application over a shared AppState.

    run() returns a PendingAction when the user picked something that needs
    the terminal, or None to quit.
    """

    SHORTCUT_KEYS = ("b", "d", "a", "?", "q", "v", "l", "c", "y", "o")

    def __init__(self, state: AppState):
        self.state = state
        self.input = TextArea(multiline=False, prompt="> ", height=1)
        self.input.buffer.on_text_changed += self._on_text_changed
        self.body = Window(
            FormattedTextControl(
                lambda: RENDERERS[self.state.view](self.state),
                focusable=True,
                show_cursor=False,
            ),
            wrap_lines=True,
        )
        root = HSplit(
            [
                Window(FormattedTextControl(lambda: render_header(self.state)), height=1),
                Window(height=1),
                ConditionalContainer(self.input, filter=Condition(self._wants_input)),
                self.body,
                Window(FormattedTextControl(lambda: render_footer(self.state)), height=1),
            ]
        )
        self.app: Application = Application(
            layout=Layout(root, focused_element=self.body),
            key_bindings=self._key_bindings(),
            style=STYLE,
            full_screen=True,
        )

    def run(self) -> PendingAction | None:
        self._sync_focus()
        return self.app.run()

    # --- state helpers ---

    def _wants_input(self) -> bool:
        state = self.state
        if state.view == View.BROWSE:
            return not state.browse.acting
        if state.view == View.CAPTURE:
            return True
        return state.view == View.DAILY and state.daily.mode == "amend"

    def _sync_focus(self) -> None:
        self.app.layout.focus(self.input if self._wants_input() else self.body)

    def _on_text_changed(self, buffer) -> None:
        if self.state.view == View.BROWSE:
            self.state.browse.set_query(buffer.text)

    def _navigate(self, view: View) -> None:
        self.state.navigate(view)
        if view in (View.BROWSE, View.CAPTURE):
            self.input.text = ""

    def _activate(self, value: str) -> None:
        if value == "quit":
            self.app.exit(result=None)
            return
        self._navigate(View(value))

    def _daily_action(self, value: str) -> None:
        daily = self.state.daily
        if value == "amend":
            daily.mode = "amend"
            self.input.text = ""
        elif value == "view":
            result = daily.open_today()
            daily.error = "" if result.success else result.error
        elif value == "list":
            daily.show_list()
        elif value == "back":
            self._navigate(View.HOME)

    def _finish(self, pending: PendingAction | None) -> None:
        if pending is not None:
            self.app.exit(result=pending)

    # --- key handlers ---

    def _escape(self) -> None:
        state = self.state
        if state.view == View.HOME:
            self.app.exit(result=None)
        elif state.view == View.BROWSE and state.browse.acting:
            state.browse.leave_actions()
        elif state.view == View.DAILY and state.daily.mode != "menu":
            state.daily.mode = "menu"
        else:
            self._navigate(View.HOME)

    def _move(self, delta: int) -> None:
        state = self.state
        if state.view == View.HOME:
            state.home.move(delta)
        elif state.view == View.BROWSE:
            if state.browse.acting:
                state.browse.actions.move(delta)
            else:
                state.browse.move(delta)
        elif state.view == View.DAILY:
            if state.daily.mode == "menu":
                state.daily.menu.move(delta)
            elif state.daily.mode == "list":
                state.daily.move_list(delta)

    def _enter(self) -> None:
        state = self.state
        if state.view == View.HOME:
            self._activate(state.home.current.value)
        elif state.view == View.BROWSE:
            if state.browse.acting:
                self._finish(state.browse.perform(state.browse.actions.current.value))
            else:
                state.browse.enter_actions()
        elif state.view == View.DAILY:
            daily = state.daily
            if daily.mode == "menu":
                self._daily_action(daily.menu.current.value)
            elif daily.mode == "amend":
                self._finish(daily.amend(self.input.text))
            elif daily.mode == "list":
                result = daily.open_selected()
                daily.error = "" if result.success else result.error
        elif state.view == View.CAPTURE:
            text = self.input.text
            if not text.strip():
                self._navigate(View.HOME)
            elif state.capture(text):
                self.input.text = ""
        else:
            self._navigate(View.HOME)

    def _shortcut(self, key: str) -> None:
        state = self.state
        if state.view == View.HOME:
            item = state.home.find(key)
            if item is not None:
                self._activate(item.value)
        elif state.view == View.BROWSE and state.browse.acting:
            item = state.browse.actions.find(key)
            if item is not None:
                self._finish(state.browse.perform(item.value))
        elif state.view == View.DAILY and state.daily.mode == "menu":
            item = state.daily.menu.find(key)
            if item is not None:
                self._daily_action(item.value)

    def _key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        typing = Condition(self._wants_input)
        acting = Condition(lambda: self.state.view == View.BROWSE and self.state.browse.acting)

        def handle(action):
            def handler(event) -> None:  # pragma: no cover - UI hook
                action()
                if not self.app.is_done:
                    self._sync_focus()

            return handler

        kb.add("c-c")(lambda event: event.app.exit(result=None))
        kb.add("escape", eager=True)(handle(self._escape))
        kb.add("enter")(handle(self._enter))
        kb.add("up")(handle(lambda: self._move(-1)))
        kb.add("down")(handle(lambda: self._move(1)))
        kb.add("k", filter=~typing)(handle(lambda: self._move(-1)))
        kb.add("j", filter=~typing)(handle(lambda: self._move(1)))
        kb.add("left", filter=acting)(handle(lambda: self._move(-1)))
        kb.add("right", filter=acting)(handle(lambda: self._move(1)))

        for key in self.SHORTCUT_KEYS:
            kb.add(key, filter=~typing)(handle(lambda key=key: self._shortcut(key)))
        return kb


def launch_tui(vault_path: Path, config: ObsiConfig) -> int:
    """
    Run the terminal UI until the user quits.

    Returns:
        Process exit code
    """
    state = AppState(vault_path=vault_path, config=config)
    if obs.is_installed():
        state.vault_info = obs.get_default_vault()
    state.navigate(View.HOME)

    while True:
        action = ObsiTUI(state).run()
        if action is None:
            return 0

        if not claude.is_installed():
            message = claude.install_instructions().splitlines()[0]
            if action.kind == "amend":
                state.daily.error = message
            else:
                state.browse.message = f"Error: {message}"
            continue

        if action.kind == "session":
            return claude.launch_session(action.cwd or vault_path)

        if action.kind == "amend":
            system_prompt = get_amend_prompt(state.daily.note_path)
            code = claude.run_claude(
                system_prompt, action.prompt, DAILY_EDIT_TOOLS, cwd=action.cwd
            )
            logger.debug(f"Daily amend finished with exit code {code}")
            state.daily.refresh_preview()
